"""
Entry points for the cold case archive.

`run_console` starts the interactive terminal; `run_server` exposes the same
terminal as an MCP server. Both handle environment loading and logging
configuration first.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv


def setup_environment(stream=None, default_level: str = "INFO") -> bool:
    """
    Loads environment variables and configures application-wide logging.
    It's expected that the correct .env file is loaded by the process runner (e.g., uv).
    """
    load_dotenv()

    log_level = os.environ.get("LOG_LEVEL", default_level).upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=stream,
    )
    logging.info("Environment and logging configured.")
    return True


def run_server() -> None:
    """
    Sets up the environment and runs the MCP server.
    """
    if not setup_environment():
        logging.critical("Initial environment setup failed. Exiting.")
        sys.exit(1)

    # Import server components after setup to ensure environment is loaded first.
    from .server import mcp_app, server_config

    logger = logging.getLogger(__name__)
    logger.info("--- Cold Case Archive MCP Server ---")
    logger.info("Starting server with transport: %s", server_config.MCP_TRANSPORT)
    if server_config.MCP_TRANSPORT != "stdio":
        logger.info(
            "Server will listen on: %s:%s",
            server_config.MCP_HOST,
            server_config.MCP_PORT,
        )

    mcp_app.run(transport=server_config.MCP_TRANSPORT)


def run_console() -> None:
    """
    Sets up the environment and starts the interactive terminal.
    """
    # Quieter by default: log lines share the screen with the transcript.
    if not setup_environment(stream=sys.stderr, default_level="WARNING"):
        logging.critical("Initial environment setup failed. Exiting.")
        sys.exit(1)

    from .console import run_console as console_loop
    from .utils.dependencies import get_archive_terminal_provider, get_session_manager

    session = get_session_manager().get_session()
    asyncio.run(console_loop(get_archive_terminal_provider(), session))


if __name__ == "__main__":
    run_console()
