"""
MCP server definition for the cold case archive terminal.
"""

import logging
from typing import Any

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from cold_case_mcp.prompts import get_all_prompts
from cold_case_mcp.utils.config import ServiceConfig
from cold_case_mcp.utils.dependencies import (
    get_archive_terminal_provider,
    get_base_config,
    get_session_manager,
)


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """Custom FastMCP server with CORS middleware."""

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        """A helper to add CORS middleware to a Starlette app."""
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=".*",
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "cold-case-archive",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
    )


# Also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


# --- Prompt Handlers ---
@mcp_app.prompt(title="Cold Case Briefing")
def case_briefing() -> str:
    """Briefs an agent on the case and on how to use the terminal."""
    return get_all_prompts()["case-briefing"]


# --- Tool Definitions ---

@mcp_app.tool()
async def terminal(
    context: Context,
    command: str,
) -> dict[str, Any]:
    """
    Types one command line into the cold case archive terminal.

    Args:
        command: The command line, e.g. 'ls', 'cd evidence', 'open police_report',
            'decrypt coordinates 000000', 'search Maya' or 'ask who is Maya?'.
            Run 'help' for the full list.

    Returns:
        A dictionary with the transcript produced by the command, the current
        directory and whether the case is solved.
    """
    logger.info(f"Executing terminal command: {command}")
    try:
        session = get_session_manager().get_session()
        tool = get_archive_terminal_provider()
        result = await tool.execute({"command": command, "_session": session})
        if result.error_code < 0:
            return {"status": "error", "error": result.error, "exit_code": result.error_code}
        return {
            "status": "error" if result.error else "success",
            "result": result.output,
            "error": result.error,
            "exit_code": result.error_code,
            **result.data,
        }
    except Exception as e:
        logger.error(f"Error executing terminal command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def transcript(context: Context) -> dict[str, Any]:
    """
    Returns the full transcript of the session so far.

    Returns:
        A dictionary with the transcript entries, the current directory, and the
        busy and solved flags.
    """
    session = get_session_manager().get_session()
    return {
        "status": "success",
        "entries": [entry.model_dump(exclude_none=True) for entry in session.transcript],
        "cwd": session.display_path,
        "busy": session.busy,
        "solved": session.solved,
    }


@mcp_app.tool()
async def reset_session(context: Context) -> dict[str, Any]:
    """
    Starts the case over: every encrypted record is locked again and the
    transcript is reset to the boot banner.
    """
    session = get_session_manager().get_session()
    if session.busy:
        return {"status": "error", "error": "Terminal busy: wait for the running command to finish.", "exit_code": -1}
    session = get_session_manager().reset()
    return {"status": "success", "cwd": session.display_path, "solved": session.solved}
