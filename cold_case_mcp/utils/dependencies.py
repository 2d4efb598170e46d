"""
Configuration and dependency management for the cold case terminal.
"""

import logging
from functools import lru_cache

from cold_case_mcp.assistant import AnthropicAssistant
from cold_case_mcp.tools.archive_terminal_tool import ArchiveTerminalTool
from cold_case_mcp.utils.config import ServiceConfig
from cold_case_mcp.utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base configuration from environment variables.

    Cached so the environment is read and parsed only once.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_session_manager() -> SessionManager:
    """Returns the singleton SessionManager."""
    logger.info("Initializing SessionManager singleton.")
    return SessionManager()


@lru_cache
def get_assistant_provider() -> AnthropicAssistant:
    """Returns a cached assistant adapter configured from the environment."""
    config = get_base_config()
    if not config.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY is not set. The 'ask' command will report an error.")
    return AnthropicAssistant(
        api_key=config.ANTHROPIC_API_KEY,
        model=config.ASSISTANT_MODEL,
        max_tokens=config.ASSISTANT_MAX_TOKENS,
        timeout=config.ASSISTANT_TIMEOUT_SECONDS,
    )


@lru_cache
def get_archive_terminal_provider() -> ArchiveTerminalTool:
    """Returns a cached instance of the ArchiveTerminalTool."""
    logger.info("Initializing ArchiveTerminalTool singleton.")
    config = get_base_config()
    return ArchiveTerminalTool(
        assistant=get_assistant_provider(),
        decrypt_delay=config.DECRYPT_DELAY_SECONDS,
        context_max_chars=config.ASSISTANT_CONTEXT_MAX_CHARS,
    )
