"""Prompt texts: the MCP case briefing and the assistant's system instruction."""

from .assistant import build_system_instruction
from .system import get_prompts as get_system_prompts

__all__ = ["build_system_instruction", "get_all_prompts"]


def get_all_prompts() -> dict[str, str]:
    """
    Returns every prompt served to MCP clients, keyed by name.
    """
    prompts: dict[str, str] = {}
    prompts.update(get_system_prompts())
    return prompts
