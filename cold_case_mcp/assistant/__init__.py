from .anthropic_adapter import AnthropicAssistant
from .base import AssistantAdapter, AssistantRequest, AssistantUnavailableError

__all__ = ["AnthropicAssistant", "AssistantAdapter", "AssistantRequest", "AssistantUnavailableError"]
