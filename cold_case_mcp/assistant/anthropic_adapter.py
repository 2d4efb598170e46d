"""AssistantAdapter backed by the Anthropic Messages API."""

import logging

import anthropic

from .base import AssistantRequest, AssistantUnavailableError

logger = logging.getLogger(__name__)


class AnthropicAssistant:
    """
    Answers archive questions with a Claude model.

    The client is created lazily so the terminal can start without an API key;
    ``ask`` then reports the missing key as an ordinary collaborator failure.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 1024,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if not self.api_key:
            raise AssistantUnavailableError("ANTHROPIC_API_KEY is not configured.")
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def answer(self, request: AssistantRequest) -> str:
        logger.info("Sending question to %s (%d chars of instruction)", self.model, len(request.system_instruction))
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=request.system_instruction,
            messages=[{"role": "user", "content": request.question}],
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug("Assistant answered with %d chars", len(text))
        return text
