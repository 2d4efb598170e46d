"""
Assistant collaborator protocol.

Defines what the terminal needs from the external reasoning assistant.
Uses structural typing (Protocol): any object with an async ``answer``
method works, which keeps tests free of network access.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class AssistantRequest:
    question: str
    system_instruction: str


class AssistantUnavailableError(RuntimeError):
    """Raised when no assistant backend is configured."""


@runtime_checkable
class AssistantAdapter(Protocol):
    async def answer(self, request: AssistantRequest) -> str:
        """
        Answer a question grounded in the supplied system instruction.

        Args:
            request: The user's question and the system instruction that embeds
                the current archive context.

        Returns:
            Plain response text.

        Raises:
            Any exception on failure. The terminal reports it as a single error
            entry and does not retry.
        """
        ...
