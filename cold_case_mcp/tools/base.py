"""Base classes shared by the archive tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

ToolCallArguments = dict[str, Any]


class ToolError(Exception):
    """Raised by a tool handler when a command cannot be carried out."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        # Shown after the error as a separate system entry.
        self.hint = hint


class NotFoundError(ToolError):
    """A path or name lookup failed."""


class InvalidTargetError(ToolError):
    """The node exists but is the wrong kind for the operation."""


class AuthFailureError(ToolError):
    """A decrypt attempt used the wrong password."""


class PreconditionError(ToolError):
    """A required argument or state precondition is missing."""


class UnknownCommandError(ToolError):
    """The verb is not part of the command set."""


class CollaboratorError(ToolError):
    """An external collaborator (the assistant) failed."""


@dataclass
class ToolParameter:
    name: str
    type: str
    description: str
    required: bool = False
    enum: list[str] | None = None


@dataclass
class ToolExecResult:
    output: str | None = None
    error: str | None = None
    error_code: int = 0
    data: dict[str, Any] = field(default_factory=dict)


class Tool(ABC):
    """Interface every tool exposed over MCP implements."""

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_description(self) -> str:
        pass

    @abstractmethod
    def get_parameters(self) -> list[ToolParameter]:
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        pass
