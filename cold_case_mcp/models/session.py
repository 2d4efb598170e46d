from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from cold_case_mcp.models.archive import DirectoryNode, win_condition_nodes

LogKind = Literal["info", "error", "success", "command", "system", "assistant"]


class ListingRow(BaseModel):
    """Structured data for one row of a directory listing."""

    date: str
    type_tag: str
    name: str


class LogEntry(BaseModel):
    kind: LogKind
    content: str
    listing: ListingRow | None = None


class SessionState(BaseModel):
    """Stores the state of the single guest session."""

    archive: DirectoryNode
    current_path: list[str] = Field(default_factory=list)
    transcript: list[LogEntry] = Field(default_factory=list)
    solved: bool = False
    awaiting_assistant: bool = False
    busy: bool = False

    @model_validator(mode="after")
    def _check_win_condition(self) -> "SessionState":
        count = len(win_condition_nodes(self.archive))
        if count != 1:
            raise ValueError(f"Archive must declare exactly one win condition record, found {count}")
        return self

    @property
    def display_path(self) -> str:
        return "~/" + "/".join(self.current_path) if self.current_path else "~"

    def log(self, kind: LogKind, content: str, listing: ListingRow | None = None) -> LogEntry:
        entry = LogEntry(kind=kind, content=content, listing=listing)
        self.transcript.append(entry)
        return entry

    def clear_transcript(self) -> None:
        self.transcript = []

    def mark_solved(self) -> None:
        # Monotonic, never reset.
        self.solved = True

    @asynccontextmanager
    async def busy_scope(self, awaiting_assistant: bool = False) -> AsyncIterator[None]:
        """Marks the session busy for the duration of a suspended operation."""
        self.busy = True
        self.awaiting_assistant = awaiting_assistant
        try:
            yield
        finally:
            self.busy = False
            self.awaiting_assistant = False
