import asyncio
import logging
from typing_extensions import override

from cold_case_mcp.assistant import AssistantAdapter, AssistantRequest, AssistantUnavailableError
from cold_case_mcp.models.archive import DirectoryNode, EncryptedNode, TextNode
from cold_case_mcp.models.session import ListingRow, LogEntry, SessionState
from cold_case_mcp.prompts import build_system_instruction
from cold_case_mcp.utils.path_utils import resolve_node

from .base import (
    AuthFailureError,
    CollaboratorError,
    InvalidTargetError,
    NotFoundError,
    PreconditionError,
    Tool,
    ToolCallArguments,
    ToolError,
    ToolExecResult,
    ToolParameter,
    UnknownCommandError,
)
from .utils.constants import DEFAULT_CONTEXT_MAX_CHARS, DEFAULT_DECRYPT_DELAY_SECONDS
from .utils.context_utils import build_assistant_context
from .utils.formatting_utils import format_entries, format_listing_row, listing_header, listing_row
from .utils.resolver_utils import find_file_path, resolve_file_name
from .utils.search_utils import search_archive

logger = logging.getLogger(__name__)

COMMAND_ALIASES = {
    "help": "help",
    "ls": "ls",
    "dir": "ls",
    "ll": "ls",
    "cd": "cd",
    "open": "open",
    "cat": "open",
    "read": "open",
    "view": "open",
    "decrypt": "decrypt",
    "unlock": "decrypt",
    "search": "search",
    "find": "search",
    "grep": "search",
    "ask": "ask",
    "ai": "ask",
    "clear": "clear",
}

GENERAL_HELP = [
    "  ls / dir               : list files in the current directory",
    "  cd [dir]               : change directory (cd .. goes up one level)",
    "  open [file]            : open a file (no extension needed)",
    "  search [keyword]       : search the whole database",
    "  decrypt [file] [pass]  : decrypt a file",
    "  ask [question]         : AI assistant analysis",
    "  clear                  : clear the screen",
    "  help [command]         : detailed help for a command",
]

COMMAND_HELP: dict[str, tuple[str, list[str]]] = {
    "ls": (
        "Command: ls",
        ["Description: list every file in the current directory."],
    ),
    "cd": (
        "Command: cd [directory]",
        [
            "Description: enter the given folder.",
            '      Use ".." to go up one level.',
            '      Use "/" to return to the root directory.',
        ],
    ),
    "open": (
        "Command: open [file]",
        ["Description: read the contents of a file. The extension can be omitted."],
    ),
    "decrypt": (
        "Command: decrypt [file] [password]",
        ["Description: unlock an encrypted file with its password."],
    ),
    "search": (
        "Command: search [keyword]",
        ["Description: search the whole database for files containing the keyword."],
    ),
    "ask": (
        "Command: ask [question]",
        ["Description: have the AI assistant analyse every clue known so far and answer your question."],
    ),
    "clear": (
        "Command: clear",
        ["Description: clear the screen."],
    ),
}


class ArchiveTerminalTool(Tool):
    """
    Command interpreter of the cold case archive.

    Each call to :meth:`run_command` processes one command line against an
    explicit session: the line is echoed into the transcript, the verb is
    dispatched to its handler, and every outcome is recorded as transcript
    entries. Errors raised by handlers are converted into a single error
    entry at the command boundary and never escape it.

    The only mutation of the archive tree is a successful ``decrypt``.
    """

    def __init__(
        self,
        assistant: AssistantAdapter,
        decrypt_delay: float = DEFAULT_DECRYPT_DELAY_SECONDS,
        context_max_chars: int | None = DEFAULT_CONTEXT_MAX_CHARS,
    ) -> None:
        self._assistant = assistant
        self._decrypt_delay = decrypt_delay
        self._context_max_chars = context_max_chars

    @override
    def get_name(self) -> str:
        return "terminal"

    @override
    def get_description(self) -> str:
        return """Type one command line into the cold case archive terminal.
Commands: help, ls, cd, open, decrypt, search, ask, clear. Run `help` for details.
The output is the transcript produced by the command."""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description="The command line to run, e.g. 'cd evidence' or 'open police_report'.",
                required=True,
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        session = arguments.get("_session")
        if not isinstance(session, SessionState):
            return ToolExecResult(
                error="SessionState not found in arguments. This is an internal server error.",
                error_code=-1,
            )

        command = arguments.get("command")
        if not isinstance(command, str):
            return ToolExecResult(error="Command must be a string.", error_code=-1)

        if session.busy:
            return ToolExecResult(error="Terminal busy: wait for the running command to finish.", error_code=-1)

        entries = await self.run_command(session, command)
        errors = [entry.content for entry in entries if entry.kind == "error"]
        return ToolExecResult(
            output=format_entries(entries),
            error="\n".join(errors) or None,
            error_code=1 if errors else 0,
            data={"cwd": session.display_path, "solved": session.solved},
        )

    async def run_command(self, session: SessionState, line: str) -> list[LogEntry]:
        """
        Runs one command line and returns the transcript entries it produced.

        Args:
            session: The session the command operates on. Updated in place.
            line: Raw input line. Blank lines are ignored.

        Returns:
            The entries appended to the transcript by this command. Empty after
            ``clear``.
        """
        raw = line.strip()
        if not raw:
            return []

        start = len(session.transcript)
        session.log("command", f"> {raw}")

        parts = raw.split()
        verb = parts[0].lower()
        args = parts[1:]
        logger.info("Running '%s' at %s", verb, session.display_path)

        try:
            directory = resolve_node(session.archive, session.current_path)
            if not isinstance(directory, DirectoryNode):
                raise NotFoundError("System error: path lost.")

            match COMMAND_ALIASES.get(verb):
                case "help":
                    self._help_handler(session, args)
                case "ls":
                    self._ls_handler(session, directory)
                case "cd":
                    self._cd_handler(session, directory, args)
                case "open":
                    self._open_handler(session, directory, args)
                case "decrypt":
                    await self._decrypt_handler(session, directory, args)
                case "search":
                    self._search_handler(session, args)
                case "ask":
                    await self._ask_handler(session, args)
                case "clear":
                    session.clear_transcript()
                case _:
                    raise UnknownCommandError(f"Invalid command: {verb}")
        except ToolError as e:
            logger.debug("Command '%s' failed: %s", verb, e.message)
            session.log("error", e.message)
            if e.hint:
                session.log("system", e.hint)

        return session.transcript[start:]

    def copy_listing_name(self, session: SessionState, row: ListingRow) -> LogEntry:
        """
        Records that a front end copied a listing name to the clipboard.

        The clipboard write itself belongs to the front end; this only appends
        the confirmation entry. Returns the entry that was appended.
        """
        logger.debug("Listing name '%s' copied", row.name)
        return session.log("success", f'System: copied "{row.name}" to clipboard.')

    def _help_handler(self, session: SessionState, args: list[str]) -> None:
        if not args:
            session.log("system", "Available commands:")
            for line in GENERAL_HELP:
                session.log("info", line)
            return

        topic = args[0].lower()
        help_text = COMMAND_HELP.get(COMMAND_ALIASES.get(topic, ""))
        if help_text is None:
            raise NotFoundError(f'No help found for "{topic}".')
        title, lines = help_text
        session.log("system", title)
        for line in lines:
            session.log("info", line)

    def _ls_handler(self, session: SessionState, directory: DirectoryNode) -> None:
        if not directory.children:
            session.log("info", "(directory is empty)")
            return

        session.log("system", listing_header())
        for node in directory.children.values():
            row = listing_row(node)
            kind = "success" if isinstance(node, DirectoryNode) else "info"
            session.log(kind, format_listing_row(row), listing=row)

    def _cd_handler(self, session: SessionState, directory: DirectoryNode, args: list[str]) -> None:
        if not args:
            raise PreconditionError("Usage: cd [directory]")

        target = args[0]
        if target == "..":
            if not session.current_path:
                raise PreconditionError("Access denied: already at the root directory.")
            session.current_path = session.current_path[:-1]
            return
        if target == "/":
            session.current_path = []
            return

        typed = target.lower()
        key = next((k for k in directory.children if k.lower() == typed), None)
        if key is None:
            raise NotFoundError(f"Directory not found: {target}", hint=self._directory_hint(session, target))
        if not isinstance(directory.children[key], DirectoryNode):
            raise InvalidTargetError(f"Not a directory: {key}", hint=self._directory_hint(session, target))
        session.current_path = [*session.current_path, key]

    def _directory_hint(self, session: SessionState, typed_name: str) -> str | None:
        path = find_file_path(session.archive, typed_name)
        if path is None:
            return None
        return f"Hint: found a similar name at '{path}'. Is it a file?"

    def _open_handler(self, session: SessionState, directory: DirectoryNode, args: list[str]) -> None:
        if not args:
            raise PreconditionError("Usage: open [file]")

        typed = args[0]
        key = resolve_file_name(directory.children, typed)
        if key is None:
            path = find_file_path(session.archive, typed)
            hint = f"Hint: found the file at '/{path}'. Enter that directory first." if path else None
            raise NotFoundError(f"File not found: {typed}", hint=hint)

        node = directory.children[key]
        match node:
            case DirectoryNode():
                raise InvalidTargetError(f"{key} is a directory. Use 'cd' to enter it.")
            case EncryptedNode(is_locked=True):
                session.log("error", "Access denied: file is encrypted.")
                session.log("info", node.locked_preview_text)
                session.log("system", f"Use 'decrypt {key} [password]' to unlock it.")
            case EncryptedNode():
                session.log("success", f"Opening encrypted file: {key}...")
                session.log("info", node.secret_body)
                if node.is_win_condition and not session.solved:
                    logger.info("Win condition record '%s' opened: case solved", key)
                    session.mark_solved()
            case TextNode():
                session.log("success", f"Opening file: {key}...")
                session.log("info", node.body)

    async def _decrypt_handler(self, session: SessionState, directory: DirectoryNode, args: list[str]) -> None:
        if len(args) < 2:
            raise PreconditionError("Usage: decrypt [file] [password]")

        typed, attempt = args[0], args[1]
        key = resolve_file_name(directory.children, typed)
        if key is None:
            raise NotFoundError(f"File not found: {typed}")

        node = directory.children[key]
        if not isinstance(node, EncryptedNode):
            raise PreconditionError(f"{key} is not an encrypted file.")
        if not node.is_locked:
            session.log("info", f"{key} is already unlocked.")
            return
        if attempt != node.password:
            logger.info("Wrong password for '%s'", key)
            raise AuthFailureError("Access denied: wrong password.")

        session.log("system", "Decrypting...")
        async with session.busy_scope():
            await asyncio.sleep(self._decrypt_delay)

        session.log("success", "Access granted.")
        node.unlock(attempt)
        logger.info("Record '%s' unlocked", key)
        session.log("success", f"File {key} unlocked. Use 'open' to view its contents.")

    def _search_handler(self, session: SessionState, args: list[str]) -> None:
        if not args:
            raise PreconditionError("Usage: search [keyword]")

        query = " ".join(args)
        session.log("system", f'Searching database: "{query}"...')
        matches = search_archive(session.archive, query)
        if not matches:
            session.log("info", "No matches found.")
            return
        for match in matches:
            session.log("success", match.describe())

    async def _ask_handler(self, session: SessionState, args: list[str]) -> None:
        if not args:
            raise PreconditionError("Usage: ask [your question]")

        question = " ".join(args)
        # Built fresh so the assistant sees the current lock state.
        context = build_assistant_context(session.archive, max_chars=self._context_max_chars)
        request = AssistantRequest(
            question=question,
            system_instruction=build_system_instruction(context),
        )

        try:
            async with session.busy_scope(awaiting_assistant=True):
                answer = await self._assistant.answer(request)
        except AssistantUnavailableError as e:
            logger.warning("Assistant unavailable: %s", e)
            raise CollaboratorError("Failed to reach the AI server. Please try again later.") from e
        except Exception as e:
            logger.error(f"Assistant call failed: {e}", exc_info=True)
            raise CollaboratorError("Failed to reach the AI server. Please try again later.") from e

        session.log("assistant", f"[AI ANALYSIS]:\n{answer.strip()}")
