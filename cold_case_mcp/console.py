"""
Interactive console for the cold case archive.

Renders transcript entries with rich and feeds typed lines to the
ArchiveTerminalTool one at a time. Input is not read again until the
previous command has fully settled.
"""

import asyncio
from datetime import date

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.rule import Rule

from cold_case_mcp.content.case_99_042 import CASE_ID, SOLVED_BANNER
from cold_case_mcp.models.session import LogEntry, SessionState
from cold_case_mcp.tools.archive_terminal_tool import ArchiveTerminalTool

AMBER = "#ffb000"

KIND_STYLES = {
    "error": "#ff4444",
    "success": "#ffffaa",
    "system": "#885500",
    "assistant": "#00e5ff",
    "command": f"bold {AMBER}",
    "info": AMBER,
}


def render_entry(console: Console, entry: LogEntry) -> None:
    style = KIND_STYLES.get(entry.kind, AMBER)
    console.print(escape(entry.content), style=style, highlight=False)


def render_header(console: Console) -> None:
    title = f"L.A.P.D. ARCHIVE DATABASE   {date.today().isoformat()}   CASE {CASE_ID}"
    console.print(Rule(title, style=AMBER))


def prompt_label(session: SessionState) -> str:
    return f"[bold {AMBER}]GUEST@LAPD:{escape(session.display_path)}$[/]"


async def run_command_with_indicator(
    console: Console, terminal: ArchiveTerminalTool, session: SessionState, line: str
) -> list[LogEntry]:
    """Runs a command, showing a pending indicator while the session is busy."""
    task = asyncio.create_task(terminal.run_command(session, line))
    # Let the command run up to its first suspension point.
    await asyncio.sleep(0)
    if task.done() or not session.busy:
        return await task
    message = "Analyzing database..." if session.awaiting_assistant else "Working..."
    with console.status(message, spinner="dots", spinner_style=AMBER):
        return await task


async def run_console(terminal: ArchiveTerminalTool, session: SessionState, console: Console | None = None) -> None:
    """Main console loop. Returns on EOF or Ctrl-C."""
    console = console or Console()
    render_header(console)
    for entry in session.transcript:
        render_entry(console, entry)

    while True:
        try:
            line = Prompt.ask(prompt_label(session), console=console)
        except (EOFError, KeyboardInterrupt):
            break

        # The typed line is already on screen, so its echo is not printed again.
        entries = await run_command_with_indicator(console, terminal, session, line)
        if line.strip() and not session.transcript:
            console.clear()
            render_header(console)
        for entry in entries:
            if entry.kind != "command":
                render_entry(console, entry)

        if session.solved:
            console.print(SOLVED_BANNER, style=KIND_STYLES["success"], highlight=False)

    console.print("Connection closed.", style=KIND_STYLES["system"])
