"""Defines the prompts served to MCP clients playing the case."""

from cold_case_mcp.content.case_99_042 import CASE_ID, CASE_TITLE

CASE_BRIEFING = f"""You are a guest detective with read-only access to the L.A.P.D. cold case archive.
Case {CASE_ID} "{CASE_TITLE}" was never closed. Somewhere in the archive is the location of the missing victim.

Use the `terminal` tool to type commands exactly as you would at a console:

- `help [command]` shows the available commands.
- `ls`, `cd [folder]`, `cd ..` and `cd /` move around the archive.
- `open [file]` reads a record. The extension can be omitted.
- `search [keyword]` searches file names and readable contents of the whole archive.
- `decrypt [file] [password]` unlocks an encrypted record.
- `ask [question]` consults the archive's analysis assistant about what you have found so far.

Read the evidence, work out the password from the clues, and open the encrypted record to solve the case.
"""


def get_prompts() -> dict[str, str]:
    """
    Returns a dictionary of available prompt components.
    """
    return {
        "case-briefing": CASE_BRIEFING,
    }
