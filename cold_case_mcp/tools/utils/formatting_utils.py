from typing import List

from cold_case_mcp.models.archive import Node
from cold_case_mcp.models.session import ListingRow, LogEntry

from .constants import DATE_PLACEHOLDER, TYPE_TAGS

DATE_COLUMN = 12
TYPE_COLUMN = 8


def listing_header() -> str:
    return f"{'DATE':<{DATE_COLUMN}}{'TYPE':<{TYPE_COLUMN}}NAME"


def listing_row(node: Node) -> ListingRow:
    """Build the structured listing row for a directory entry."""
    date = getattr(node, "created_date", None) or DATE_PLACEHOLDER
    return ListingRow(date=date, type_tag=TYPE_TAGS[node.kind], name=node.name)


def format_listing_row(row: ListingRow) -> str:
    return f"{row.date:<{DATE_COLUMN}}{row.type_tag:<{TYPE_COLUMN}}{row.name}"


def format_entries(entries: List[LogEntry]) -> str:
    """
    Format transcript entries as plain text for non-interactive consumers.

    Command echoes are kept so the output reads like a console session.
    """
    return "\n".join(entry.content for entry in entries)
