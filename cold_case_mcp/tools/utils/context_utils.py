from cold_case_mcp.models.archive import DirectoryNode, EncryptedNode, TextNode, iter_nodes
from cold_case_mcp.utils.path_utils import join_path

from .constants import (
    CONTEXT_TRUNCATED_NOTE,
    LOCKED_SECTION_MARKER,
    LOCKED_SECTION_NOTE,
    UNLOCKED_SECTION_MARKER,
)

TRUNCATED_BLOCK = f"\n{CONTEXT_TRUNCATED_NOTE}\n"


def _section(path: str, body: str) -> str:
    return f"\n=== FILE: {path} ===\n{body}\n"


def build_assistant_context(root: DirectoryNode, max_chars: int | None = None) -> str:
    """
    Serialize the readable state of the archive for the assistant.

    Text records contribute their body. Encrypted records contribute their
    secret body once unlocked and an explicit locked marker otherwise, so the
    assistant knows the file exists without seeing its content. Directories
    only contribute through their children.

    When ``max_chars`` is given and the full context does not fit, encrypted
    sections are always kept, text sections are kept in pre-order while they
    fit, and a truncation note is appended. Room for the note is reserved, so
    the result stays within ``max_chars`` unless the encrypted sections alone
    exceed it.

    Must be called right before each assistant request; the result reflects
    the lock state at call time.
    """
    sections: list[tuple[bool, str]] = []
    for path, node in iter_nodes(root):
        path_str = join_path(path)
        if isinstance(node, TextNode):
            sections.append((False, _section(path_str, node.body)))
        elif isinstance(node, EncryptedNode):
            if node.is_locked:
                body = f"{LOCKED_SECTION_MARKER}\n{LOCKED_SECTION_NOTE}"
            else:
                body = f"{UNLOCKED_SECTION_MARKER}\n{node.secret_body}"
            sections.append((True, _section(path_str, body)))

    full = "".join(section for _, section in sections)
    if max_chars is None or len(full) <= max_chars:
        return full

    budget = max_chars - len(TRUNCATED_BLOCK)
    budget -= sum(len(section) for encrypted, section in sections if encrypted)

    kept: list[str] = []
    text_open = True
    for encrypted, section in sections:
        if encrypted:
            kept.append(section)
        elif text_open and len(section) <= budget:
            kept.append(section)
            budget -= len(section)
        else:
            # Later text sections are dropped too, so the kept text is a prefix.
            text_open = False
    return "".join(kept) + TRUNCATED_BLOCK
