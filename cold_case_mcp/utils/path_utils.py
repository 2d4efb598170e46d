from collections.abc import Sequence

from cold_case_mcp.models.archive import DirectoryNode, Node


def resolve_node(root: DirectoryNode, path: Sequence[str]) -> Node | None:
    """
    Resolves a path of directory names against the archive root.

    Args:
        root: The root directory of the archive.
        path: Names from the root down to the target. Empty means the root itself.

    Returns:
        The node at the path, or None if a segment is missing or a non-directory
        is met before the last segment.
    """
    current: Node = root
    for segment in path:
        if not isinstance(current, DirectoryNode):
            return None
        child = current.children.get(segment)
        if child is None:
            return None
        current = child
    return current


def join_path(parts: Sequence[str]) -> str:
    return "/".join(parts)
