from collections.abc import Mapping

from cold_case_mcp.models.archive import DirectoryNode, Node, iter_nodes
from cold_case_mcp.utils.path_utils import join_path


def strip_extension(name: str) -> str:
    """Drops the final ``.extension`` suffix: ``coordinates.enc`` -> ``coordinates``."""
    stem, dot, _ = name.rpartition(".")
    return stem if dot else name


def _matches(name: str, typed: str) -> bool:
    return name.lower() == typed or strip_extension(name).lower() == typed


def resolve_file_name(children: Mapping[str, Node], typed_name: str) -> str | None:
    """
    Matches a user-typed name against the entries of one directory.

    An exact case-insensitive match wins. Otherwise the first entry (in
    insertion order) whose extension-less name matches is returned.

    Returns:
        The stored key, or None if nothing matches.
    """
    typed = typed_name.lower()
    for key in children:
        if key.lower() == typed:
            return key
    for key in children:
        if strip_extension(key).lower() == typed:
            return key
    return None


def find_file_path(root: DirectoryNode, typed_name: str) -> str | None:
    """
    Searches the whole archive for an entry matching ``typed_name``.

    Only used to build hint messages. Returns the first match in pre-order
    as a slash-joined path from the root, or None.
    """
    typed = typed_name.lower()
    for path, _ in iter_nodes(root):
        if _matches(path[-1], typed):
            return join_path(path)
    return None
