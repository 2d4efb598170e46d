from dataclasses import dataclass
from typing import List, Literal

from cold_case_mcp.models.archive import DirectoryNode, EncryptedNode, TextNode, iter_nodes
from cold_case_mcp.utils.path_utils import join_path

from .constants import CONTENT_MATCH_TAG, FILENAME_MATCH_TAG


@dataclass(frozen=True)
class SearchMatch:
    kind: Literal["filename", "content"]
    path: str

    def describe(self) -> str:
        tag = FILENAME_MATCH_TAG if self.kind == "filename" else CONTENT_MATCH_TAG
        return f"{tag} {self.path}"


def search_archive(root: DirectoryNode, query: str) -> List[SearchMatch]:
    """
    Search file names and readable contents of the whole archive.

    Nodes are visited in pre-order. For each node the name is checked first,
    then its readable content. Secret bodies of encrypted records only take
    part once the record is unlocked.

    Args:
        root: Archive root directory
        query: Search string, matched case-insensitively as a substring

    Returns:
        Match descriptors in traversal order. A node can appear twice.
    """
    results: List[SearchMatch] = []
    q = query.lower()

    for path, node in iter_nodes(root):
        path_str = join_path(path)

        if q in path[-1].lower():
            results.append(SearchMatch(kind="filename", path=path_str))

        if isinstance(node, TextNode) and q in node.body.lower():
            results.append(SearchMatch(kind="content", path=path_str))

        # Locked secrets are never searchable
        if isinstance(node, EncryptedNode) and not node.is_locked and q in node.secret_body.lower():
            results.append(SearchMatch(kind="content", path=path_str))

    return results
