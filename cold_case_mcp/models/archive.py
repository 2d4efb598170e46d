"""Document tree of the case archive.

The archive is a closed set of three node kinds discriminated on ``kind``.
The shape of the tree is fixed once it is built; the only state that ever
changes is the lock flag of encrypted records.
"""

from collections.abc import Iterator
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


class TextNode(BaseModel):
    """A plain record, always readable."""

    kind: Literal["text"] = "text"
    name: str
    created_date: str | None = None
    body: str


class EncryptedNode(BaseModel):
    """A record with a public preview and a password-gated secret body."""

    kind: Literal["encrypted"] = "encrypted"
    name: str
    created_date: str | None = None
    locked_preview_text: str
    password: str
    secret_body: str
    is_locked: bool = True
    # Reading this record unlocked solves the case.
    is_win_condition: bool = False

    def unlock(self, password: str) -> bool:
        """Unlocks the record if the password matches. Never re-locks."""
        if password != self.password:
            return False
        self.is_locked = False
        return True


class DirectoryNode(BaseModel):
    """A directory. Children keep their insertion order for listings."""

    kind: Literal["directory"] = "directory"
    name: str
    children: dict[str, "Node"] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_children(self) -> "DirectoryNode":
        seen: set[str] = set()
        for key, child in self.children.items():
            if key != child.name:
                raise ValueError(f"Child key '{key}' does not match node name '{child.name}'")
            folded = key.lower()
            if folded in seen:
                raise ValueError(f"Duplicate name '{key}' in directory '{self.name}'")
            seen.add(folded)
        return self

    @classmethod
    def of(cls, name: str, *children: "Node") -> "DirectoryNode":
        """Builds a directory from child nodes, keyed by their names."""
        return cls(name=name, children={child.name: child for child in children})


Node = Annotated[Union[TextNode, DirectoryNode, EncryptedNode], Field(discriminator="kind")]

DirectoryNode.model_rebuild()


def iter_nodes(directory: DirectoryNode, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], "Node"]]:
    """Yields ``(path, node)`` for every node below ``directory`` in pre-order."""
    for key, node in directory.children.items():
        path = prefix + (key,)
        yield path, node
        if isinstance(node, DirectoryNode):
            yield from iter_nodes(node, path)


def win_condition_nodes(root: DirectoryNode) -> list[EncryptedNode]:
    return [
        node
        for _, node in iter_nodes(root)
        if isinstance(node, EncryptedNode) and node.is_win_condition
    ]
