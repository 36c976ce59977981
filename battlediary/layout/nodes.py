"""
Visual Tree Nodes.

A composed layout is a tree of frozen nodes with a fixed horizontal
extent and an unconstrained vertical extent. Nothing here knows about
fonts or pixels; measurement happens at capture time.

Nodes carry an optional `role` tag naming what they show (e.g.
"score-badge", "game-row") so hosts and tests can locate them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Literal

Edges = tuple[int, int, int, int]  # top, right, bottom, left

NO_EDGES: Edges = (0, 0, 0, 0)


class LayoutVariant(str, Enum):
    """Which layout a tree was composed with."""

    DETAIL = "detail"
    SUMMARY = "summary"


@dataclass(frozen=True, slots=True)
class Style:
    """Box decoration shared by containers and badges."""

    padding: Edges = NO_EDGES
    background: str | None = None
    border: str | None = None
    radius: int = 0


PLAIN = Style()


@dataclass(frozen=True, slots=True)
class Text:
    """
    A run of text.

    Text wraps when it would overflow the width available to it.
    A `grow` text takes all remaining width in a row.
    """

    content: str
    size: int = 14
    color: str = "#1e293b"
    bold: bool = False
    italic: bool = False
    uppercase: bool = False
    style: Style = PLAIN
    grow: bool = False
    role: str | None = None

    @property
    def display(self) -> str:
        return self.content.upper() if self.uppercase else self.content


@dataclass(frozen=True, slots=True)
class Picture:
    """
    An embedded image.

    `src` is a local path or a data: URI. Remote sources are treated
    as cross-origin and may be omitted at capture time.
    """

    src: str
    width: int
    height: int
    role: str | None = None


@dataclass(frozen=True, slots=True)
class Box:
    """A container stacking its children vertically or horizontally."""

    children: tuple[Node, ...] = ()
    direction: Literal["column", "row"] = "column"
    gap: int = 0
    justify: Literal["start", "between"] = "start"
    align: Literal["start", "center"] = "start"
    style: Style = PLAIN
    grow: bool = False
    role: str | None = None


Node = Box | Text | Picture


@dataclass(frozen=True, slots=True)
class VisualTree:
    """
    A self-contained renderable layout.

    Attributes:
        root: Top-level container
        width: Fixed horizontal extent in logical pixels
        variant: Layout the tree was composed with
    """

    root: Box
    width: int
    variant: LayoutVariant


def iter_nodes(node: Node) -> Iterator[Node]:
    """Depth-first, document-order walk of a subtree."""
    yield node
    if isinstance(node, Box):
        for child in node.children:
            yield from iter_nodes(child)


def find_by_role(root: Node | VisualTree, role: str) -> list[Node]:
    """Return every node tagged with `role`, in document order."""
    if isinstance(root, VisualTree):
        root = root.root
    return [node for node in iter_nodes(root) if node.role == role]
