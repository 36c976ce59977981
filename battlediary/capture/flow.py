"""
Box Flow Layout.

Computes the position and size of every node in a visual tree, in
logical pixels. The root is laid out at the tree's fixed width; height
grows to fit content, so the result is the FULL content extent and never
a viewport-clipped one.

Rules:
- Boxes fill the width offered to them
- Columns stack children top to bottom, separated by `gap`
- Rows give non-growing children their intrinsic width and split the
  remainder between growing children
- Rows never overflow: when fixed children are too wide together, the
  widest shrink to a shared cap and their text wraps
- `justify="between"` spreads leftover row space between children
- Text wraps at word boundaries, falling back to character breaks
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, replace

from battlediary.capture.fonts import FontBook
from battlediary.layout.nodes import Box, Node, Picture, Text, VisualTree

LINE_HEIGHT_RATIO = 1.4

# Floor for growing children squeezed by wide siblings
MIN_GROW_WIDTH = 40.0

_WORD_PATTERN = re.compile(r"\S+\s*")


@dataclass(frozen=True, slots=True)
class Frame:
    """
    A laid-out node.

    x and y are relative to the parent frame's top-left corner.
    """

    node: Node
    x: float
    y: float
    width: float
    height: float
    children: tuple[Frame, ...] = ()
    lines: tuple[str, ...] = ()


def line_height(size: int) -> float:
    return float(math.ceil(size * LINE_HEIGHT_RATIO))


def _text_measure(fonts: FontBook, node: Text) -> Callable[[str], float]:
    def measure(text: str) -> float:
        return fonts.text_width(text, node.size, node.bold, node.italic)

    return measure


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy line breaking. Explicit newlines always break."""
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(_wrap_paragraph(paragraph, max_width, measure))
    return lines or [""]


def _wrap_paragraph(
    paragraph: str, max_width: float, measure: Callable[[str], float]
) -> list[str]:
    if measure(paragraph) <= max_width:
        return [paragraph]

    lines: list[str] = []
    current = ""
    for token in _WORD_PATTERN.findall(paragraph):
        candidate = current + token
        if measure(candidate.rstrip()) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current.rstrip())
            current = ""

        if measure(token.rstrip()) <= max_width:
            current = token
            continue

        # Single word wider than the line: break between characters
        for char in token:
            if not current or measure((current + char).rstrip()) <= max_width:
                current += char
            else:
                lines.append(current.rstrip())
                current = char

    if current.strip() or not lines:
        lines.append(current.rstrip())
    return lines


def _horizontal(padding: tuple[int, int, int, int]) -> int:
    return padding[1] + padding[3]


def _vertical(padding: tuple[int, int, int, int]) -> int:
    return padding[0] + padding[2]


def intrinsic_width(node: Node, fonts: FontBook) -> float:
    """Width a node wants when nothing forces it to wrap."""
    if isinstance(node, Text):
        measure = _text_measure(fonts, node)
        natural = max(measure(line) for line in node.display.split("\n"))
        return natural + _horizontal(node.style.padding)

    if isinstance(node, Picture):
        return float(node.width)

    children = [intrinsic_width(child, fonts) for child in node.children]
    pad = _horizontal(node.style.padding)
    if not children:
        return float(pad)
    if node.direction == "row":
        return sum(children) + node.gap * (len(children) - 1) + pad
    return max(children) + pad


def layout_node(node: Node, available: float, fonts: FontBook) -> Frame:
    """Lay out `node` within `available` logical pixels of width."""
    if isinstance(node, Text):
        return _layout_text(node, available, fonts)
    if isinstance(node, Picture):
        return _layout_picture(node, available)
    if node.direction == "row":
        return _layout_row(node, available, fonts)
    return _layout_column(node, available, fonts)


def _layout_text(node: Text, available: float, fonts: FontBook) -> Frame:
    padding = node.style.padding
    inner = max(available - _horizontal(padding), 1.0)
    measure = _text_measure(fonts, node)

    lines = wrap_text(node.display, inner, measure)
    if node.grow:
        content_width = inner
    else:
        content_width = min(max(measure(line) for line in lines), inner)

    return Frame(
        node=node,
        x=0.0,
        y=0.0,
        width=content_width + _horizontal(padding),
        height=len(lines) * line_height(node.size) + _vertical(padding),
        lines=tuple(lines),
    )


def _layout_picture(node: Picture, available: float) -> Frame:
    width, height = float(node.width), float(node.height)
    if width > available > 0:
        height = height * available / width
        width = available
    return Frame(node=node, x=0.0, y=0.0, width=width, height=height)


def _layout_column(node: Box, available: float, fonts: FontBook) -> Frame:
    top, _, bottom, left = node.style.padding
    inner = max(available - _horizontal(node.style.padding), 0.0)

    frames: list[Frame] = []
    cursor = float(top)
    for child in node.children:
        frame = layout_node(child, inner, fonts)
        offset = (inner - frame.width) / 2 if node.align == "center" else 0.0
        frames.append(replace(frame, x=left + offset, y=cursor))
        cursor += frame.height + node.gap

    if frames:
        cursor -= node.gap

    return Frame(
        node=node,
        x=0.0,
        y=0.0,
        width=available,
        height=cursor + bottom,
        children=tuple(frames),
    )


def _fit_widths(widths: list[float | None], budget: float) -> list[float | None]:
    """
    Cap non-growing widths so they sum to at most `budget`.

    The widest children shrink first and wrap; narrow ones keep their
    intrinsic width.
    """
    fixed = sorted(w for w in widths if w is not None)
    if sum(fixed) <= budget:
        return widths

    cap = 0.0
    remaining = budget
    for index, width in enumerate(fixed):
        share = remaining / (len(fixed) - index)
        if width > share:
            cap = share
            break
        remaining -= width

    return [None if w is None else min(w, cap) for w in widths]


def _layout_row(node: Box, available: float, fonts: FontBook) -> Frame:
    top, _, bottom, left = node.style.padding
    inner = max(available - _horizontal(node.style.padding), 0.0)
    children = node.children
    gaps = node.gap * max(len(children) - 1, 0)

    widths: list[float | None] = []
    for child in children:
        if getattr(child, "grow", False):
            widths.append(None)
        else:
            widths.append(min(intrinsic_width(child, fonts), inner))

    growing = widths.count(None)
    budget = max(inner - gaps - growing * MIN_GROW_WIDTH, 0.0)
    widths = _fit_widths(widths, budget)
    if growing:
        remaining = inner - gaps - sum(w for w in widths if w is not None)
        share = max(remaining / growing, MIN_GROW_WIDTH)
        widths = [share if w is None else w for w in widths]

    laid = [layout_node(child, w or 0.0, fonts) for child, w in zip(children, widths)]
    content_height = max((frame.height for frame in laid), default=0.0)

    spacing = float(node.gap)
    if node.justify == "between" and not growing and len(laid) > 1:
        free = inner - gaps - sum(frame.width for frame in laid)
        spacing += max(free, 0.0) / (len(laid) - 1)

    frames: list[Frame] = []
    cursor = float(left)
    for frame in laid:
        offset = (content_height - frame.height) / 2 if node.align == "center" else 0.0
        frames.append(replace(frame, x=cursor, y=top + offset))
        cursor += frame.width + spacing

    return Frame(
        node=node,
        x=0.0,
        y=0.0,
        width=available,
        height=content_height + top + bottom,
        children=tuple(frames),
    )


def layout_tree(tree: VisualTree, fonts: FontBook) -> Frame:
    """Lay out a whole tree at its fixed design width."""
    return layout_node(tree.root, float(tree.width), fonts)


def content_extent(frame: Frame) -> tuple[int, int]:
    """Full content size of a laid-out root, in whole logical pixels."""
    return math.ceil(frame.width), math.ceil(frame.height)
