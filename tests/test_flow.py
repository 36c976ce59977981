"""Tests for box flow layout and text wrapping."""

from datetime import date

import pytest

from battlediary.capture.flow import (
    Frame,
    content_extent,
    intrinsic_width,
    layout_node,
    layout_tree,
    line_height,
    wrap_text,
)
from battlediary.capture.fonts import FontBook
from battlediary.layout.composer import compose
from battlediary.layout.nodes import (
    Box,
    LayoutVariant,
    Picture,
    Style,
    Text,
    VisualTree,
    find_by_role,
)
from battlediary.models.record import Record


def char_measure(text: str) -> float:
    """Every character is 10px wide."""
    return len(text) * 10.0


@pytest.fixture(scope="module")
def fonts() -> FontBook:
    return FontBook()


class TestWrapText:
    def test_short_text_single_line(self) -> None:
        assert wrap_text("T1 kill", 100, char_measure) == ["T1 kill"]

    def test_breaks_at_words(self) -> None:
        assert wrap_text("aaa bbb ccc", 70, char_measure) == ["aaa bbb", "ccc"]

    def test_long_word_breaks_between_characters(self) -> None:
        assert wrap_text("abcdefghij", 40, char_measure) == ["abcd", "efgh", "ij"]

    def test_text_without_spaces_wraps(self) -> None:
        memo = "先攻でマリガンしたが土地が足りた"
        lines = wrap_text(memo, 50, char_measure)
        assert "".join(lines) == memo
        assert all(char_measure(line) <= 50 for line in lines)

    def test_explicit_newlines_break(self) -> None:
        assert wrap_text("one\ntwo", 1000, char_measure) == ["one", "two"]

    def test_empty_text_has_one_line(self) -> None:
        assert wrap_text("", 100, char_measure) == [""]


class TestLayout:
    def test_column_stacks_children_with_gap(self, fonts: FontBook) -> None:
        column = Box((Text("a", size=10), Text("b", size=10)), gap=5)
        frame = layout_node(column, 200, fonts)

        first, second = frame.children
        assert first.y == 0
        assert second.y == line_height(10) + 5
        assert frame.height == 2 * line_height(10) + 5

    def test_padding_adds_to_extent(self, fonts: FontBook) -> None:
        plain = layout_node(Box((Text("a", size=10),)), 200, fonts)
        padded = layout_node(
            Box((Text("a", size=10),), style=Style(padding=(7, 3, 11, 3))),
            200,
            fonts,
        )
        assert padded.height == plain.height + 18
        assert padded.children[0].x == 3
        assert padded.children[0].y == 7

    def test_grow_child_takes_remaining_width(self, fonts: FontBook) -> None:
        row = Box(
            (Text("memo", grow=True), Text("2-1")),
            direction="row",
            gap=8,
        )
        frame = layout_node(row, 300, fonts)

        grow, fixed = frame.children
        assert grow.width + 8 + fixed.width == pytest.approx(300)
        assert fixed.x == pytest.approx(300 - fixed.width)

    def test_justify_between_pushes_last_child_right(self, fonts: FontBook) -> None:
        row = Box((Text("left"), Text("right")), direction="row", justify="between")
        frame = layout_node(row, 400, fonts)

        left, right = frame.children
        assert left.x == 0
        assert right.x + right.width == pytest.approx(400)

    def test_long_text_wraps_and_grows_height(self, fonts: FontBook) -> None:
        short = layout_node(Text("word", size=12, grow=True), 200, fonts)
        long = layout_node(Text("word " * 80, size=12, grow=True), 200, fonts)

        assert len(long.lines) > 1
        assert long.height == len(long.lines) * line_height(12)
        assert long.height > short.height

    def test_picture_scaled_to_fit(self, fonts: FontBook) -> None:
        frame = layout_node(Picture("logo.png", width=800, height=400), 200, fonts)
        assert (frame.width, frame.height) == (200, 100)

    def test_intrinsic_width_of_row_sums_children(self, fonts: FontBook) -> None:
        a, b = Text("alpha"), Text("beta")
        row = Box((a, b), direction="row", gap=6)
        assert intrinsic_width(row, fonts) == pytest.approx(
            intrinsic_width(a, fonts) + intrinsic_width(b, fonts) + 6
        )

    def test_tree_extent_uses_design_width(self, fonts: FontBook) -> None:
        tree = VisualTree(
            root=Box(tuple(Text(f"line {i}", size=10) for i in range(50))),
            width=600,
            variant=LayoutVariant.DETAIL,
        )
        width, height = content_extent(layout_tree(tree, fonts))
        assert width == 600
        assert height == 50 * line_height(10)


def _right_edges(frame: Frame, origin: float = 0.0):
    left = origin + frame.x
    yield left + frame.width
    for child in frame.children:
        yield from _right_edges(child, left)


class TestRowsStayInsideWidth:
    def test_wide_fixed_children_shrink_and_wrap(self, fonts: FontBook) -> None:
        row = Box(
            (Text("2024-05-01"), Text("Hareruya Tokyo Main Store Second Floor Tournament Space")),
            direction="row",
            gap=12,
        )
        frame = layout_node(row, 300, fonts)

        date_frame, location = frame.children
        assert date_frame.width == pytest.approx(intrinsic_width(row.children[0], fonts))
        assert location.x + location.width <= 300 + 1e-6
        assert len(location.lines) > 1

    def test_narrow_children_keep_intrinsic_width(self, fonts: FontBook) -> None:
        row = Box((Text("a"), Text("b")), direction="row", gap=4)
        frame = layout_node(row, 400, fonts)

        for child, node in zip(frame.children, row.children):
            assert child.width == pytest.approx(intrinsic_width(node, fonts))

    def test_long_location_header_fits_canvas(self, fonts: FontBook) -> None:
        record = Record(
            date=date(2024, 5, 1),
            deck_name="Azorius Control",
            format="Standard",
            location="Hareruya Tokyo Main Store Second Floor Tournament Space",
            event_wins=3,
            event_losses=1,
        )
        tree = compose(record)

        root = layout_tree(tree, fonts)

        assert max(_right_edges(root)) <= tree.width + 1e-6
        (location,) = find_by_role(tree, "location")
        assert location.content == record.location

    def test_summary_rows_fit_canvas(self, fonts: FontBook) -> None:
        records = [
            Record(
                date=date(2024, 5, day),
                deck_name="Izzet Murktide with a rather long list name",
                format="Modern",
                location="Hareruya Tokyo Main Store Second Floor Tournament Space",
            )
            for day in (1, 8)
        ]
        tree = compose(records)

        assert max(_right_edges(layout_tree(tree, fonts))) <= tree.width + 1e-6


class TestScaledMeasurement:
    def test_measures_with_painting_face(self) -> None:
        fonts = FontBook(scale=3)
        text = "Sideboarded in Blood Moon for games two and three"

        expected = fonts.get(13 * 3).getlength(text) / 3
        assert fonts.text_width(text, 13) == pytest.approx(expected)

    def test_scaled_wrap_fits_painted_width(self) -> None:
        fonts = FontBook(scale=3)
        node = Text("word " * 60, size=13, grow=True)
        frame = layout_node(node, 300, fonts)

        painted = fonts.get(13 * 3)
        for line in frame.lines:
            assert painted.getlength(line) <= 300 * 3 + 1e-6
