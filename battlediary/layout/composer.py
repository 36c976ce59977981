"""
Layout Composer.

THIS MODULE IS PURE: records in, visual tree out. No side effects.

Layout selection depends on cardinality alone:
- One record (or a one-element sequence) -> Detail Layout
- Two or more records -> Summary Layout

Every game row in every layout comes from `game_row()`, so suppression
and glyph rules cannot drift between variants.

Event totals are displayed exactly as supplied. They are NOT reconciled
with the match list beneath them.
"""

from collections.abc import Sequence

from battlediary.config import (
    DEFAULT_FORMAT_LABEL,
    DESIGN_WIDTH,
    NO_MEMO_LABEL,
    UNKNOWN_OPPONENT_LABEL,
)
from battlediary.layout import theme
from battlediary.layout.nodes import Box, LayoutVariant, Node, Style, Text, VisualTree
from battlediary.layout.theme import TONE_PALETTES, score_tone
from battlediary.models.record import (
    ExportInput,
    Game,
    GameResult,
    Match,
    Record,
    as_record_list,
)

GAME_GLYPHS: dict[GameResult, str] = {
    GameResult.WIN: "W",
    GameResult.LOSS: "L",
    GameResult.NONE: "–",
}

CARD_STYLE = Style(
    padding=(32, 32, 32, 32),
    background=theme.WHITE,
    border=theme.SLATE_200,
    radius=12,
)
PANEL_STYLE = Style(
    padding=(12, 12, 12, 12),
    background=theme.SLATE_50,
    border=theme.SLATE_200,
    radius=8,
)


def compose(export_input: ExportInput) -> VisualTree:
    """
    Compose the export layout for one or more records.

    Args:
        export_input: A Record or a non-empty sequence of Records

    Returns:
        Detail tree for a single record, Summary tree otherwise

    Raises:
        ValueError: If the sequence is empty
    """
    records = as_record_list(export_input)

    if len(records) == 1:
        return VisualTree(
            root=detail_layout(records[0]),
            width=DESIGN_WIDTH,
            variant=LayoutVariant.DETAIL,
        )

    return VisualTree(
        root=summary_layout(records),
        width=DESIGN_WIDTH,
        variant=LayoutVariant.SUMMARY,
    )


# =============================================================================
# SHARED PIECES
# =============================================================================


def score_text(wins: int, losses: int, draws: int = 0) -> str:
    """Format a W-L score, appending draws only when there are any."""
    if draws:
        return f"{wins}-{losses}-{draws}"
    return f"{wins}-{losses}"


def score_badge(wins: int, losses: int, draws: int = 0, size: int = 36) -> Text:
    """Score badge colored by who is ahead."""
    palette = TONE_PALETTES[score_tone(wins, losses)]
    return Text(
        score_text(wins, losses, draws),
        size=size,
        bold=True,
        color=palette.text,
        style=Style(
            padding=(8, 20, 8, 20),
            background=palette.background,
            border=palette.border,
            radius=12,
        ),
        role="score-badge",
    )


def format_badge(record: Record) -> Text:
    return Text(
        record.format or DEFAULT_FORMAT_LABEL,
        size=12,
        bold=True,
        uppercase=True,
        color=theme.WHITE,
        style=Style(padding=(3, 8, 3, 8), background=theme.SLATE_800, radius=12),
        role="format-badge",
    )


def location_badge(location: str) -> Text:
    return Text(
        location,
        size=13,
        bold=True,
        color=theme.SLATE_500,
        style=Style(
            padding=(3, 8, 3, 8),
            background=theme.SLATE_100,
            border=theme.SLATE_200,
            radius=12,
        ),
        role="location",
    )


def record_tags(record: Record) -> Box:
    """Date, format badge and optional location on one line."""
    tags: list[Node] = [
        Text(record.date.isoformat(), size=14, bold=True, color=theme.SLATE_500, role="date"),
        format_badge(record),
    ]
    if record.location:
        tags.append(location_badge(record.location))
    return Box(tuple(tags), direction="row", gap=12, align="center")


def is_visible_game(game: Game) -> bool:
    """A game with no result, no memo and unknown turn order is suppressed."""
    return not game.is_blank


def game_row(game: Game) -> Box | None:
    """
    Render one game as a row, or None when the game is suppressed.

    Row: on-play marker (when known), result glyph, memo or placeholder.
    """
    if not is_visible_game(game):
        return None

    cells: list[Node] = []
    if game.on_play is not None:
        cells.append(
            Text(
                "Play" if game.on_play else "Draw",
                size=11,
                bold=True,
                color=theme.SLATE_600,
                style=Style(padding=(2, 6, 2, 6), background=theme.SLATE_100, radius=4),
                role="on-play",
            )
        )

    cells.append(
        Text(
            GAME_GLYPHS[game.result],
            size=14,
            bold=True,
            color=theme.GAME_RESULT_COLORS[game.result],
            role="game-glyph",
        )
    )

    if game.memo:
        cells.append(Text(game.memo, size=13, color=theme.SLATE_700, grow=True, role="memo"))
    else:
        cells.append(
            Text(
                NO_MEMO_LABEL,
                size=13,
                italic=True,
                color=theme.SLATE_400,
                grow=True,
                role="memo",
            )
        )

    return Box(tuple(cells), direction="row", gap=8, align="center", role="game-row")


def match_block(match: Match) -> Box:
    """Match header followed by one row per visible game."""
    header = Box(
        (
            Box(
                (
                    Text(f"#{match.sequence_number}", size=13, bold=True, color=theme.SLATE_400),
                    Text(
                        f"vs {match.opponent_deck_name or UNKNOWN_OPPONENT_LABEL}",
                        size=15,
                        bold=True,
                        color=theme.SLATE_700,
                        role="opponent",
                    ),
                ),
                direction="row",
                gap=8,
                align="center",
                grow=True,
            ),
            Text(
                match.match_result.value.upper(),
                size=13,
                bold=True,
                color=theme.MATCH_RESULT_COLORS[match.match_result],
                role="match-result",
            ),
        ),
        direction="row",
        gap=8,
        justify="between",
        align="center",
    )

    rows = [row for row in (game_row(game) for game in match.games) if row is not None]
    return Box((header, *rows), gap=6, style=PANEL_STYLE, role="match")


# =============================================================================
# DETAIL LAYOUT
# =============================================================================


def detail_layout(record: Record) -> Box:
    """Full per-match, per-game rendering of one record."""
    header = Box(
        (
            Box(
                (
                    record_tags(record),
                    Text(
                        record.deck_name,
                        size=28,
                        bold=True,
                        color=theme.SLATE_800,
                        role="deck-name",
                    ),
                ),
                gap=8,
                grow=True,
            ),
            score_badge(record.event_wins, record.event_losses, record.event_draws),
        ),
        direction="row",
        gap=16,
        justify="between",
        align="center",
        role="header",
    )

    matches = Box(
        tuple(match_block(match) for match in record.matches),
        gap=12,
        role="matches",
    )

    return Box((header, matches), gap=24, style=CARD_STYLE, role="detail")


# =============================================================================
# SUMMARY LAYOUT
# =============================================================================


def summary_row(record: Record) -> Box:
    """Compact row: tags, deck name, location and the record's own score."""
    return Box(
        (
            Box(
                (
                    record_tags(record),
                    Text(
                        record.deck_name,
                        size=18,
                        bold=True,
                        color=theme.SLATE_800,
                        role="deck-name",
                    ),
                ),
                gap=4,
                grow=True,
            ),
            score_badge(record.event_wins, record.event_losses, record.event_draws, size=20),
        ),
        direction="row",
        gap=12,
        justify="between",
        align="center",
        style=PANEL_STYLE,
        role="summary-row",
    )


def summary_layout(records: Sequence[Record]) -> Box:
    """Aggregate header plus one compact row per record. No game detail."""
    wins = sum(record.event_wins for record in records)
    losses = sum(record.event_losses for record in records)
    draws = sum(record.event_draws for record in records)

    header = Box(
        (
            Box(
                (
                    Text("Results Summary", size=24, bold=True, color=theme.SLATE_800),
                    Text(
                        f"{len(records)} events",
                        size=14,
                        color=theme.SLATE_500,
                        role="event-count",
                    ),
                ),
                gap=4,
                grow=True,
            ),
            score_badge(wins, losses, draws),
        ),
        direction="row",
        gap=16,
        justify="between",
        align="center",
        role="header",
    )

    rows = Box(tuple(summary_row(record) for record in records), gap=8, role="records")

    return Box((header, rows), gap=20, style=CARD_STYLE, role="summary")
