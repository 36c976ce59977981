"""
Match Record Models.

Records arrive fully formed from the match-history store and are
read-only to the export pipeline.

INVARIANTS:
- All models are frozen (immutable after construction)
- Event totals are supplied pre-aggregated and NEVER recomputed from matches
- Match and game order is preserved exactly as supplied
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class GameResult(str, Enum):
    """Outcome of a single game."""

    WIN = "win"
    LOSS = "loss"
    NONE = "none"


class MatchResult(str, Enum):
    """Outcome of a match (one round)."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True, slots=True)
class Game:
    """
    One game within a match.

    Attributes:
        result: Game outcome, NONE when not recorded
        memo: Free-text note (optional)
        on_play: True = went first, False = went second, None = unknown
    """

    result: GameResult = GameResult.NONE
    memo: str | None = None
    on_play: bool | None = None

    @property
    def is_blank(self) -> bool:
        """True if the game carries nothing worth rendering."""
        return self.result is GameResult.NONE and not self.memo and self.on_play is None


@dataclass(frozen=True, slots=True)
class Match:
    """
    One round within a record.

    Attributes:
        sequence_number: Round number, starting at 1
        match_result: Match outcome
        opponent_deck_name: Opponent archetype (optional)
        games: Games in play order
    """

    sequence_number: int
    match_result: MatchResult
    opponent_deck_name: str | None = None
    games: tuple[Game, ...] = ()

    def __post_init__(self) -> None:
        if self.sequence_number < 1:
            raise ValueError(f"sequence_number must be positive, got {self.sequence_number}")


@dataclass(frozen=True, slots=True)
class Record:
    """
    One tournament or event entry.

    Attributes:
        date: Event date
        deck_name: Deck played
        format: Play format (e.g., "Modern"); None when not recorded
        location: Venue or store (optional)
        event_wins: Pre-aggregated match wins
        event_losses: Pre-aggregated match losses
        event_draws: Pre-aggregated match draws
        matches: Rounds in play order
    """

    date: date
    deck_name: str
    format: str | None = None
    location: str | None = None
    event_wins: int = 0
    event_losses: int = 0
    event_draws: int = 0
    matches: tuple[Match, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in ("event_wins", "event_losses", "event_draws"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")


# One record or an ordered sequence of records
ExportInput = Record | Sequence[Record]


def as_record_list(export_input: ExportInput) -> list[Record]:
    """
    Normalize an export input into a list of records.

    Raises:
        ValueError: If the sequence is empty
    """
    if isinstance(export_input, Record):
        return [export_input]

    records = list(export_input)
    if not records:
        raise ValueError("Export input must contain at least one record")
    return records
