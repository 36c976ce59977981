"""Colors and score tones used by the export layouts."""

from dataclasses import dataclass
from enum import Enum

from battlediary.models.record import GameResult, MatchResult

WHITE = "#ffffff"
SLATE_50 = "#f8fafc"
SLATE_100 = "#f1f5f9"
SLATE_200 = "#e2e8f0"
SLATE_400 = "#94a3b8"
SLATE_500 = "#64748b"
SLATE_600 = "#475569"
SLATE_700 = "#334155"
SLATE_800 = "#1e293b"
BLUE_600 = "#2563eb"
RED_600 = "#dc2626"


class Tone(str, Enum):
    """Score coloring: who is ahead."""

    LEADING = "leading"
    TRAILING = "trailing"
    NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class TonePalette:
    text: str
    background: str
    border: str | None


TONE_PALETTES: dict[Tone, TonePalette] = {
    Tone.LEADING: TonePalette(text=BLUE_600, background="#eff6ff", border="#dbeafe"),
    Tone.TRAILING: TonePalette(text=RED_600, background="#fef2f2", border="#fee2e2"),
    Tone.NEUTRAL: TonePalette(text=SLATE_600, background=SLATE_100, border=None),
}

MATCH_RESULT_COLORS: dict[MatchResult, str] = {
    MatchResult.WIN: BLUE_600,
    MatchResult.LOSS: RED_600,
    MatchResult.DRAW: SLATE_500,
}

GAME_RESULT_COLORS: dict[GameResult, str] = {
    GameResult.WIN: BLUE_600,
    GameResult.LOSS: RED_600,
    GameResult.NONE: SLATE_400,
}


def score_tone(wins: int, losses: int) -> Tone:
    """Classify a score: ahead, behind, or even."""
    if wins > losses:
        return Tone.LEADING
    if losses > wins:
        return Tone.TRAILING
    return Tone.NEUTRAL
