"""
Parser for match-history records as stored by the diary app.

Store shape (camelCase JSON):

    {
      "date": "2024-05-01",
      "deckName": "Burn",
      "format": "Modern",
      "location": "Hobby Shop",
      "eventWins": 2, "eventLosses": 1, "eventDraws": 0,
      "matches": [
        {"id": 1, "opponentDeck": "Control", "result": "win",
         "games": [{"result": "win", "onPlay": true, "memo": "T1 kill"}]}
      ]
    }

Matches are numbered by position. The store's `id` is an opaque key.
Result strings are case-insensitive; empty means no result.
"""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from battlediary.models.failure import FailureKind, KnownError
from battlediary.models.record import Game, GameResult, Match, MatchResult, Record

GAME_RESULT_ALIASES: dict[str, GameResult] = {
    "win": GameResult.WIN,
    "w": GameResult.WIN,
    "loss": GameResult.LOSS,
    "lose": GameResult.LOSS,
    "l": GameResult.LOSS,
    "none": GameResult.NONE,
    "": GameResult.NONE,
}

MATCH_RESULT_ALIASES: dict[str, MatchResult] = {
    "win": MatchResult.WIN,
    "w": MatchResult.WIN,
    "loss": MatchResult.LOSS,
    "lose": MatchResult.LOSS,
    "l": MatchResult.LOSS,
    "draw": MatchResult.DRAW,
    "d": MatchResult.DRAW,
}


class RecordParseError(KnownError):
    """Raised when stored record data cannot be turned into a Record."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid record data at {path}: {reason}",
            detail=reason,
            suggestion="Check the record in your match history and try again.",
            status_code=422,
        )


def _optional_text(data: Mapping[str, Any], key: str, path: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RecordParseError(f"{path}.{key}", "expected text")
    return value if value.strip() else None


def _count(data: Mapping[str, Any], key: str, path: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordParseError(f"{path}.{key}", "expected a whole number")
    if value < 0:
        raise RecordParseError(f"{path}.{key}", "must not be negative")
    return value


def _mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise RecordParseError(path, "expected an object")
    return value


def _list(value: Any, path: str) -> Sequence[Any]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise RecordParseError(path, "expected a list")
    return value


def parse_game(data: Any, path: str = "game") -> Game:
    data = _mapping(data, path)

    raw_result = data.get("result") or ""
    if not isinstance(raw_result, str):
        raise RecordParseError(f"{path}.result", "expected text")
    result = GAME_RESULT_ALIASES.get(raw_result.strip().lower())
    if result is None:
        raise RecordParseError(f"{path}.result", f"unknown game result {raw_result!r}")

    on_play = data.get("onPlay")
    if on_play is not None and not isinstance(on_play, bool):
        raise RecordParseError(f"{path}.onPlay", "expected true, false or null")

    return Game(result=result, memo=_optional_text(data, "memo", path), on_play=on_play)


def parse_match(data: Any, position: int, path: str = "match") -> Match:
    data = _mapping(data, path)

    raw_result = data.get("matchResult") or data.get("result")
    if not isinstance(raw_result, str):
        raise RecordParseError(f"{path}.result", "missing match result")
    result = MATCH_RESULT_ALIASES.get(raw_result.strip().lower())
    if result is None:
        raise RecordParseError(f"{path}.result", f"unknown match result {raw_result!r}")

    games = tuple(
        parse_game(game, f"{path}.games[{index}]")
        for index, game in enumerate(_list(data.get("games"), f"{path}.games"))
    )

    return Match(
        sequence_number=position,
        match_result=result,
        opponent_deck_name=_optional_text(data, "opponentDeck", path),
        games=games,
    )


def _parse_date(value: Any, path: str) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise RecordParseError(path, "missing date")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise RecordParseError(path, f"not an ISO date: {value!r}") from e


def parse_record(data: Any, path: str = "record") -> Record:
    """
    Parse one stored record.

    Raises:
        RecordParseError: If any field is missing or malformed
    """
    data = _mapping(data, path)

    deck_name = data.get("deckName")
    if not isinstance(deck_name, str) or not deck_name.strip():
        raise RecordParseError(f"{path}.deckName", "deck name is required")

    matches = tuple(
        parse_match(match, index + 1, f"{path}.matches[{index}]")
        for index, match in enumerate(_list(data.get("matches"), f"{path}.matches"))
    )

    return Record(
        date=_parse_date(data.get("date"), f"{path}.date"),
        deck_name=deck_name,
        format=_optional_text(data, "format", path),
        location=_optional_text(data, "location", path),
        event_wins=_count(data, "eventWins", path),
        event_losses=_count(data, "eventLosses", path),
        event_draws=_count(data, "eventDraws", path),
        matches=matches,
    )


def parse_export_input(data: Any) -> list[Record]:
    """
    Parse a single stored record or a list of them.

    Raises:
        RecordParseError: If the input is empty or any record is malformed
    """
    if isinstance(data, Mapping):
        return [parse_record(data)]

    items = _list(data, "records")
    if not items:
        raise RecordParseError("records", "at least one record is required")
    return [parse_record(item, f"records[{index}]") for index, item in enumerate(items)]
