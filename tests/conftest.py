from collections.abc import Callable, Sequence
from datetime import date

import pytest

from battlediary.capture.engine import SnapshotEngine
from battlediary.models.export import ShareFile
from battlediary.models.record import Game, GameResult, Match, MatchResult, Record


class FakeShareTarget:
    """Stand-in for the platform share sheet."""

    def __init__(
        self,
        accepts_files: bool = True,
        error: Exception | None = None,
        on_share: Callable[[], None] | None = None,
    ) -> None:
        self.accepts_files = accepts_files
        self.error = error
        self.on_share = on_share
        self.shared: list[tuple[str, list[ShareFile]]] = []

    def can_share(self, files: Sequence[ShareFile]) -> bool:
        return self.accepts_files and all(f.media_type == "image/png" for f in files)

    async def share(self, text: str, files: Sequence[ShareFile]) -> None:
        if self.on_share is not None:
            self.on_share()
        if self.error is not None:
            raise self.error
        self.shared.append((text, list(files)))


class MemorySaver:
    """Collects downloads in memory."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.saved: dict[str, tuple[bytes, str]] = {}

    async def save(self, filename: str, data: bytes, media_type: str) -> None:
        if self.error is not None:
            raise self.error
        self.saved[filename] = (data, media_type)


class RecordingNotifier:
    """Remembers every message shown to the user."""

    def __init__(self) -> None:
        self.alerts: list[str] = []
        self.infos: list[str] = []

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def inform(self, message: str) -> None:
        self.infos.append(message)


@pytest.fixture
def burn_record() -> Record:
    """The Burn example record: 2-1 at a Modern event."""
    return Record(
        date=date(2024, 5, 1),
        deck_name="Burn",
        format="Modern",
        location="Hobby Shop",
        event_wins=2,
        event_losses=1,
        matches=(
            Match(
                sequence_number=1,
                opponent_deck_name="Control",
                match_result=MatchResult.WIN,
                games=(Game(result=GameResult.WIN, on_play=True, memo="T1 kill"),),
            ),
            Match(
                sequence_number=2,
                opponent_deck_name="Amulet Titan",
                match_result=MatchResult.LOSS,
                games=(
                    Game(result=GameResult.LOSS, on_play=False),
                    Game(result=GameResult.WIN, on_play=True, memo="Sideboarded in Blood Moon"),
                    Game(result=GameResult.LOSS, on_play=False, memo="Flooded"),
                ),
            ),
            Match(
                sequence_number=3,
                opponent_deck_name=None,
                match_result=MatchResult.WIN,
                games=(
                    Game(result=GameResult.WIN),
                    Game(),
                ),
            ),
        ),
    )


@pytest.fixture
def three_records() -> list[Record]:
    """Three events: wins [2, 1, 3], losses [1, 2, 0]."""
    return [
        Record(
            date=date(2024, 5, 1),
            deck_name="Burn",
            format="Modern",
            event_wins=2,
            event_losses=1,
        ),
        Record(
            date=date(2024, 5, 8),
            deck_name="Mono Red Prowess",
            format="Pioneer",
            event_wins=1,
            event_losses=2,
        ),
        Record(date=date(2024, 5, 15), deck_name="Burn", event_wins=3, event_losses=0),
    ]


@pytest.fixture
def share_target() -> FakeShareTarget:
    return FakeShareTarget()


@pytest.fixture
def make_share_target() -> type[FakeShareTarget]:
    return FakeShareTarget


@pytest.fixture
def saver() -> MemorySaver:
    return MemorySaver()


@pytest.fixture
def make_saver() -> type[MemorySaver]:
    return MemorySaver


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="session")
def engine() -> SnapshotEngine:
    """Engine at the minimum allowed scale to keep bitmaps small."""
    return SnapshotEngine(scale=2)
