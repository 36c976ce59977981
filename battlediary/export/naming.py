"""Download filenames and share captions."""

import re
from collections.abc import Sequence
from datetime import date

from battlediary.config import CAPTION_FORMAT_FALLBACK, HASHTAGS
from battlediary.models.record import Record

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Replace each whitespace run with a single underscore."""
    return _WHITESPACE.sub("_", text)


def single_filename(record: Record) -> str:
    return f"mtg_result_{record.date.isoformat()}_{collapse_whitespace(record.deck_name)}.png"


def summary_filename(today: date | None = None) -> str:
    return f"mtg_summary_{(today or date.today()).isoformat()}.png"


def export_filename(records: Sequence[Record], today: date | None = None) -> str:
    """
    Filename for a manual download.

    Single record: mtg_result_<date>_<deck_name>.png
    Multiple records: mtg_summary_<today>.png
    """
    if len(records) == 1:
        return single_filename(records[0])
    return summary_filename(today)


def share_caption(record: Record) -> str:
    """Plain-text caption posted alongside a shared image."""
    return (
        f"MTG Result: {record.deck_name} ({record.format or CAPTION_FORMAT_FALLBACK})\n"
        f"{record.event_wins}-{record.event_losses}\n"
        f"{HASHTAGS}"
    )
