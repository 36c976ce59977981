from battlediary.parsers.records import (
    RecordParseError,
    parse_export_input,
    parse_game,
    parse_match,
    parse_record,
)

__all__ = [
    "RecordParseError",
    "parse_export_input",
    "parse_game",
    "parse_match",
    "parse_record",
]
