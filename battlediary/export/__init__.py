"""
Export routing.

Decides between native sharing and manual download, and runs the export.
"""

from battlediary.export.capability import (
    ShareTarget,
    capability_from_user_agent,
    decide_actions,
    mode_for_count,
    probe_capability,
)
from battlediary.export.naming import (
    collapse_whitespace,
    export_filename,
    share_caption,
    single_filename,
    summary_filename,
)
from battlediary.export.router import ExportRouter, LoggingNotifier, Notifier
from battlediary.export.saver import FileSaver, LocalFileSaver
from battlediary.export.session import ShareSession

__all__ = [
    "ExportRouter",
    "FileSaver",
    "LocalFileSaver",
    "LoggingNotifier",
    "Notifier",
    "ShareSession",
    "ShareTarget",
    "capability_from_user_agent",
    "collapse_whitespace",
    "decide_actions",
    "export_filename",
    "mode_for_count",
    "probe_capability",
    "share_caption",
    "single_filename",
    "summary_filename",
]
