"""
Export Routing Models.

CaptureState is owned exclusively by the ExportRouter for the lifetime
of one export. Every other type here is an immutable value.
"""

from dataclasses import dataclass
from enum import Enum


class CaptureState(str, Enum):
    """Progress of a user-initiated export."""

    IDLE = "idle"
    CAPTURING = "capturing"
    SHARING = "sharing"
    DOWNLOADING = "downloading"


class ExportMode(str, Enum):
    """Export cardinality, derived from the number of records."""

    SINGLE = "single"
    MULTI = "multi"


class ExportAction(str, Enum):
    """Outcome of the share/download decision table."""

    SHARE_AND_DOWNLOAD = "share_and_download"
    DOWNLOAD_ONLY_WITH_HINT = "download_only_with_hint"
    DOWNLOAD_ONLY_SILENT = "download_only_silent"


@dataclass(frozen=True, slots=True)
class ShareCapability:
    """
    Result of probing the platform's native share primitive.

    Attributes:
        has_share: A native share primitive exists
        can_share_files: The primitive accepts file attachments of the
            bitmap's media type
    """

    has_share: bool = False
    can_share_files: bool = False

    @property
    def is_positive(self) -> bool:
        """True if native file sharing is usable."""
        return self.has_share and self.can_share_files


@dataclass(frozen=True, slots=True)
class ExportPlan:
    """Which affordances an export offers."""

    action: ExportAction

    @property
    def allows_share(self) -> bool:
        return self.action is ExportAction.SHARE_AND_DOWNLOAD

    @property
    def shows_hint(self) -> bool:
        return self.action is ExportAction.DOWNLOAD_ONLY_WITH_HINT


@dataclass(frozen=True, slots=True)
class ShareAction:
    """The native-share button. Only present when sharing is possible."""

    enabled: bool
    label: str = "Share"


@dataclass(frozen=True, slots=True)
class ExportPresentation:
    """
    UI affordances for the current export state.

    Attributes:
        download_enabled: Manual download is allowed right now
        share: Share button, or None when it must not be shown at all
        hint: Static manual-posting hint (capability-negative single export)
        busy_label: Progress text while an export is running
    """

    download_enabled: bool
    share: ShareAction | None = None
    hint: str | None = None
    busy_label: str | None = None


@dataclass(frozen=True, slots=True)
class ShareFile:
    """A file attachment handed to the native share surface."""

    name: str
    media_type: str
    data: bytes
