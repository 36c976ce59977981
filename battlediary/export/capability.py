"""
Share capability probe and decision table.

Platform capability is queried ONCE per export attempt and consumed by
`decide_actions()`, a pure function of (mode, capability). No other code
inspects the platform.

Decision table:

    mode    capability   action
    ------  -----------  -----------------------
    MULTI   any          DOWNLOAD_ONLY_SILENT
    SINGLE  positive     SHARE_AND_DOWNLOAD
    SINGLE  negative     DOWNLOAD_ONLY_WITH_HINT
"""

import re
from collections.abc import Sequence
from typing import Protocol

from battlediary.config import EXPORT_MEDIA_TYPE, SHARE_FILENAME
from battlediary.models.export import (
    ExportAction,
    ExportMode,
    ExportPlan,
    ShareCapability,
    ShareFile,
)

MOBILE_USER_AGENT_PATTERN = re.compile(r"iPhone|iPad|iPod|Android", re.IGNORECASE)


class ShareTarget(Protocol):
    """The platform's native share primitive, injected by the host."""

    def can_share(self, files: Sequence[ShareFile]) -> bool: ...

    async def share(self, text: str, files: Sequence[ShareFile]) -> None: ...


def probe_capability(
    target: ShareTarget | None,
    media_type: str = EXPORT_MEDIA_TYPE,
) -> ShareCapability:
    """
    Probe whether `target` can share a file of `media_type`.

    A missing target, or one that rejects the probe file, is
    capability-negative.
    """
    if target is None:
        return ShareCapability(has_share=False, can_share_files=False)

    probe = ShareFile(name=SHARE_FILENAME, media_type=media_type, data=b"")
    return ShareCapability(has_share=True, can_share_files=bool(target.can_share([probe])))


def capability_from_user_agent(user_agent: str | None) -> ShareCapability:
    """
    Estimate capability for a browser host from its User-Agent.

    Mobile browsers expose file sharing; desktop browsers are treated
    as download-only.
    """
    mobile = bool(user_agent and MOBILE_USER_AGENT_PATTERN.search(user_agent))
    return ShareCapability(has_share=mobile, can_share_files=mobile)


def mode_for_count(record_count: int) -> ExportMode:
    if record_count < 1:
        raise ValueError("Export requires at least one record")
    return ExportMode.SINGLE if record_count == 1 else ExportMode.MULTI


def decide_actions(mode: ExportMode, capability: ShareCapability) -> ExportPlan:
    """Map (mode, capability) to the affordances an export offers."""
    if mode is ExportMode.MULTI:
        return ExportPlan(ExportAction.DOWNLOAD_ONLY_SILENT)
    if capability.is_positive:
        return ExportPlan(ExportAction.SHARE_AND_DOWNLOAD)
    return ExportPlan(ExportAction.DOWNLOAD_ONLY_WITH_HINT)
