"""
Share Session: one open export dialog.

The host creates a session with the records to export and its own
collaborators (share target, saver, notifier) and owns its lifecycle.
The session composes the layout, mounts it, and wires a router.
"""

import logging
from collections.abc import Callable
from datetime import date
from types import TracebackType

from battlediary.capture.engine import SnapshotEngine
from battlediary.capture.surface import RenderSurface
from battlediary.export.capability import ShareTarget, mode_for_count
from battlediary.export.naming import export_filename, share_caption
from battlediary.export.router import ExportRouter, Notifier
from battlediary.export.saver import FileSaver, LocalFileSaver
from battlediary.layout.composer import compose
from battlediary.models.export import CaptureState, ExportMode, ExportPresentation
from battlediary.models.record import ExportInput, as_record_list

logger = logging.getLogger(__name__)


class ShareSession:
    """
    Export session for one or more records.

    Closing the session unmounts the preview and calls `on_close`.
    Share cancellation never closes it.
    """

    def __init__(
        self,
        export_input: ExportInput,
        *,
        on_close: Callable[[], None] | None = None,
        share_target: ShareTarget | None = None,
        saver: FileSaver | None = None,
        notifier: Notifier | None = None,
        engine: SnapshotEngine | None = None,
        surface: RenderSurface | None = None,
        today: date | None = None,
    ) -> None:
        self.records = as_record_list(export_input)
        self.mode = mode_for_count(len(self.records))
        self.tree = compose(self.records)
        self.surface = surface or RenderSurface()
        self.surface.mount(self.tree)
        self._on_close = on_close
        self._closed = False

        caption = share_caption(self.records[0]) if self.mode is ExportMode.SINGLE else None
        self.router = ExportRouter(
            self.mode,
            engine=engine or SnapshotEngine(),
            surface=self.surface,
            saver=saver or LocalFileSaver(),
            filename=export_filename(self.records, today),
            caption=caption,
            share_target=share_target,
            notifier=notifier,
        )

    @property
    def state(self) -> CaptureState:
        return self.router.state

    @property
    def is_closed(self) -> bool:
        return self._closed

    def presentation(self) -> ExportPresentation:
        return self.router.presentation()

    async def share(self) -> bool:
        return await self.router.share()

    async def download(self) -> bool:
        return await self.router.download()

    def close(self) -> None:
        """Dismiss the session. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.surface.unmount()
        logger.debug("SESSION_CLOSED: mode=%s, records=%d", self.mode.value, len(self.records))
        if self._on_close is not None:
            self._on_close()

    def __enter__(self) -> "ShareSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
