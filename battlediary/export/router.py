"""
Export Router.

Takes a captured bitmap to native sharing or a manual download, and
owns the CaptureState of one export.

STATE MACHINE:
    IDLE -> CAPTURING -> SHARING     -> IDLE
    IDLE -> CAPTURING -> DOWNLOADING -> IDLE

INVARIANTS:
- Capture always completes (or fails) before share/download begins
- A second export is rejected while the state is not IDLE
- Every outcome, success or failure, returns the state to IDLE
- Share cancellation is a normal outcome: logged, never surfaced, and
  never closes the export session
- Nothing is retried automatically
- Failures never propagate to the caller; they are alerted, informed
  or logged according to their kind
"""

import logging
from typing import Protocol

from battlediary.capture.engine import Bitmap, SnapshotEngine
from battlediary.capture.surface import RenderSurface
from battlediary.config import BUSY_LABELS, MANUAL_POST_HINT, SHARE_FILENAME
from battlediary.export.capability import ShareTarget, decide_actions, probe_capability
from battlediary.export.naming import summary_filename
from battlediary.export.saver import FileSaver
from battlediary.models.export import (
    CaptureState,
    ExportMode,
    ExportPresentation,
    ShareAction,
    ShareFile,
)
from battlediary.models.failure import (
    CaptureUnavailableError,
    SaveFailedError,
    ShareCancelledOrFailedError,
    ShareUnsupportedError,
)

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """User-facing message sink, injected by the host."""

    def alert(self, message: str) -> None: ...

    def inform(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier for hosts without a UI: messages go to the log."""

    def alert(self, message: str) -> None:
        logger.error("ALERT: %s", message)

    def inform(self, message: str) -> None:
        logger.info("INFO: %s", message)


class ExportRouter:
    """
    Routes one export's bitmap to share or download.

    Capability is probed once, when the router is created, and the
    resulting plan drives every affordance for this export.
    """

    def __init__(
        self,
        mode: ExportMode,
        *,
        engine: SnapshotEngine,
        surface: RenderSurface,
        saver: FileSaver,
        filename: str,
        caption: str | None = None,
        share_target: ShareTarget | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.mode = mode
        self.engine = engine
        self.surface = surface
        self.saver = saver
        self.filename = filename
        self.caption = caption
        self.share_target = share_target
        self.notifier = notifier or LoggingNotifier()

        self.capability = probe_capability(share_target)
        self.plan = decide_actions(mode, self.capability)
        self._state = CaptureState.IDLE

        logger.debug(
            "ROUTER_READY: mode=%s, capability=%s, action=%s",
            mode.value,
            self.capability,
            self.plan.action.value,
        )

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is not CaptureState.IDLE

    def presentation(self) -> ExportPresentation:
        """
        Affordances for the current state.

        The share action is absent (not disabled) unless the plan allows
        sharing, and disabled while any export is running.
        """
        busy = self.is_busy
        share = ShareAction(enabled=not busy) if self.plan.allows_share else None
        return ExportPresentation(
            download_enabled=not busy,
            share=share,
            hint=MANUAL_POST_HINT if self.plan.shows_hint else None,
            busy_label=BUSY_LABELS.get(self._state.value),
        )

    # =========================================================================
    # USER ACTIONS
    # =========================================================================

    async def download(self) -> bool:
        """Capture and save. Returns True when the file was saved."""
        return await self._run(CaptureState.DOWNLOADING)

    async def share(self) -> bool:
        """Capture and hand to the native share surface. Returns True on success."""
        if not self.plan.allows_share:
            self.notifier.inform(ShareUnsupportedError().message)
            return False
        return await self._run(CaptureState.SHARING)

    async def export(self) -> bool:
        """Capture and take the preferred path: share when allowed, else download."""
        step = CaptureState.SHARING if self.plan.allows_share else CaptureState.DOWNLOADING
        return await self._run(step)

    # =========================================================================
    # ROUTING
    # =========================================================================

    async def route(self, bitmap: Bitmap, caption: str | None, mode: ExportMode) -> None:
        """
        Deliver an already captured bitmap.

        Rejected while another export is running. Failures are surfaced
        the same way as for `share()` and `download()`; nothing is raised
        to the caller.

        Raises:
            ValueError: If a single-record delivery is requested from a
                router built for several records
        """
        plan = decide_actions(mode, self.capability)
        step = CaptureState.SHARING if plan.allows_share else CaptureState.DOWNLOADING
        if self._rejects(step):
            return

        filename = self._filename_for(mode)
        await self._deliver(bitmap, step, caption, filename)

    def _filename_for(self, mode: ExportMode) -> str:
        if mode is self.mode:
            return self.filename
        if mode is ExportMode.MULTI:
            return summary_filename()
        raise ValueError("Single-record delivery needs a single-record router")

    def _rejects(self, step: CaptureState) -> bool:
        if not self.is_busy:
            return False
        logger.debug("EXPORT_REJECTED: state=%s, requested=%s", self._state.value, step.value)
        return True

    async def _run(self, step: CaptureState) -> bool:
        if self._rejects(step):
            return False

        self._state = CaptureState.CAPTURING
        try:
            bitmap = await self.engine.capture(self.surface)
        except CaptureUnavailableError as e:
            self._state = CaptureState.IDLE
            logger.warning("CAPTURE_UNAVAILABLE: %s", e.detail)
            self.notifier.alert(e.message)
            return False
        except BaseException:
            self._state = CaptureState.IDLE
            raise

        return await self._deliver(bitmap, step, self.caption, self.filename)

    async def _deliver(
        self,
        bitmap: Bitmap,
        step: CaptureState,
        caption: str | None,
        filename: str,
    ) -> bool:
        self._state = step
        try:
            if step is CaptureState.SHARING:
                await self._share(bitmap, caption or "")
            else:
                await self._save(bitmap, filename)
            return True
        except SaveFailedError as e:
            self.notifier.alert(e.message)
        except ShareUnsupportedError as e:
            self.notifier.inform(e.message)
        except ShareCancelledOrFailedError as e:
            logger.info("SHARE_CANCELLED: %s", e.detail)
        finally:
            self._state = CaptureState.IDLE
        return False

    async def _share(self, bitmap: Bitmap, caption: str) -> None:
        if self.share_target is None:
            raise ShareUnsupportedError(detail="No native share primitive")

        file = ShareFile(
            name=SHARE_FILENAME,
            media_type=bitmap.media_type,
            data=bitmap.to_png_bytes(),
        )
        if not self.share_target.can_share([file]):
            raise ShareUnsupportedError(detail=f"Share target rejected {bitmap.media_type} files")

        try:
            await self.share_target.share(caption, [file])
        except Exception as e:
            # The OS surface reports dismissal and failure the same way
            raise ShareCancelledOrFailedError(detail=f"{type(e).__name__}: {e}") from e

        logger.info("SHARE_DONE: %dx%d", bitmap.width, bitmap.height)

    async def _save(self, bitmap: Bitmap, filename: str) -> None:
        try:
            await self.saver.save(filename, bitmap.to_png_bytes(), bitmap.media_type)
        except SaveFailedError:
            raise
        except OSError as e:
            raise SaveFailedError(filename=filename, detail=str(e)) from e
