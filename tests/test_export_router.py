"""
Tests for the Export Router.

These tests verify:
1. Affordances follow the decision table (share absent, not disabled)
2. CaptureState runs IDLE -> CAPTURING -> SHARING/DOWNLOADING -> IDLE
3. Re-entrant exports are rejected while busy
4. Every failure is classified, surfaced (or not) correctly, and resets to IDLE
"""

import asyncio

import pytest

from battlediary.capture.engine import Bitmap, SnapshotEngine
from battlediary.capture.surface import RenderSurface
from battlediary.config import MANUAL_POST_HINT
from battlediary.export.naming import summary_filename
from battlediary.export.router import ExportRouter
from battlediary.layout.composer import compose
from battlediary.models.export import CaptureState, ExportMode
from battlediary.models.failure import (
    CaptureUnavailableError,
    SaveFailedError,
    ShareUnsupportedError,
)
from battlediary.models.record import Record

FILENAME = "mtg_result_2024-05-01_Burn.png"
CAPTION = "MTG Result: Burn (Modern)\n2-1\n#MTG #MTGBattleDiary"


class GatedEngine:
    """Engine whose capture waits until the test opens the gate."""

    def __init__(self, engine: SnapshotEngine) -> None:
        self.engine = engine
        self.gate = asyncio.Event()
        self.started = asyncio.Event()

    async def capture(self, surface: RenderSurface | None) -> Bitmap:
        self.started.set()
        await self.gate.wait()
        return await self.engine.capture(surface)


@pytest.fixture
def surface(burn_record: Record) -> RenderSurface:
    surface = RenderSurface(viewport_height=400)
    surface.mount(compose(burn_record))
    return surface


@pytest.fixture
def make_router(engine, surface, saver, notifier):
    def _make(mode: ExportMode = ExportMode.SINGLE, **overrides) -> ExportRouter:
        kwargs = {
            "engine": engine,
            "surface": surface,
            "saver": saver,
            "filename": FILENAME,
            "caption": CAPTION,
            "notifier": notifier,
        }
        kwargs.update(overrides)
        return ExportRouter(mode, **kwargs)

    return _make


# =============================================================================
# PRESENTATION
# =============================================================================


class TestPresentation:
    def test_single_capability_positive(self, make_router, share_target) -> None:
        view = make_router(share_target=share_target).presentation()

        assert view.download_enabled is True
        assert view.share is not None
        assert view.share.enabled is True
        assert view.hint is None
        assert view.busy_label is None

    def test_single_capability_negative_has_hint_and_no_share(self, make_router) -> None:
        view = make_router(share_target=None).presentation()

        assert view.download_enabled is True
        assert view.share is None
        assert view.hint == MANUAL_POST_HINT

    def test_single_target_without_file_support(self, make_router, make_share_target) -> None:
        view = make_router(share_target=make_share_target(accepts_files=False)).presentation()
        assert view.share is None
        assert view.hint == MANUAL_POST_HINT

    def test_multi_never_shares(self, make_router, share_target) -> None:
        view = make_router(ExportMode.MULTI, share_target=share_target, caption=None).presentation()

        assert view.download_enabled is True
        assert view.share is None
        assert view.hint is None


# =============================================================================
# DOWNLOAD
# =============================================================================


class TestDownload:
    async def test_download_saves_png(self, make_router, saver) -> None:
        router = make_router()

        assert await router.download() is True

        data, media_type = saver.saved[FILENAME]
        assert media_type == "image/png"
        assert data.startswith(b"\x89PNG")
        assert router.state is CaptureState.IDLE

    async def test_download_available_without_share(self, make_router, saver) -> None:
        router = make_router(ExportMode.MULTI, caption=None)
        assert await router.download() is True
        assert FILENAME in saver.saved

    async def test_save_failure_alerts(self, make_router, make_saver, notifier) -> None:
        router = make_router(saver=make_saver(error=SaveFailedError(filename=FILENAME)))

        assert await router.download() is False
        assert notifier.alerts == [SaveFailedError(filename=FILENAME).message]
        assert router.state is CaptureState.IDLE

    async def test_os_error_becomes_save_failure(self, make_router, make_saver, notifier) -> None:
        router = make_router(saver=make_saver(error=OSError("disk full")))

        assert await router.download() is False
        assert notifier.alerts == [SaveFailedError(filename=FILENAME).message]

    async def test_capture_unavailable_alerts(
        self, make_router, surface, saver, notifier
    ) -> None:
        surface.unmount()
        router = make_router()

        assert await router.download() is False
        assert notifier.alerts == [CaptureUnavailableError().message]
        assert saver.saved == {}
        assert router.state is CaptureState.IDLE


# =============================================================================
# SHARE
# =============================================================================


class TestShare:
    async def test_share_sends_file_and_caption(self, make_router, share_target) -> None:
        router = make_router(share_target=share_target)

        assert await router.share() is True

        ((text, files),) = share_target.shared
        assert text == CAPTION
        assert len(files) == 1
        assert files[0].name == "result.png"
        assert files[0].media_type == "image/png"
        assert files[0].data.startswith(b"\x89PNG")
        assert router.state is CaptureState.IDLE

    async def test_state_while_sharing(self, make_router, make_share_target) -> None:
        seen = []
        router = None

        def record_state() -> None:
            assert router is not None
            seen.append((router.state, router.presentation()))

        target = make_share_target(on_share=record_state)
        router = make_router(share_target=target)
        await router.share()

        ((state, view),) = seen
        assert state is CaptureState.SHARING
        assert view.share is not None
        assert view.share.enabled is False
        assert view.download_enabled is False
        assert view.busy_label == "Sharing…"

    async def test_cancel_is_silent(self, make_router, make_share_target, notifier) -> None:
        target = make_share_target(error=RuntimeError("AbortError: Share canceled"))
        router = make_router(share_target=target)

        assert await router.share() is False
        assert notifier.alerts == []
        assert notifier.infos == []
        assert router.state is CaptureState.IDLE

        # The user can simply try again
        target.error = None
        assert await router.share() is True

    async def test_share_unavailable_informs(self, make_router, saver, notifier) -> None:
        router = make_router(share_target=None)

        assert await router.share() is False
        assert notifier.infos == [ShareUnsupportedError().message]
        assert notifier.alerts == []
        assert saver.saved == {}

    async def test_multi_share_refused(self, make_router, share_target, notifier) -> None:
        router = make_router(ExportMode.MULTI, share_target=share_target, caption=None)

        assert await router.share() is False
        assert share_target.shared == []
        assert notifier.infos == [ShareUnsupportedError().message]

    async def test_target_rejects_file_at_share_time(
        self, make_router, share_target, notifier
    ) -> None:
        router = make_router(share_target=share_target)
        share_target.accepts_files = False

        assert await router.share() is False
        assert notifier.infos == [ShareUnsupportedError().message]
        assert router.state is CaptureState.IDLE


# =============================================================================
# CONCURRENCY
# =============================================================================


class TestConcurrencyGuard:
    async def test_second_export_rejected_while_capturing(
        self, make_router, engine, share_target, saver
    ) -> None:
        gated = GatedEngine(engine)
        router = make_router(engine=gated, share_target=share_target)

        first = asyncio.create_task(router.download())
        await gated.started.wait()

        assert router.state is CaptureState.CAPTURING
        view = router.presentation()
        assert view.busy_label == "Preparing…"
        assert view.share is not None and view.share.enabled is False
        assert view.download_enabled is False

        assert await router.share() is False
        assert await router.download() is False

        gated.gate.set()
        assert await first is True
        assert list(saver.saved) == [FILENAME]
        assert share_target.shared == []
        assert router.state is CaptureState.IDLE

    async def test_gathered_downloads(self, make_router, saver) -> None:
        router = make_router()
        results = await asyncio.gather(router.download(), router.download())

        assert results == [True, False]
        assert len(saver.saved) == 1


# =============================================================================
# ROUTE / EXPORT
# =============================================================================


class TestRoute:
    async def test_route_single_shares(self, make_router, engine, surface, share_target) -> None:
        router = make_router(share_target=share_target)
        bitmap = engine.render(surface.tree)

        assert await router.route(bitmap, CAPTION, ExportMode.SINGLE) is None

        assert len(share_target.shared) == 1
        assert router.state is CaptureState.IDLE

    async def test_route_multi_downloads_summary_file(
        self, make_router, engine, surface, share_target, saver
    ) -> None:
        router = make_router(share_target=share_target)
        bitmap = engine.render(surface.tree)

        await router.route(bitmap, None, ExportMode.MULTI)

        assert share_target.shared == []
        assert list(saver.saved) == [summary_filename()]

    async def test_route_multi_router_keeps_its_filename(
        self, make_router, engine, surface, saver
    ) -> None:
        router = make_router(ExportMode.MULTI, caption=None, filename="mtg_summary_2024-06-01.png")
        bitmap = engine.render(surface.tree)

        await router.route(bitmap, None, ExportMode.MULTI)

        assert list(saver.saved) == ["mtg_summary_2024-06-01.png"]

    async def test_route_single_on_multi_router_rejected(
        self, make_router, engine, surface
    ) -> None:
        router = make_router(ExportMode.MULTI, caption=None)
        bitmap = engine.render(surface.tree)

        with pytest.raises(ValueError):
            await router.route(bitmap, CAPTION, ExportMode.SINGLE)
        assert router.state is CaptureState.IDLE

    async def test_route_cancellation_is_silent(
        self, make_router, make_share_target, engine, surface, notifier
    ) -> None:
        router = make_router(share_target=make_share_target(error=RuntimeError("dismissed")))
        bitmap = engine.render(surface.tree)

        await router.route(bitmap, CAPTION, ExportMode.SINGLE)

        assert notifier.alerts == []
        assert notifier.infos == []
        assert router.state is CaptureState.IDLE

    async def test_route_save_failure_alerts(
        self, make_router, make_saver, engine, surface, notifier
    ) -> None:
        router = make_router(saver=make_saver(error=OSError("disk full")))
        bitmap = engine.render(surface.tree)

        await router.route(bitmap, None, ExportMode.MULTI)

        assert notifier.alerts == [SaveFailedError(filename=FILENAME).message]
        assert router.state is CaptureState.IDLE

    async def test_route_rejected_while_capturing(
        self, make_router, engine, surface, share_target, saver
    ) -> None:
        gated = GatedEngine(engine)
        router = make_router(engine=gated, share_target=share_target)
        bitmap = engine.render(surface.tree)

        first = asyncio.create_task(router.download())
        await gated.started.wait()

        await router.route(bitmap, CAPTION, ExportMode.SINGLE)

        assert router.state is CaptureState.CAPTURING
        assert router.presentation().download_enabled is False
        assert share_target.shared == []

        gated.gate.set()
        assert await first is True
        assert list(saver.saved) == [FILENAME]
        assert router.state is CaptureState.IDLE

    async def test_export_prefers_share(self, make_router, share_target, saver) -> None:
        router = make_router(share_target=share_target)
        assert await router.export() is True
        assert len(share_target.shared) == 1
        assert saver.saved == {}

    async def test_export_falls_back_to_download(self, make_router, saver) -> None:
        router = make_router(share_target=None)
        assert await router.export() is True
        assert FILENAME in saver.saved
