"""
Snapshot Capture Engine.

Rasterizes a mounted visual tree into an in-memory bitmap.

INVARIANTS:
- Bitmap size = full content extent x CAPTURE_SCALE, regardless of how
  much of the tree the viewport currently shows
- Background is opaque white
- The source tree is never mutated; pictures are resolved on a copy
- Capture fails with CaptureUnavailableError when nothing is mounted
- Text is measured with the same scaled faces it is drawn with
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from io import BytesIO

from PIL import Image

from battlediary.capture.flow import content_extent, layout_tree
from battlediary.capture.fonts import FontBook
from battlediary.capture.paint import paint_frame
from battlediary.capture.pictures import resolve_pictures
from battlediary.capture.surface import RenderSurface
from battlediary.config import BACKGROUND_COLOR, CAPTURE_SCALE, EXPORT_MEDIA_TYPE, settings
from battlediary.layout.nodes import VisualTree
from battlediary.models.failure import CaptureUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bitmap:
    """A captured raster image."""

    image: Image.Image
    scale: int
    png: bytes = field(repr=False)
    media_type: str = EXPORT_MEDIA_TYPE

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def to_png_bytes(self) -> bytes:
        """Lossless PNG encoding, produced off the event loop at capture time."""
        return self.png


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


class SnapshotEngine:
    """Measures and rasterizes visual trees at a fixed pixel density."""

    def __init__(
        self,
        fonts: FontBook | None = None,
        scale: int = CAPTURE_SCALE,
        allow_remote_images: bool | None = None,
    ) -> None:
        if scale < 2:
            raise ValueError(f"Capture scale must be at least 2, got {scale}")
        if fonts is not None and fonts.scale != scale:
            raise ValueError(f"FontBook measures at scale {fonts.scale}, engine renders at {scale}")
        self.fonts = fonts or FontBook(scale=scale)
        self.scale = scale
        self.allow_remote_images = (
            settings.allow_remote_images if allow_remote_images is None else allow_remote_images
        )

    def measure(self, tree: VisualTree) -> tuple[int, int]:
        """Full content extent of `tree` in logical pixels."""
        prepared, _ = resolve_pictures(tree, self.allow_remote_images)
        return content_extent(layout_tree(prepared, self.fonts))

    def render(self, tree: VisualTree) -> Bitmap:
        """Rasterize `tree` synchronously."""
        start_time = time.perf_counter()

        prepared, pictures = resolve_pictures(tree, self.allow_remote_images)
        frame = layout_tree(prepared, self.fonts)
        width, height = content_extent(frame)

        image = Image.new("RGB", (width * self.scale, height * self.scale), BACKGROUND_COLOR)
        paint_frame(image, frame, self.fonts, self.scale, pictures)
        png = encode_png(image)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "CAPTURE_DONE: variant=%s, logical=%dx%d, pixels=%dx%d, elapsed_ms=%.2f",
            tree.variant.value,
            width,
            height,
            image.width,
            image.height,
            elapsed_ms,
        )
        return Bitmap(image=image, scale=self.scale, png=png)

    async def capture(self, surface: RenderSurface | None) -> Bitmap:
        """
        Capture the tree mounted on `surface`.

        Raises:
            CaptureUnavailableError: If the surface is missing or unmounted
        """
        if surface is None or surface.tree is None:
            raise CaptureUnavailableError(detail="Render surface is not mounted")

        logger.info("CAPTURE_START: variant=%s", surface.tree.variant.value)
        return await asyncio.to_thread(self.render, surface.tree)
