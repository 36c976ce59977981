"""
Font loading for measurement and rasterization.

TrueType faces come from settings. When a face cannot be loaded, Pillow's
bundled scalable font is used so rendering never depends on system fonts.
"""

import logging

from PIL import ImageFont

from battlediary.config import settings

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class FontBook:
    """
    Caches one font object per (size, bold, italic).

    `scale` is the pixel density text is painted at.
    """

    def __init__(
        self,
        regular_path: str | None = None,
        bold_path: str | None = None,
        italic_path: str | None = None,
        scale: int = 1,
    ) -> None:
        self.scale = scale
        self._paths = {
            (False, False): regular_path or settings.font_path,
            (True, False): bold_path or settings.font_bold_path,
            (False, True): italic_path or settings.font_italic_path,
            (True, True): bold_path or settings.font_bold_path,
        }
        self._cache: dict[tuple[int, bool, bool], Font] = {}

    def get(self, size: int, bold: bool = False, italic: bool = False) -> Font:
        key = (size, bold, italic)
        font = self._cache.get(key)
        if font is not None:
            return font

        path = self._paths[(bold, italic)]
        try:
            font = ImageFont.truetype(path, size)
        except OSError:
            logger.debug("Font %s unavailable, using bundled font at size %d", path, size)
            font = ImageFont.load_default(size=size)

        self._cache[key] = font
        return font

    def text_width(self, text: str, size: int, bold: bool = False, italic: bool = False) -> float:
        """
        Advance width of `text` in logical pixels at `size`.

        Measured with the face painting uses, loaded at `size * scale`.
        """
        if not text:
            return 0.0
        return float(self.get(size * self.scale, bold, italic).getlength(text)) / self.scale
