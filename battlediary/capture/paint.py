"""
Raster painter (PIL).

Draws a laid-out frame tree onto an image at a super-sampling scale.
Coordinates come from the flow layout in logical pixels and are
multiplied by the scale here; fonts are loaded at the scaled size.
"""

from PIL import Image, ImageDraw

from battlediary.capture.fonts import FontBook
from battlediary.capture.flow import Frame, line_height
from battlediary.layout.nodes import Picture, Style, Text


def paint_frame(
    image: Image.Image,
    frame: Frame,
    fonts: FontBook,
    scale: int,
    pictures: dict[str, Image.Image],
    origin: tuple[float, float] = (0.0, 0.0),
) -> None:
    """Paint `frame` and its descendants. `origin` is the parent's top-left."""
    x = origin[0] + frame.x
    y = origin[1] + frame.y
    node = frame.node
    draw = ImageDraw.Draw(image)

    if isinstance(node, Picture):
        _paint_picture(image, node, pictures, x, y, frame.width, frame.height, scale)
        return

    _paint_decoration(draw, node.style, x, y, frame.width, frame.height, scale)

    if isinstance(node, Text):
        _paint_text(draw, node, frame.lines, fonts, x, y, scale)
        return

    for child in frame.children:
        paint_frame(image, child, fonts, scale, pictures, (x, y))


def _px(value: float, scale: int) -> int:
    return round(value * scale)


def _paint_decoration(
    draw: ImageDraw.ImageDraw,
    style: Style,
    x: float,
    y: float,
    width: float,
    height: float,
    scale: int,
) -> None:
    if style.background is None and style.border is None:
        return
    box = (
        _px(x, scale),
        _px(y, scale),
        _px(x + width, scale) - 1,
        _px(y + height, scale) - 1,
    )
    if box[2] < box[0] or box[3] < box[1]:
        return
    draw.rounded_rectangle(
        box,
        radius=style.radius * scale,
        fill=style.background,
        outline=style.border,
        width=scale if style.border else 0,
    )


def _paint_text(
    draw: ImageDraw.ImageDraw,
    node: Text,
    lines: tuple[str, ...],
    fonts: FontBook,
    x: float,
    y: float,
    scale: int,
) -> None:
    top, _, _, left = node.style.padding
    font = fonts.get(node.size * scale, node.bold, node.italic)
    step = line_height(node.size)
    # Center the glyph box inside each line box
    leading = (step - node.size) / 2

    for index, line in enumerate(lines):
        if not line:
            continue
        position = (_px(x + left, scale), _px(y + top + index * step + leading, scale))
        draw.text(position, line, font=font, fill=node.color)


def _paint_picture(
    image: Image.Image,
    node: Picture,
    pictures: dict[str, Image.Image],
    x: float,
    y: float,
    width: float,
    height: float,
    scale: int,
) -> None:
    source = pictures.get(node.src)
    if source is None:
        return
    size = (max(_px(width, scale), 1), max(_px(height, scale), 1))
    resized = source.convert("RGBA").resize(size, resample=Image.Resampling.LANCZOS)
    image.paste(resized, (_px(x, scale), _px(y, scale)), mask=resized)
