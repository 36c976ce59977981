"""
Snapshot capture.

Measures, lays out and rasterizes composed visual trees.
"""

from battlediary.capture.engine import Bitmap, SnapshotEngine
from battlediary.capture.flow import Frame, content_extent, layout_tree, wrap_text
from battlediary.capture.fonts import FontBook
from battlediary.capture.pictures import is_cross_origin, load_picture, resolve_pictures
from battlediary.capture.surface import RenderSurface

__all__ = [
    "Bitmap",
    "FontBook",
    "Frame",
    "RenderSurface",
    "SnapshotEngine",
    "content_extent",
    "is_cross_origin",
    "layout_tree",
    "load_picture",
    "resolve_pictures",
    "wrap_text",
]
