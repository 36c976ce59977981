"""
Render surface: where a composed tree is shown interactively.

The host mounts a tree into a scrollable viewport which may be shorter
than the content. Capture reads the mounted tree, never the viewport.
"""

from battlediary.layout.nodes import VisualTree


class RenderSurface:
    """
    Mount point for a visual tree inside a scrollable viewport.

    Attributes:
        viewport_height: Visible height in logical pixels; None = unbounded
    """

    def __init__(self, viewport_height: int | None = None) -> None:
        self.viewport_height = viewport_height
        self.scroll_offset = 0
        self._tree: VisualTree | None = None

    @property
    def is_mounted(self) -> bool:
        return self._tree is not None

    @property
    def tree(self) -> VisualTree | None:
        return self._tree

    def mount(self, tree: VisualTree) -> None:
        self._tree = tree
        self.scroll_offset = 0

    def unmount(self) -> None:
        self._tree = None
        self.scroll_offset = 0

    def scroll_to(self, offset: int, content_height: int) -> None:
        """Scroll the viewport, clamped to the scrollable range."""
        limit = max(content_height - self.visible_height(content_height), 0)
        self.scroll_offset = min(max(offset, 0), limit)

    def visible_height(self, content_height: int) -> int:
        """Height of the region the user can currently see."""
        if self.viewport_height is None:
            return content_height
        return min(content_height, self.viewport_height)
