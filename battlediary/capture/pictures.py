"""
Embedded picture resolution.

Pictures are loaded BEFORE layout. A picture that cannot be loaded in a
capture-compatible way is removed from a throwaway copy of the tree, so
it leaves no blank region in the export.

Source handling:
- data: URIs and local paths are loaded directly
- http(s) sources are cross-origin: omitted unless remote images are
  explicitly enabled, in which case they are fetched with httpx
"""

import base64
import logging
from dataclasses import replace
from io import BytesIO
from pathlib import Path
from urllib.parse import unquote_to_bytes, urlparse

import httpx
from PIL import Image

from battlediary.layout.nodes import Box, Node, Picture, VisualTree, iter_nodes

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = frozenset({"http", "https"})
REMOTE_TIMEOUT_SECONDS = 5.0


def is_cross_origin(src: str) -> bool:
    return urlparse(src).scheme.lower() in REMOTE_SCHEMES


def _decode_data_uri(src: str) -> bytes:
    header, _, payload = src.partition(",")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


def _read_source(src: str, allow_remote: bool) -> bytes | None:
    parsed = urlparse(src)
    scheme = parsed.scheme.lower()

    if scheme == "data":
        return _decode_data_uri(src)

    if scheme in REMOTE_SCHEMES:
        if not allow_remote:
            logger.warning("Omitting cross-origin picture from export: %s", src)
            return None
        response = httpx.get(src, timeout=REMOTE_TIMEOUT_SECONDS, follow_redirects=True)
        response.raise_for_status()
        return response.content

    if scheme == "file":
        return Path(parsed.path).read_bytes()

    return Path(src).read_bytes()


def load_picture(src: str, allow_remote: bool = False) -> Image.Image | None:
    """
    Load a picture source into memory.

    Returns:
        The decoded image, or None when the source must be omitted
    """
    try:
        data = _read_source(src, allow_remote)
        if data is None:
            return None
        image = Image.open(BytesIO(data))
        image.load()
        return image
    except (OSError, ValueError, httpx.HTTPError) as e:
        logger.warning("Omitting unloadable picture %s: %s", src[:80], e)
        return None


def strip_pictures(node: Node, keep: set[str]) -> Node:
    """Return a copy of `node` without pictures whose source is not in `keep`."""
    if not isinstance(node, Box):
        return node

    children = tuple(
        strip_pictures(child, keep)
        for child in node.children
        if not (isinstance(child, Picture) and child.src not in keep)
    )
    return replace(node, children=children)


def resolve_pictures(
    tree: VisualTree,
    allow_remote: bool = False,
) -> tuple[VisualTree, dict[str, Image.Image]]:
    """
    Load every picture in `tree`.

    Returns:
        (tree without unloadable pictures, loaded images keyed by source)
    """
    sources = {node.src for node in iter_nodes(tree.root) if isinstance(node, Picture)}
    if not sources:
        return tree, {}

    loaded: dict[str, Image.Image] = {}
    for src in sorted(sources):
        image = load_picture(src, allow_remote)
        if image is not None:
            loaded[src] = image

    if len(loaded) == len(sources):
        return tree, loaded

    root = strip_pictures(tree.root, set(loaded))
    return replace(tree, root=root), loaded
