"""
Layout composition.

Turns match records into a renderable visual tree.
"""

from battlediary.layout.composer import (
    compose,
    detail_layout,
    game_row,
    is_visible_game,
    match_block,
    score_badge,
    score_text,
    summary_layout,
)
from battlediary.layout.nodes import (
    Box,
    LayoutVariant,
    Node,
    Picture,
    Style,
    Text,
    VisualTree,
    find_by_role,
    iter_nodes,
)
from battlediary.layout.theme import TONE_PALETTES, Tone, score_tone

__all__ = [
    "Box",
    "LayoutVariant",
    "Node",
    "Picture",
    "Style",
    "TONE_PALETTES",
    "Text",
    "Tone",
    "VisualTree",
    "compose",
    "detail_layout",
    "find_by_role",
    "game_row",
    "is_visible_game",
    "iter_nodes",
    "match_block",
    "score_badge",
    "score_text",
    "score_tone",
    "summary_layout",
]
