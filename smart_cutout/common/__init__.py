"""
共用模組

提供在多個功能間共用的色彩工具
"""

from .color_space import (
    channel_distance,
    color_distance,
    color_matches,
    hex_to_rgb,
    is_hex_color,
    match_mask,
    rgb_to_hex,
)


__all__ = [
    "channel_distance",
    "color_distance",
    "color_matches",
    "hex_to_rgb",
    "is_hex_color",
    "match_mask",
    "rgb_to_hex",
]
