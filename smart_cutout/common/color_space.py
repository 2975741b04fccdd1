"""
色彩空間工具

十六進位色碼與 RGB 互轉，以及依啟用通道計算的 RGB 距離
"""

import logging
import math
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np


if TYPE_CHECKING:
    from smart_cutout.data_model import EnabledChannels


logger = logging.getLogger(__name__)

# 常數定義
PIXEL_MAX_VALUE = 255
FALLBACK_RGB: tuple[int, int, int] = (255, 255, 255)

_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """
    解析 #RRGGBB 色碼（不分大小寫，# 可省略）

    格式錯誤時不拋出例外，而是回傳白色

    Args:
        hex_color: 色碼字串

    Returns:
        (r, g, b)
    """
    match = _HEX_PATTERN.match(hex_color) if isinstance(hex_color, str) else None
    if match is None:
        logger.debug("Malformed color %r, falling back to white", hex_color)
        return FALLBACK_RGB

    r, g, b = (int(group, 16) for group in match.groups())
    return r, g, b


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """
    RGB 轉為小寫 #rrggbb 色碼

    Args:
        r: 紅色 (0-255)
        g: 綠色 (0-255)
        b: 藍色 (0-255)

    Returns:
        六位十六進位色碼
    """
    for value in (r, g, b):
        if not 0 <= value <= PIXEL_MAX_VALUE:
            msg = f"Color component out of range: {value}"
            raise ValueError(msg)
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def channel_distance(
    pixel: Sequence[int],
    target: Sequence[int],
    channels: "EnabledChannels",
) -> tuple[int, int]:
    """
    計算啟用通道上的平方差總和

    Args:
        pixel: 像素 RGB
        target: 目標 RGB
        channels: 啟用的通道

    Returns:
        (平方差總和, 啟用通道數)；通道數為 0 時距離無意義
    """
    total = 0
    for i in channels.indices:
        diff = int(pixel[i]) - int(target[i])
        total += diff * diff
    return total, channels.count


def color_distance(
    pixel: Sequence[int],
    target: Sequence[int],
    channels: "EnabledChannels",
) -> float | None:
    """
    均方根通道距離（0-255 單位）

    Returns:
        距離；沒有啟用任何通道時為 None
    """
    total, count = channel_distance(pixel, target, channels)
    if count == 0:
        return None
    return math.sqrt(total / count)


def color_matches(
    pixel: Sequence[int],
    target: Sequence[int],
    tolerance: float,
    channels: "EnabledChannels",
) -> bool:
    """判斷像素是否在容差內（沒有啟用通道時永不相符）"""
    distance = color_distance(pixel, target, channels)
    return distance is not None and distance <= tolerance


def match_mask(
    rgb: np.ndarray,
    target: Sequence[int],
    tolerance: float,
    channels: "EnabledChannels",
) -> np.ndarray:
    """
    向量化的 color_matches

    Args:
        rgb: RGB 陣列 (H, W, 3), uint8
        target: 目標 RGB
        tolerance: 容差
        channels: 啟用的通道

    Returns:
        相符遮罩 (H, W), bool
    """
    height, width = rgb.shape[:2]
    if channels.none_enabled:
        return np.zeros((height, width), dtype=bool)

    total = np.zeros((height, width), dtype=np.int64)
    for i in channels.indices:
        diff = rgb[:, :, i].astype(np.int64) - int(target[i])
        total += diff * diff

    # 與 color_distance 相同的運算順序，確保逐像素結果一致
    distance = np.sqrt(total / channels.count)
    return distance <= tolerance


def is_hex_color(value: str) -> bool:
    """是否為合法的 #RRGGBB 色碼（# 可省略）"""
    return isinstance(value, str) and _HEX_PATTERN.match(value) is not None
