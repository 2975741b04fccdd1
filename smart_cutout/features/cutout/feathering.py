"""
邊緣羽化模組

依與最近移除像素的歐氏距離，逐步降低移除邊界附近的不透明度
"""

import logging
from typing import Final

import cv2
import numpy as np


logger = logging.getLogger(__name__)

# 常數定義
FEATHER_RADIUS: Final[int] = 3  # 羽化範圍（像素）
PIXEL_MAX_VALUE: Final[int] = 255


def distance_to_removed(removed: np.ndarray) -> np.ndarray:
    """
    每個像素到最近移除像素的歐氏距離

    移除像素本身距離為 0；沒有任何移除像素時距離極大。

    Args:
        removed: 移除遮罩 (H, W), bool

    Returns:
        距離 (H, W), float64
    """
    kept = (~removed).astype(np.uint8)
    distance = cv2.distanceTransform(kept, cv2.DIST_L2, cv2.DIST_MASK_PRECISE)

    # 像素間的距離平方必為整數，還原為 float64 精確值
    squared = np.rint(distance.astype(np.float64) ** 2)
    return np.sqrt(squared)


def feather_edges(
    alpha: np.ndarray,
    removed: np.ndarray,
    edge_transparency: float,
) -> np.ndarray:
    """
    羽化移除邊界

    距離移除像素 d < 3 的非透明像素，alpha 乘上
    edge_transparency + (1 - edge_transparency) * d / 3 後取下界。

    Args:
        alpha: Alpha 通道 (H, W), uint8（移除像素已為 0）
        removed: 移除遮罩 (H, W), bool
        edge_transparency: 邊緣透明度 (0.0-1.0)，1 表示不變

    Returns:
        新的 alpha (H, W), uint8
    """
    result = alpha.copy()
    if edge_transparency >= 1 or not np.any(removed):
        return result

    distance = distance_to_removed(removed)
    band = (alpha > 0) & (distance < FEATHER_RADIUS)
    if not np.any(band):
        return result

    edge_factor = distance[band] / FEATHER_RADIUS
    scaled = np.floor(
        alpha[band].astype(np.float64)
        * (edge_transparency + (1 - edge_transparency) * edge_factor)
    )
    result[band] = np.clip(scaled, 0, PIXEL_MAX_VALUE).astype(np.uint8)

    logger.debug("Feathered %d edge pixels", int(band.sum()))
    return result
