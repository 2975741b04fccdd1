"""
背景色偵測模組

從圖片邊緣帶取樣，以量化後出現最多次的顏色作為背景色
"""

import logging
from typing import Final

import numpy as np

from smart_cutout.common import rgb_to_hex
from smart_cutout.data_model import DEFAULT_BACKGROUND_COLOR, RasterImage


logger = logging.getLogger(__name__)

# 常數定義
SAMPLE_BAND: Final[int] = 10  # 邊緣帶寬度（像素）
SAMPLE_STRIDE: Final[int] = 10  # 沿邊緣的取樣間隔
QUANTIZE_BUCKET: Final[int] = 16  # 每通道量化級距（256 -> 16 級）


class BackgroundColorDetector:
    """
    背景色偵測器

    取樣順序：上邊帶、下邊帶（逐欄）、左邊帶、右邊帶（逐列）。
    重疊區域的像素會被重複計數。
    票數相同時取最先出現的顏色。
    """

    def __init__(
        self,
        band: int = SAMPLE_BAND,
        stride: int = SAMPLE_STRIDE,
        bucket: int = QUANTIZE_BUCKET,
    ) -> None:
        """
        初始化偵測器

        Args:
            band: 邊緣帶寬度
            stride: 取樣間隔
            bucket: 量化級距
        """
        if band < 1 or stride < 1 or bucket < 1:
            msg = f"band, stride and bucket must be positive, got {band}, {stride}, {bucket}"
            raise ValueError(msg)
        self.band = band
        self.stride = stride
        self.bucket = bucket

    def sample_border(self, image: RasterImage) -> np.ndarray:
        """
        取樣邊緣帶像素

        Args:
            image: 輸入圖片

        Returns:
            取樣的 RGB (N, 3)，依取樣順序排列
        """
        rgb = image.rgb
        height, width = image.height, image.width
        band, stride = self.band, self.stride

        # 上下邊帶：外層為欄、內層為列，需轉置後攤平
        top = rgb[: min(band, height), ::stride].transpose(1, 0, 2)
        bottom = rgb[max(0, height - band) :, ::stride].transpose(1, 0, 2)
        # 左右邊帶：外層為列、內層為欄
        left = rgb[::stride, : min(band, width)]
        right = rgb[::stride, max(0, width - band) :]

        return np.concatenate(
            [part.reshape(-1, 3) for part in (top, bottom, left, right)]
        )

    def detect(self, image: RasterImage) -> str:
        """
        偵測主要背景色

        Args:
            image: 輸入圖片

        Returns:
            #rrggbb 色碼（量化後的值）
        """
        samples = self.sample_border(image)
        if len(samples) == 0:
            return DEFAULT_BACKGROUND_COLOR

        quantized = (samples // self.bucket) * self.bucket
        colors, first_index, counts = np.unique(
            quantized, axis=0, return_index=True, return_counts=True
        )

        # 票數最高者中取最先出現的
        top_count = counts.max()
        candidates = np.flatnonzero(counts == top_count)
        winner = candidates[np.argmin(first_index[candidates])]
        r, g, b = (int(v) for v in colors[winner])

        logger.debug(
            "Background detection: %d samples, %d distinct colors, winner %d votes",
            len(samples),
            len(colors),
            int(top_count),
        )
        return rgb_to_hex(r, g, b)


def detect_background_color(image: RasterImage) -> str:
    """
    以預設取樣設定偵測背景色

    Args:
        image: 輸入圖片

    Returns:
        #rrggbb 色碼
    """
    return BackgroundColorDetector().detect(image)
