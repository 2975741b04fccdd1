"""
區域分割模組

在固定目標色與容差下，找出與種子點 4-連通且顏色相符的最大區域
"""

import logging
from collections.abc import Iterable, Sequence

import cv2
import numpy as np

from smart_cutout.common import color_matches, match_mask
from smart_cutout.data_model import EnabledChannels, RasterImage


logger = logging.getLogger(__name__)

NO_REGION = 0


class RegionSegmenter:
    """
    區域分割器

    目標色與容差在一次分割中固定，因此每個像素是否相符只需判斷一次；
    相符像素再以 4-連通分量標記，grow() 回傳種子所在的分量。
    結果與逐像素的 flood_fill() 完全相同。
    """

    def __init__(
        self,
        image: RasterImage,
        target: Sequence[int],
        tolerance: float,
        channels: EnabledChannels,
    ) -> None:
        """
        初始化分割器

        Args:
            image: 來源圖片
            target: 目標 RGB
            tolerance: 顏色容差
            channels: 啟用的通道
        """
        self.width = image.width
        self.height = image.height
        self._matches = match_mask(image.rgb, target, tolerance, channels)

        if self._matches.any():
            count, labels, stats, _ = cv2.connectedComponentsWithStats(
                self._matches.astype(np.uint8), connectivity=4
            )
            sizes = stats[:, cv2.CC_STAT_AREA].astype(np.int64)
        else:
            count = 1
            labels = np.zeros((self.height, self.width), dtype=np.int32)
            sizes = np.zeros(1, dtype=np.int64)

        # 標籤 0 是不相符的像素，不屬於任何區域
        sizes[NO_REGION] = 0
        self._labels = labels
        self._sizes = sizes
        self._count = count

        logger.debug(
            "Segmenter: %d matching pixels in %d regions",
            int(self._matches.sum()),
            self.region_count,
        )

    @property
    def region_count(self) -> int:
        """相符區域數"""
        return self._count - 1

    @property
    def matches(self) -> np.ndarray:
        """逐像素相符遮罩 (H, W)"""
        return self._matches

    @property
    def labels(self) -> np.ndarray:
        """區域標籤 (H, W)，0 表示不相符"""
        return self._labels

    def in_bounds(self, x: int, y: int) -> bool:
        """座標是否在圖片內"""
        return 0 <= x < self.width and 0 <= y < self.height

    def region_id(self, x: int, y: int) -> int:
        """種子所在的區域 ID（越界或不相符時為 0）"""
        if not self.in_bounds(x, y):
            return NO_REGION
        return int(self._labels[y, x])

    def size_of(self, region_id: int) -> int:
        """區域像素數"""
        return int(self._sizes[region_id])

    def region_size(self, x: int, y: int) -> int:
        """種子所在區域的像素數"""
        return self.size_of(self.region_id(x, y))

    def grow(self, x: int, y: int) -> np.ndarray:
        """
        從種子點成長區域

        Args:
            x: 種子 x
            y: 種子 y

        Returns:
            新配置的區域遮罩 (H, W), bool；種子越界或不相符時為全 False
        """
        region_id = self.region_id(x, y)
        if region_id == NO_REGION:
            return np.zeros((self.height, self.width), dtype=bool)
        return self._labels == region_id

    def mask_of(self, region_ids: Iterable[int]) -> np.ndarray:
        """多個區域的聯集遮罩"""
        ids = [i for i in region_ids if i != NO_REGION]
        if not ids:
            return np.zeros((self.height, self.width), dtype=bool)
        return np.isin(self._labels, ids)


def flood_fill(
    image: RasterImage,
    x: int,
    y: int,
    target: Sequence[int],
    tolerance: float,
    channels: EnabledChannels,
    visited: np.ndarray | None = None,
) -> np.ndarray:
    """
    逐像素的深度優先洪水填充

    每個造訪的像素都與固定目標色比較；已造訪的像素（不論是否相符）
    不會再次檢查，越界座標直接略過。

    Args:
        image: 來源圖片
        x: 種子 x
        y: 種子 y
        target: 目標 RGB
        tolerance: 顏色容差
        channels: 啟用的通道
        visited: 可共用的造訪遮罩 (H, W)；None 時自行配置

    Returns:
        區域遮罩 (H, W), bool
    """
    width, height = image.width, image.height
    region = np.zeros((height, width), dtype=bool)
    if channels.none_enabled:
        return region

    if visited is None:
        visited = np.zeros((height, width), dtype=bool)

    rgb = image.rgb
    stack = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        if not (0 <= cx < width and 0 <= cy < height) or visited[cy, cx]:
            continue
        visited[cy, cx] = True

        if not color_matches(rgb[cy, cx], target, tolerance, channels):
            continue

        region[cy, cx] = True
        stack.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))

    return region
