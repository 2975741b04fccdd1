"""
去背引擎

三階段處理流程：
1. 外部去背：以所有邊緣像素為種子，移除與背景色相連的大區域
2. 內部色塊清理：移除被前景包圍、但面積足夠的背景色區塊
3. 邊緣羽化：移除邊界外 3 像素內的不透明度漸變

引擎本身是同步、單執行緒的；所有遮罩都在單次呼叫內配置，
因此可在多個執行緒上同時處理不同圖片。
"""

import asyncio
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from smart_cutout.data_model import CutoutParameters, RasterImage

from .feathering import feather_edges
from .segmenter import NO_REGION, RegionSegmenter


logger = logging.getLogger(__name__)


class CutoutPhase(StrEnum):
    """處理階段"""

    EXTERIOR = "exterior"  # 外部去背
    INTERIOR = "interior"  # 內部色塊清理
    FEATHER = "feather"  # 邊緣羽化


PhaseCallback = Callable[[CutoutPhase], None]


@dataclass(frozen=True, slots=True)
class RemovalPlan:
    """
    外部與內部階段的移除結果

    Attributes:
        to_remove: 要設為透明的像素 (H, W), bool
        exterior_regions: 外部階段移除的區域數
        interior_regions: 內部階段移除的區域數
        preserved_regions: 內部階段因面積不足而保留的區域數
    """

    to_remove: np.ndarray
    exterior_regions: int
    interior_regions: int
    preserved_regions: int

    @property
    def removed_pixels(self) -> int:
        """移除像素數"""
        return int(self.to_remove.sum())


def _regions_in_scan_order(labels: np.ndarray) -> list[int]:
    """依首次出現的順序列出區域 ID（labels 需為列優先順序）"""
    region_ids, first_seen = np.unique(labels, return_index=True)
    return [int(i) for i in region_ids[np.argsort(first_seen)]]


def border_seeds(width: int, height: int) -> Iterator[tuple[int, int]]:
    """依序產生上、下、左、右邊緣的所有像素座標"""
    for x in range(width):
        yield x, 0
    for x in range(width):
        yield x, height - 1
    for y in range(height):
        yield 0, y
    for y in range(height):
        yield width - 1, y


class CutoutEngine:
    """
    去背引擎

    用法::

        engine = CutoutEngine()
        result = engine.run(image, CutoutParameters(background_color="#ffffff"))
    """

    def __init__(self, progress_callback: PhaseCallback | None = None) -> None:
        """
        初始化引擎

        Args:
            progress_callback: 每個階段完成時呼叫
        """
        self._progress_callback = progress_callback

    def _report(self, phase: CutoutPhase) -> None:
        if self._progress_callback is not None:
            self._progress_callback(phase)

    def plan(self, image: RasterImage, parameters: CutoutParameters) -> RemovalPlan:
        """
        計算外部與內部階段要移除的像素

        Args:
            image: 來源圖片（不會被修改）
            parameters: 去背參數

        Returns:
            移除計畫
        """
        width, height = image.width, image.height
        channels = parameters.channels

        if channels.none_enabled:
            logger.warning("All color channels are disabled; nothing will be removed")
            self._report(CutoutPhase.EXTERIOR)
            self._report(CutoutPhase.INTERIOR)
            return RemovalPlan(
                to_remove=np.zeros((height, width), dtype=bool),
                exterior_regions=0,
                interior_regions=0,
                preserved_regions=0,
            )

        segmenter = RegionSegmenter(
            image,
            parameters.target_rgb,
            parameters.color_tolerance,
            channels,
        )
        min_area = parameters.min_pixel_area

        # 以區域為單位記錄處理狀態（區域內像素的狀態一定相同）
        processed = np.zeros(segmenter.region_count + 1, dtype=bool)
        removed: list[int] = []

        # 階段 1: 外部去背
        for x, y in border_seeds(width, height):
            region_id = segmenter.region_id(x, y)
            if region_id == NO_REGION or processed[region_id]:
                continue
            # 面積不足的區域不標記，留給內部階段處理
            if segmenter.size_of(region_id) >= min_area:
                processed[region_id] = True
                removed.append(region_id)

        exterior_regions = len(removed)
        to_remove = segmenter.mask_of(removed)
        self._report(CutoutPhase.EXTERIOR)
        logger.debug(
            "Exterior phase: %d regions, %d pixels",
            exterior_regions,
            int(to_remove.sum()),
        )

        # 階段 2: 內部色塊清理（依列優先順序掃描）
        transparent = (image.alpha == 0) | to_remove
        candidates = segmenter.matches & ~transparent
        interior: list[int] = []
        preserved = 0
        for region_id in _regions_in_scan_order(segmenter.labels[candidates]):
            if processed[region_id]:
                continue
            processed[region_id] = True
            if segmenter.size_of(region_id) >= min_area:
                interior.append(region_id)
            else:
                preserved += 1

        if interior:
            to_remove |= segmenter.mask_of(interior)
        self._report(CutoutPhase.INTERIOR)
        logger.debug(
            "Interior phase: %d regions removed, %d preserved below area %d",
            len(interior),
            preserved,
            min_area,
        )

        return RemovalPlan(
            to_remove=to_remove,
            exterior_regions=exterior_regions,
            interior_regions=len(interior),
            preserved_regions=preserved,
        )

    def run(self, image: RasterImage, parameters: CutoutParameters) -> RasterImage:
        """
        執行去背

        Args:
            image: 來源圖片（不會被修改）
            parameters: 去背參數

        Returns:
            新的 RGBA 圖片
        """
        logger.info(
            "Cutout %dx%d: color=%s tolerance=%d min_area=%d edge=%.2f",
            image.width,
            image.height,
            parameters.background_color,
            parameters.color_tolerance,
            parameters.min_pixel_area,
            parameters.edge_transparency,
        )

        plan = self.plan(image, parameters)

        output = image.pixels.copy()
        output[:, :, 3][plan.to_remove] = 0

        # 階段 3: 邊緣羽化
        if parameters.edge_transparency < 1:
            output[:, :, 3] = feather_edges(
                output[:, :, 3], plan.to_remove, parameters.edge_transparency
            )
        self._report(CutoutPhase.FEATHER)

        logger.info(
            "Cutout done: %d pixels removed (%d exterior + %d interior regions)",
            plan.removed_pixels,
            plan.exterior_regions,
            plan.interior_regions,
        )
        return RasterImage(output)

    async def run_async(
        self, image: RasterImage, parameters: CutoutParameters
    ) -> RasterImage:
        """
        在工作執行緒上執行 run()，避免阻塞事件迴圈

        處理一旦開始便會執行到結束，不支援取消。
        """
        return await asyncio.to_thread(self.run, image, parameters)


def run_cutout(image: RasterImage, parameters: CutoutParameters) -> RasterImage:
    """以預設引擎執行去背"""
    return CutoutEngine().run(image, parameters)
