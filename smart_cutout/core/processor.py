"""
圖片處理器模組

負責圖片檔案的讀寫，並呼叫去背引擎，遵循單一職責原則 (SRP)
"""

import logging
from collections.abc import Callable
from pathlib import Path

import numpy as np
from PIL import Image

from smart_cutout.data_model import (
    CutoutConfig,
    CutoutResult,
    EnabledChannels,
    RasterImage,
)
from smart_cutout.features.cutout import (
    CutoutEngine,
    CutoutPhase,
    apply_channel_mask,
    detect_background_color,
)
from smart_cutout.settings import settings


logger = logging.getLogger(__name__)


class CutoutProcessor:
    """
    去背處理器

    讀取圖片 → 執行去背 → 輸出 PNG（保留 alpha）
    """

    def __init__(
        self,
        progress_callback: Callable[[CutoutPhase], None] | None = None,
        max_image_size: int | None = None,
    ):
        """
        初始化處理器

        Args:
            progress_callback: 階段進度回調
            max_image_size: 最大圖片邊長，預設取自設定
        """
        self._engine = CutoutEngine(progress_callback=progress_callback)
        self._max_image_size = max_image_size or settings.max_image_size

    def load_image(self, path: Path) -> RasterImage:
        """
        讀取圖片並轉為 RGBA

        Args:
            path: 圖片路徑

        Returns:
            RasterImage

        Raises:
            ValueError: 圖片邊長超過上限
        """
        with Image.open(path) as image:
            width, height = image.size
            if max(width, height) > self._max_image_size:
                msg = (
                    f"Image {path.name} is {width}x{height}, "
                    f"exceeds max size {self._max_image_size}"
                )
                raise ValueError(msg)
            return RasterImage.from_pil(image)

    def detect_background(self, path: Path) -> str:
        """
        偵測圖片背景色

        Args:
            path: 圖片路徑

        Returns:
            #rrggbb 色碼
        """
        color = detect_background_color(self.load_image(path))
        logger.info("Detected background color %s for %s", color, path.name)
        return color

    def save_channel_preview(
        self, image: RasterImage, channels: EnabledChannels, output_path: Path
    ) -> Path:
        """
        輸出通道預覽圖

        Args:
            image: 來源圖片
            channels: 啟用的通道
            output_path: 輸出路徑

        Returns:
            輸出路徑
        """
        preview = apply_channel_mask(image, channels)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        preview.to_pil().save(output_path, format="PNG")
        logger.info("Channel preview saved to %s", output_path)
        return output_path

    def process(self, config: CutoutConfig) -> CutoutResult:
        """
        處理單張圖片

        Args:
            config: 去背設定

        Returns:
            處理結果
        """
        output_path = config.output_path
        if output_path is None:
            raise ValueError("Output path is not set")

        image = self.load_image(config.input_path)
        result = self._engine.run(image, config.parameters)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.to_pil().save(output_path, format="PNG")
        logger.info("Cutout saved to %s", output_path)

        preview_path = None
        if config.save_channel_preview:
            preview_name = f"{output_path.stem}{settings.preview_suffix}.png"
            preview_path = self.save_channel_preview(
                image, config.parameters.channels, output_path.with_name(preview_name)
            )

        alpha = result.alpha
        return CutoutResult(
            output_path=output_path,
            width=result.width,
            height=result.height,
            removed_pixels=int(np.count_nonzero(alpha == 0)),
            feathered_pixels=int(np.count_nonzero((alpha > 0) & (alpha < 255))),  # noqa: PLR2004
            preview_path=preview_path,
        )
