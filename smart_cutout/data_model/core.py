"""
核心資料模型

使用 Pydantic 進行參數驗證，RasterImage 以 numpy 陣列承載像素資料
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from smart_cutout.common.color_space import hex_to_rgb
from smart_cutout.settings import settings


# 預設參數（重設時使用）
DEFAULT_COLOR_TOLERANCE = 30
DEFAULT_EDGE_TRANSPARENCY = 0.5
DEFAULT_MIN_PIXEL_AREA = 100
DEFAULT_BACKGROUND_COLOR = "#ffffff"

RGBA_CHANNELS = 4


@dataclass(frozen=True, slots=True)
class RasterImage:
    """
    RGBA 點陣圖

    像素以 (H, W, 4) 的 uint8 陣列儲存，列優先、左上角為原點

    Attributes:
        pixels: RGBA 像素陣列
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = self.pixels
        if pixels.ndim != 3 or pixels.shape[2] != RGBA_CHANNELS:  # noqa: PLR2004
            msg = f"Expected (H, W, 4) RGBA array, got shape {pixels.shape}"
            raise ValueError(msg)
        if pixels.dtype != np.uint8:
            msg = f"Expected uint8 pixels, got {pixels.dtype}"
            raise ValueError(msg)
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            msg = f"Image must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}"
            raise ValueError(msg)

    @property
    def width(self) -> int:
        """寬度"""
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        """高度"""
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        """RGB 通道視圖 (H, W, 3)"""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        """Alpha 通道視圖 (H, W)"""
        return self.pixels[:, :, 3]

    def copy(self) -> "RasterImage":
        """建立獨立配置的副本"""
        return RasterImage(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """輸出交錯排列的 RGBA 位元組（長度 W*H*4）"""
        return self.pixels.tobytes()

    @classmethod
    def from_buffer(cls, width: int, height: int, buffer: bytes) -> "RasterImage":
        """
        從交錯排列的 RGBA 位元組建立圖片

        Args:
            width: 寬度
            height: 高度
            buffer: 長度必須為 width * height * 4 的位元組

        Returns:
            RasterImage（資料為複製，不與 buffer 共用記憶體）
        """
        expected = width * height * RGBA_CHANNELS
        if len(buffer) != expected:
            msg = f"Buffer length {len(buffer)} does not match {width}x{height} RGBA ({expected})"
            raise ValueError(msg)
        pixels = np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, 4).copy()
        return cls(pixels)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """從 PIL 圖片建立（自動轉為 RGBA）"""
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        """轉為 PIL RGBA 圖片"""
        return Image.fromarray(self.pixels, "RGBA")


class EnabledChannels(BaseModel):
    """
    啟用的色彩通道

    Attributes:
        r: 是否啟用 R 通道
        g: 是否啟用 G 通道
        b: 是否啟用 B 通道
    """

    model_config = ConfigDict(frozen=True)

    r: bool = True
    g: bool = True
    b: bool = True

    @property
    def indices(self) -> tuple[int, ...]:
        """啟用通道的索引（0=R, 1=G, 2=B）"""
        flags = (self.r, self.g, self.b)
        return tuple(i for i, enabled in enumerate(flags) if enabled)

    @property
    def count(self) -> int:
        """啟用通道數"""
        return len(self.indices)

    @property
    def none_enabled(self) -> bool:
        """是否所有通道都被停用"""
        return self.count == 0


class CutoutParameters(BaseModel):
    """
    去背參數

    不可變值物件，每次修改都會建立新的實例

    Attributes:
        enable_r: 是否啟用 R 通道比對
        enable_g: 是否啟用 G 通道比對
        enable_b: 是否啟用 B 通道比對
        color_tolerance: 顏色容差 (0-100)，直接與 0-255 空間的距離比較
        edge_transparency: 邊緣透明度 (0.0-1.0)，1 表示不羽化
        min_pixel_area: 最小移除面積（像素）
        background_color: 背景色 #RRGGBB（格式錯誤時視為白色）
    """

    model_config = ConfigDict(frozen=True)

    enable_r: bool = True
    enable_g: bool = True
    enable_b: bool = True
    color_tolerance: int = Field(default=DEFAULT_COLOR_TOLERANCE, ge=0, le=100)
    edge_transparency: float = Field(default=DEFAULT_EDGE_TRANSPARENCY, ge=0.0, le=1.0)
    min_pixel_area: int = Field(default=DEFAULT_MIN_PIXEL_AREA, ge=1)
    background_color: str = DEFAULT_BACKGROUND_COLOR

    @classmethod
    def defaults(cls) -> "CutoutParameters":
        """取得重設用的預設參數"""
        return cls()

    @property
    def channels(self) -> EnabledChannels:
        """啟用的通道"""
        return EnabledChannels(r=self.enable_r, g=self.enable_g, b=self.enable_b)

    @property
    def target_rgb(self) -> tuple[int, int, int]:
        """背景色 RGB（格式錯誤時為白色）"""
        return hex_to_rgb(self.background_color)

    def updated(self, **changes: Any) -> "CutoutParameters":
        """
        建立修改過部分欄位的新參數

        原實例保持不變；新值會重新驗證

        Args:
            **changes: 要修改的欄位

        Returns:
            新的參數實例
        """
        return CutoutParameters.model_validate({**self.model_dump(), **changes})


class CutoutConfig(BaseModel):
    """
    單張圖片的去背設定

    Attributes:
        input_path: 輸入圖片路徑
        output_path: 輸出 PNG 路徑（預設為輸入旁的 <stem><output_suffix>.png）
        parameters: 去背參數
        save_channel_preview: 是否另存通道預覽圖
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    input_path: Path
    output_path: Path | None = None
    parameters: CutoutParameters = Field(default_factory=CutoutParameters)
    save_channel_preview: bool = False

    def model_post_init(self, __context: object) -> None:
        """Set default output path after initialization."""
        if self.output_path is None:
            suffix = settings.output_suffix
            default = self.input_path.with_name(f"{self.input_path.stem}{suffix}.png")
            # Use object.__setattr__ since model is frozen
            object.__setattr__(self, "output_path", default)


class CutoutResult(BaseModel):
    """
    去背結果

    Attributes:
        output_path: 輸出檔案路徑
        width: 圖片寬度
        height: 圖片高度
        removed_pixels: 完全透明的像素數
        feathered_pixels: 半透明的像素數
        preview_path: 通道預覽圖路徑（未輸出時為 None）
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    output_path: Path
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    removed_pixels: int = Field(ge=0)
    feathered_pixels: int = Field(ge=0)
    preview_path: Path | None = None

    @property
    def total_pixels(self) -> int:
        """總像素數"""
        return self.width * self.height

    @property
    def removed_ratio(self) -> float:
        """移除比例"""
        return self.removed_pixels / self.total_pixels


# 支援的圖片格式
SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}
)


def is_supported_image(path: Path) -> bool:
    """
    檢查檔案是否為支援的圖片格式

    Args:
        path: 檔案路徑

    Returns:
        是否為支援的圖片格式
    """
    return path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
