"""
資料模型模組

提供應用程式的核心資料結構，使用 Pydantic 進行驗證
"""

from .core import (
    DEFAULT_BACKGROUND_COLOR,
    SUPPORTED_EXTENSIONS,
    CutoutConfig,
    CutoutParameters,
    CutoutResult,
    EnabledChannels,
    RasterImage,
    is_supported_image,
)

__all__ = [
    "CutoutConfig",
    "CutoutParameters",
    "CutoutResult",
    "DEFAULT_BACKGROUND_COLOR",
    "EnabledChannels",
    "RasterImage",
    "SUPPORTED_EXTENSIONS",
    "is_supported_image",
]
