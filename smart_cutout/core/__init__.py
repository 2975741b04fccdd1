"""
核心模組 - 檔案處理與進度顯示
"""

from .processor import CutoutProcessor
from .progress import PhaseProgressBar


__all__ = ["CutoutProcessor", "PhaseProgressBar"]
