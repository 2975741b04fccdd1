"""
純色背景去背功能

背景色偵測、通道預覽、區域分割與三階段去背引擎
"""

from .channel_mask import ChannelMasker, apply_channel_mask
from .detector import BackgroundColorDetector, detect_background_color
from .engine import CutoutEngine, CutoutPhase, RemovalPlan, run_cutout
from .feathering import FEATHER_RADIUS, feather_edges
from .segmenter import RegionSegmenter, flood_fill


__all__ = [
    "BackgroundColorDetector",
    "ChannelMasker",
    "CutoutEngine",
    "CutoutPhase",
    "FEATHER_RADIUS",
    "RegionSegmenter",
    "RemovalPlan",
    "apply_channel_mask",
    "detect_background_color",
    "feather_edges",
    "flood_fill",
    "run_cutout",
]
