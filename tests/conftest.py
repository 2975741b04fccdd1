"""
Pytest 配置和共用 fixtures
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageDraw

from smart_cutout.data_model import RasterImage
from tests.fixtures.images import RED, WHITE, fill_rect, make_image


@pytest.fixture
def white_image() -> RasterImage:
    """10x10 純白圖片"""
    return RasterImage(make_image(10, 10))


@pytest.fixture
def red_square_image() -> RasterImage:
    """
    10x10 白底，中央 3x3 紅色方塊

    紅色方塊位於 x, y = 3..5
    """
    pixels = make_image(10, 10)
    fill_rect(pixels, 3, 3, 6, 6, RED)
    return RasterImage(pixels)


@pytest.fixture
def enclosed_island_image() -> RasterImage:
    """
    10x10 白底，6x6 紅色前景內包圍 2x2 白色小島

    紅色區域 x, y = 2..7；白色小島 x, y = 4..5
    """
    pixels = make_image(10, 10)
    fill_rect(pixels, 2, 2, 8, 8, RED)
    fill_rect(pixels, 4, 4, 6, 6, WHITE)
    return RasterImage(pixels)


@pytest.fixture
def noisy_light_image() -> RasterImage:
    """接近白色的隨機雜訊圖片（用於單調性測試）"""
    rng = np.random.default_rng(42)
    pixels = make_image(40, 30)
    pixels[:, :, :3] = rng.integers(150, 256, size=(30, 40, 3), dtype=np.uint8)
    return RasterImage(pixels)


@pytest.fixture
def white_background_file(tmp_path: Path) -> Path:
    """
    生成純白背景測試圖片（產品攝影風格）

    模擬：產品攝影，純白背景
    """
    img_path = tmp_path / "white_background.png"

    img = Image.new("RGB", (64, 48), color=WHITE)
    draw = ImageDraw.Draw(img)

    # 繪製產品（簡單的瓶子形狀）
    draw.rectangle([(24, 16), (39, 40)], fill=(100, 149, 237))
    # 瓶蓋
    draw.rectangle([(28, 10), (35, 15)], fill=(255, 215, 0))

    img.save(img_path)
    return img_path


@pytest.fixture
def greenscreen_file(tmp_path: Path) -> Path:
    """
    生成綠幕測試圖片

    模擬：綠色背景上的物體
    """
    img_path = tmp_path / "greenscreen.png"

    img = Image.new("RGB", (64, 64), color=(0, 177, 64))
    draw = ImageDraw.Draw(img)
    draw.ellipse([(16, 16), (47, 47)], fill=(255, 100, 100))

    img.save(img_path)
    return img_path
