"""
區域分割測試
"""

import numpy as np
import pytest

from smart_cutout.data_model import EnabledChannels, RasterImage
from smart_cutout.features.cutout import RegionSegmenter, flood_fill
from tests.fixtures.images import RED, WHITE, fill_rect, make_image


ALL = EnabledChannels()


@pytest.fixture
def speckled_image() -> RasterImage:
    """白/黑隨機斑點圖片，產生許多大小不一的區域"""
    rng = np.random.default_rng(5)
    pixels = make_image(24, 18)
    dark = rng.random((18, 24)) < 0.45
    pixels[dark, :3] = 0
    return RasterImage(pixels)


class TestRegionSegmenter:
    """測試 RegionSegmenter"""

    @pytest.mark.unit
    def test_grow_matches_flood_fill(self, speckled_image: RasterImage) -> None:
        """每個種子的區域都與逐像素洪水填充相同"""
        segmenter = RegionSegmenter(speckled_image, WHITE, 30, ALL)

        for y in range(speckled_image.height):
            for x in range(speckled_image.width):
                expected = flood_fill(speckled_image, x, y, WHITE, 30, ALL)
                assert np.array_equal(segmenter.grow(x, y), expected)

    @pytest.mark.unit
    def test_region_size(self, red_square_image: RasterImage) -> None:
        segmenter = RegionSegmenter(red_square_image, WHITE, 10, ALL)
        assert segmenter.region_count == 1
        assert segmenter.region_size(0, 0) == 91
        assert segmenter.region_size(4, 4) == 0

        segmenter = RegionSegmenter(red_square_image, RED, 10, ALL)
        assert segmenter.region_size(4, 4) == 9

    @pytest.mark.unit
    def test_enclosed_island_is_separate(self, enclosed_island_image: RasterImage) -> None:
        segmenter = RegionSegmenter(enclosed_island_image, WHITE, 10, ALL)
        assert segmenter.region_count == 2
        assert segmenter.region_size(4, 4) == 4
        assert segmenter.region_id(0, 0) != segmenter.region_id(4, 4)

    @pytest.mark.unit
    def test_diagonal_not_connected(self) -> None:
        """4-連通：對角相鄰的像素不屬於同一區域"""
        pixels = make_image(2, 2, color=RED)
        fill_rect(pixels, 0, 0, 1, 1, WHITE)
        fill_rect(pixels, 1, 1, 2, 2, WHITE)
        segmenter = RegionSegmenter(RasterImage(pixels), WHITE, 0, ALL)

        assert segmenter.region_count == 2
        assert segmenter.grow(0, 0).sum() == 1

    @pytest.mark.unit
    def test_out_of_bounds_seed(self, white_image: RasterImage) -> None:
        segmenter = RegionSegmenter(white_image, WHITE, 0, ALL)
        for x, y in ((-1, 0), (0, -1), (10, 0), (0, 10)):
            assert not segmenter.in_bounds(x, y)
            assert not segmenter.grow(x, y).any()
            assert segmenter.region_size(x, y) == 0

    @pytest.mark.unit
    def test_no_channels(self, white_image: RasterImage) -> None:
        channels = EnabledChannels(r=False, g=False, b=False)
        segmenter = RegionSegmenter(white_image, WHITE, 100, channels)
        assert segmenter.region_count == 0
        assert not segmenter.grow(0, 0).any()

    @pytest.mark.unit
    def test_grow_returns_fresh_mask(self, white_image: RasterImage) -> None:
        segmenter = RegionSegmenter(white_image, WHITE, 0, ALL)
        first = segmenter.grow(0, 0)
        first[:] = False
        assert segmenter.grow(0, 0).all()

    @pytest.mark.unit
    def test_mask_of(self, enclosed_island_image: RasterImage) -> None:
        segmenter = RegionSegmenter(enclosed_island_image, WHITE, 10, ALL)
        outer = segmenter.region_id(0, 0)
        island = segmenter.region_id(4, 4)

        union = segmenter.mask_of([outer, island])
        assert union.sum() == 64 + 4
        assert not segmenter.mask_of([]).any()


class TestFloodFill:
    """測試逐像素洪水填充"""

    @pytest.mark.unit
    def test_seed_not_matching(self, red_square_image: RasterImage) -> None:
        region = flood_fill(red_square_image, 4, 4, WHITE, 10, ALL)
        assert not region.any()

    @pytest.mark.unit
    def test_out_of_bounds(self, white_image: RasterImage) -> None:
        assert not flood_fill(white_image, -1, 5, WHITE, 0, ALL).any()
        assert not flood_fill(white_image, 5, 10, WHITE, 0, ALL).any()

    @pytest.mark.unit
    def test_no_channels(self, white_image: RasterImage) -> None:
        channels = EnabledChannels(r=False, g=False, b=False)
        assert not flood_fill(white_image, 0, 0, WHITE, 100, channels).any()

    @pytest.mark.unit
    def test_shared_visited(self, enclosed_island_image: RasterImage) -> None:
        """共用造訪遮罩時，同一區域只會被回傳一次"""
        visited = np.zeros((10, 10), dtype=bool)
        first = flood_fill(enclosed_island_image, 0, 0, WHITE, 10, ALL, visited)
        second = flood_fill(enclosed_island_image, 9, 9, WHITE, 10, ALL, visited)
        island = flood_fill(enclosed_island_image, 4, 4, WHITE, 10, ALL, visited)

        assert first.sum() == 64
        assert not second.any()
        assert island.sum() == 4

    @pytest.mark.unit
    def test_region_is_connected_and_matching(self, speckled_image: RasterImage) -> None:
        region = flood_fill(speckled_image, 0, 0, WHITE, 30, ALL)
        if region.any():
            assert np.all(speckled_image.rgb[region] == 255)
