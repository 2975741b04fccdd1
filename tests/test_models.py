"""
資料模型測試
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from pydantic import ValidationError

from smart_cutout.data_model import (
    CutoutConfig,
    CutoutParameters,
    CutoutResult,
    EnabledChannels,
    RasterImage,
    is_supported_image,
)
from smart_cutout.settings import settings
from tests.fixtures.images import make_image


class TestRasterImage:
    """測試 RasterImage"""

    @pytest.mark.unit
    def test_dimensions(self) -> None:
        image = RasterImage(make_image(7, 3))
        assert image.width == 7
        assert image.height == 3
        assert image.rgb.shape == (3, 7, 3)
        assert image.alpha.shape == (3, 7)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "pixels",
        [
            np.zeros((4, 4, 3), dtype=np.uint8),
            np.zeros((4, 4), dtype=np.uint8),
            np.zeros((4, 4, 4), dtype=np.float32),
            np.zeros((0, 4, 4), dtype=np.uint8),
        ],
    )
    def test_invalid_pixels(self, pixels: np.ndarray) -> None:
        with pytest.raises(ValueError):
            RasterImage(pixels)

    @pytest.mark.unit
    def test_buffer_round_trip(self) -> None:
        pixels = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
        image = RasterImage.from_buffer(3, 2, pixels.tobytes())

        assert image.width == 3
        assert image.height == 2
        assert image.pixels[0, 1].tolist() == [4, 5, 6, 7]
        assert image.to_bytes() == pixels.tobytes()

    @pytest.mark.unit
    def test_buffer_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="Buffer length"):
            RasterImage.from_buffer(3, 2, bytes(23))

    @pytest.mark.unit
    def test_from_buffer_is_writable_copy(self) -> None:
        buffer = bytes(16)
        image = RasterImage.from_buffer(2, 2, buffer)
        image.pixels[0, 0, 0] = 9
        assert buffer[0] == 0

    @pytest.mark.unit
    def test_copy_does_not_alias(self) -> None:
        image = RasterImage(make_image(4, 4))
        clone = image.copy()
        clone.pixels[0, 0] = (1, 2, 3, 4)
        assert image.pixels[0, 0].tolist() == [255, 255, 255, 255]

    @pytest.mark.unit
    def test_pil_round_trip(self) -> None:
        pil = Image.new("RGB", (5, 4), color=(10, 20, 30))
        image = RasterImage.from_pil(pil)

        assert image.pixels[0, 0].tolist() == [10, 20, 30, 255]
        back = image.to_pil()
        assert back.mode == "RGBA"
        assert back.size == (5, 4)


class TestEnabledChannels:
    """測試通道設定"""

    @pytest.mark.unit
    def test_indices(self) -> None:
        assert EnabledChannels().indices == (0, 1, 2)
        assert EnabledChannels(r=False).indices == (1, 2)
        assert EnabledChannels(r=False, b=False).count == 1

    @pytest.mark.unit
    def test_none_enabled(self) -> None:
        assert EnabledChannels(r=False, g=False, b=False).none_enabled
        assert not EnabledChannels(g=False).none_enabled


class TestCutoutParameters:
    """測試去背參數"""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        params = CutoutParameters.defaults()
        assert params.enable_r and params.enable_g and params.enable_b
        assert params.color_tolerance == 30
        assert params.edge_transparency == 0.5
        assert params.min_pixel_area == 100
        assert params.background_color == "#ffffff"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("color_tolerance", -1),
            ("color_tolerance", 101),
            ("edge_transparency", -0.1),
            ("edge_transparency", 1.5),
            ("min_pixel_area", 0),
        ],
    )
    def test_out_of_range(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            CutoutParameters(**{field: value})

    @pytest.mark.unit
    def test_frozen(self) -> None:
        params = CutoutParameters()
        with pytest.raises(ValidationError):
            params.color_tolerance = 50  # type: ignore[misc]

    @pytest.mark.unit
    def test_updated_returns_new_instance(self) -> None:
        params = CutoutParameters()
        changed = params.updated(color_tolerance=60, enable_g=False)

        assert changed.color_tolerance == 60
        assert not changed.enable_g
        assert params.color_tolerance == 30
        assert params.enable_g

    @pytest.mark.unit
    def test_updated_validates(self) -> None:
        with pytest.raises(ValidationError):
            CutoutParameters().updated(color_tolerance=500)

    @pytest.mark.unit
    def test_target_rgb(self) -> None:
        assert CutoutParameters(background_color="#00b140").target_rgb == (0, 177, 64)
        # 格式錯誤時視為白色
        assert CutoutParameters(background_color="green").target_rgb == (255, 255, 255)

    @pytest.mark.unit
    def test_channels(self) -> None:
        channels = CutoutParameters(enable_b=False).channels
        assert channels == EnabledChannels(r=True, g=True, b=False)

    @pytest.mark.unit
    def test_dump_round_trip(self) -> None:
        params = CutoutParameters(color_tolerance=12, background_color="#123456")
        assert CutoutParameters.model_validate(params.model_dump()) == params


class TestCutoutConfig:
    """測試去背設定"""

    @pytest.mark.unit
    def test_default_output_path(self, tmp_path: Path) -> None:
        config = CutoutConfig(input_path=tmp_path / "photo.jpg")
        expected = tmp_path / f"photo{settings.output_suffix}.png"
        assert config.output_path == expected

    @pytest.mark.unit
    def test_explicit_output_path(self, tmp_path: Path) -> None:
        config = CutoutConfig(
            input_path=tmp_path / "photo.jpg", output_path=tmp_path / "out.png"
        )
        assert config.output_path == tmp_path / "out.png"
        assert config.parameters == CutoutParameters()


class TestCutoutResult:
    """測試去背結果"""

    @pytest.mark.unit
    def test_ratio(self, tmp_path: Path) -> None:
        result = CutoutResult(
            output_path=tmp_path / "out.png",
            width=10,
            height=10,
            removed_pixels=25,
            feathered_pixels=5,
        )
        assert result.total_pixels == 100
        assert result.removed_ratio == pytest.approx(0.25)
        assert result.preview_path is None


class TestSupportedImage:
    """測試圖片格式判斷"""

    @pytest.mark.unit
    def test_supported(self, tmp_path: Path) -> None:
        for name in ("a.png", "b.JPG", "c.webp"):
            path = tmp_path / name
            path.write_bytes(b"")
            assert is_supported_image(path)

    @pytest.mark.unit
    def test_unsupported(self, tmp_path: Path) -> None:
        text = tmp_path / "notes.txt"
        text.write_text("x")
        assert not is_supported_image(text)
        assert not is_supported_image(tmp_path / "missing.png")
        assert not is_supported_image(tmp_path)
