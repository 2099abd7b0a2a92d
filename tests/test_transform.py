import math

import pytest
from PIL import Image

from rasterrotate.config import RotationConfig
from rasterrotate.exceptions import InvalidInputError, RotationError
from rasterrotate.raster import Raster
from rasterrotate.transform import rotate_file, rotate_image
from rasterrotate.types import RotationResult


class TestRotateImage:
    def test_returns_grayscale_pil_image_by_default(self, shapes_image):
        result = rotate_image(shapes_image, 30)
        assert isinstance(result, Image.Image)
        assert result.mode == "L"

    def test_returns_rotation_result_with_metadata(self, shapes_image):
        result = rotate_image(shapes_image, 30, return_metadata=True)
        assert isinstance(result, RotationResult)
        assert isinstance(result.raster, Raster)
        assert result.steps == (30.0,)

    def test_zero_angle_keeps_size(self, shapes_image):
        result = rotate_image(shapes_image, 0)
        assert result.size == shapes_image.size

    def test_quarter_turn_swaps_width_and_height(self, shapes_image):
        width, height = shapes_image.size
        result = rotate_image(shapes_image, 90)
        assert result.size == (height, width)

    def test_non_finite_angle_is_not_wrapped(self, shapes_image):
        with pytest.raises(InvalidInputError):
            rotate_image(shapes_image, math.inf)

    def test_config_fill_value_is_used(self, shapes_image):
        config = RotationConfig(fill_value=255)
        result = rotate_image(shapes_image, 45, config=config, return_metadata=True)
        assert result.raster.get(0, 0) == 255

    def test_config_rejects_out_of_range_fill_value(self):
        with pytest.raises(InvalidInputError):
            RotationConfig(fill_value=300)


class TestRotateFile:
    def test_writes_rotated_bmp(self, bmp_file, tmp_path):
        output_path = tmp_path / "rotated.bmp"
        result = rotate_file(bmp_file, output_path, 90)
        assert output_path.exists()
        with Image.open(output_path) as written_image:
            assert written_image.mode == "L"
            assert written_image.size == (60, 80)
            assert Raster.from_image(written_image) == result.raster

    def test_output_format_follows_extension(self, bmp_file, tmp_path):
        output_path = tmp_path / "rotated.png"
        rotate_file(bmp_file, output_path, 15)
        with Image.open(output_path) as written_image:
            assert written_image.format == "PNG"

    def test_negative_angle_file_matches_complement(self, bmp_file, tmp_path):
        negative_result = rotate_file(bmp_file, tmp_path / "neg.bmp", -30)
        positive_result = rotate_file(bmp_file, tmp_path / "pos.bmp", 330)
        assert negative_result.raster == positive_result.raster

    def test_missing_input_raises_rotation_error(self, tmp_path):
        with pytest.raises(RotationError):
            rotate_file(tmp_path / "missing.bmp", tmp_path / "out.bmp", 10)


class TestRotationConfig:
    def test_rejects_multi_band_grayscale_mode(self):
        with pytest.raises(InvalidInputError):
            RotationConfig(grayscale_mode="RGB")

    def test_rejects_out_of_range_quality(self):
        with pytest.raises(InvalidInputError):
            RotationConfig(output_quality=0)

    def test_explicit_workers_are_clamped_to_one(self):
        assert RotationConfig(workers=0).effective_workers == 1
        assert RotationConfig(workers=3).effective_workers == 3
