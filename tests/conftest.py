import numpy as np
import pytest
from PIL import Image, ImageDraw

from rasterrotate.raster import Raster


def _create_gradient_array(rows: int, cols: int) -> np.ndarray:
    row_values = np.arange(rows, dtype=np.int64)[:, None] * 7
    col_values = np.arange(cols, dtype=np.int64)[None, :] * 3
    return ((row_values + col_values) % 251 + 1).astype(np.uint8)


def _create_shapes_image(width: int, height: int) -> Image.Image:
    image = Image.new("RGB", (width, height), color=(255, 255, 255))
    draw = ImageDraw.Draw(image)
    draw.rectangle([(10, 10), (width // 2, height // 2)], fill=(200, 30, 30))
    draw.line([(0, height - 5), (width - 1, height - 5)], fill=(0, 0, 0), width=2)
    return image


@pytest.fixture
def gradient_raster() -> Raster:
    return Raster.from_array(_create_gradient_array(12, 17))


@pytest.fixture
def small_raster() -> Raster:
    return Raster.from_array([[10, 20], [30, 40]])


@pytest.fixture
def shapes_image() -> Image.Image:
    return _create_shapes_image(80, 60)


@pytest.fixture
def tmp_images_dir(tmp_path):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir


@pytest.fixture
def populated_images_dir(tmp_images_dir, shapes_image):
    for image_index in range(3):
        image_name = f"frame{image_index + 1:03d}.bmp"
        shapes_image.save(tmp_images_dir / image_name, "BMP")
    return tmp_images_dir


@pytest.fixture
def bmp_file(tmp_path, shapes_image):
    image_path = tmp_path / "shapes.bmp"
    shapes_image.save(image_path, "BMP")
    return image_path
