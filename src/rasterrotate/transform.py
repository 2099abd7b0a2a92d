from __future__ import annotations

from pathlib import Path
from typing import Literal, overload

from PIL import Image

from rasterrotate._imaging import ImageIO
from rasterrotate.config import RotationConfig
from rasterrotate.exceptions import InvalidInputError, RotationError
from rasterrotate.raster import Raster
from rasterrotate.rotation import rotate
from rasterrotate.types import RotationResult


@overload
def rotate_image(
    image: Image.Image,
    angle: float,
    *,
    config: RotationConfig | None = ...,
    return_metadata: Literal[False] = ...,
) -> Image.Image: ...


@overload
def rotate_image(
    image: Image.Image,
    angle: float,
    *,
    config: RotationConfig | None = ...,
    return_metadata: Literal[True],
) -> RotationResult: ...


def rotate_image(
    image: Image.Image,
    angle: float,
    *,
    config: RotationConfig | None = None,
    return_metadata: bool = False,
) -> Image.Image | RotationResult:
    effective_config = config or RotationConfig()
    try:
        source_raster = Raster.from_image(image, effective_config.grayscale_mode)
        result = rotate(source_raster, angle, effective_config.fill_value)
    except InvalidInputError:
        raise
    except Exception as original_error:
        raise RotationError(f"Failed to rotate image: {original_error}") from original_error

    if return_metadata:
        return result
    return result.raster.to_image()


def rotate_file(
    input_path: str | Path,
    output_path: str | Path,
    angle: float,
    *,
    config: RotationConfig | None = None,
) -> RotationResult:
    effective_config = config or RotationConfig()
    try:
        source_raster = ImageIO.read_raster(input_path, effective_config.grayscale_mode)
        result = rotate(source_raster, angle, effective_config.fill_value)
        ImageIO.write_raster(result.raster, output_path, effective_config.output_quality)
    except InvalidInputError:
        raise
    except Exception as original_error:
        raise RotationError(
            f"Failed to rotate {input_path} into {output_path}: {original_error}"
        ) from original_error
    return result
