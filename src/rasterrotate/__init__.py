from rasterrotate._version import __version__
from rasterrotate.batch.processor import process_directory
from rasterrotate.config import RotationConfig
from rasterrotate.exceptions import (
    BatchProcessingError,
    InvalidInputError,
    RasterRotateError,
    RotationError,
)
from rasterrotate.raster import Raster
from rasterrotate.rotation import (
    decompose_angle,
    normalize_angle,
    rotate,
    rotate_raster,
    rotate_step,
    rotated_dimensions,
    validate_angle,
)
from rasterrotate.transform import rotate_file, rotate_image
from rasterrotate.types import BatchSummary, FileResult, RotationResult

__all__ = [
    "BatchProcessingError",
    "BatchSummary",
    "FileResult",
    "InvalidInputError",
    "Raster",
    "RasterRotateError",
    "RotationConfig",
    "RotationError",
    "RotationResult",
    "__version__",
    "decompose_angle",
    "normalize_angle",
    "process_directory",
    "rotate",
    "rotate_file",
    "rotate_image",
    "rotate_raster",
    "rotate_step",
    "rotated_dimensions",
    "validate_angle",
]
