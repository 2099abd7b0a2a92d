from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rasterrotate.raster import Raster


@dataclass(frozen=True, slots=True)
class RotationResult:
    raster: Raster
    angle: float
    steps: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class FileResult:
    image_name: str
    input_path: str
    output_path: str
    size: tuple[int, int] | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class BatchSummary:
    input_directory: str
    output_directory: str
    angle: float
    total_files: int
    rotated: int
    skipped: int
    errors: int
    files: tuple[FileResult, ...]
