from __future__ import annotations

import multiprocessing
from dataclasses import dataclass, field

from rasterrotate.exceptions import InvalidInputError

BLACK = 0

# Pillow modes that decode to one 8-bit sample per pixel.
SINGLE_CHANNEL_MODES: frozenset[str] = frozenset({"L"})

DEFAULT_SUPPORTED_EXTENSIONS: tuple[str, ...] = (
    ".bmp",
    ".png",
    ".jpg",
    ".jpeg",
    ".tiff",
    ".tif",
    ".gif",
    ".webp",
)

RESUME_LOG_FILENAME = "_rotation_done.log"

RESERVED_CPUS = 2


@dataclass(frozen=True, slots=True)
class RotationConfig:
    """Settings shared by the image, file and directory entry points.

    ``fill_value`` paints destination pixels no source pixel maps to.
    ``output_quality`` only applies to lossy output formats.
    """

    fill_value: int = BLACK
    grayscale_mode: str = "L"
    output_quality: int = 92
    workers: int | None = None
    resume_enabled: bool = True
    supported_extensions: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_SUPPORTED_EXTENSIONS
    )

    def __post_init__(self) -> None:
        if not 0 <= self.fill_value <= 255:
            raise InvalidInputError(f"fill_value must be within 0-255, got {self.fill_value}")
        if self.grayscale_mode not in SINGLE_CHANNEL_MODES:
            raise InvalidInputError(
                f"grayscale_mode must be a single-channel 8-bit mode "
                f"({', '.join(sorted(SINGLE_CHANNEL_MODES))}), got {self.grayscale_mode!r}"
            )
        if not 1 <= self.output_quality <= 100:
            raise InvalidInputError(
                f"output_quality must be within 1-100, got {self.output_quality}"
            )

    @property
    def effective_workers(self) -> int:
        if self.workers is None:
            return max(1, multiprocessing.cpu_count() - RESERVED_CPUS)
        return max(1, self.workers)
