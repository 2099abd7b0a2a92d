from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ScannedImage:
    image_name: str
    image_path: str
    output_path: str


def scan_directory(
    input_directory: Path,
    output_directory: Path,
    supported_extensions: tuple[str, ...],
    limit: int = 0,
) -> list[ScannedImage]:
    all_image_paths = sorted(
        image_path
        for image_path in input_directory.iterdir()
        if image_path.is_file() and image_path.suffix.lower() in supported_extensions
    )

    if limit > 0:
        all_image_paths = all_image_paths[:limit]

    return [
        ScannedImage(
            image_name=image_path.name,
            image_path=str(image_path),
            output_path=str(output_directory / image_path.name),
        )
        for image_path in all_image_paths
    ]


def resume_entry(image_name: str, angle: float) -> str:
    """Resume-log line for one rotated image; the angle is part of the key."""
    return f"{image_name}\t{float(angle)!r}"
