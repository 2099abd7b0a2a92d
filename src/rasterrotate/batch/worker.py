from __future__ import annotations

import logging
import multiprocessing
from dataclasses import dataclass
from typing import Any

from rasterrotate.batch.scanner import ScannedImage, resume_entry
from rasterrotate.config import RotationConfig
from rasterrotate.exceptions import RasterRotateError
from rasterrotate.transform import rotate_file
from rasterrotate.types import FileResult

logger = logging.getLogger(__name__)


@dataclass
class WorkerContext:
    progress_counter: Any
    progress_lock: Any
    resume_log_path: str
    angle: float
    config: RotationConfig


_worker_context: WorkerContext | None = None


def initialize_worker(
    counter: multiprocessing.Value,
    lock: multiprocessing.Lock,
    resume_log_path: str,
    angle: float,
    config_dict: dict[str, Any],
) -> None:
    global _worker_context
    _worker_context = WorkerContext(
        progress_counter=counter,
        progress_lock=lock,
        resume_log_path=resume_log_path,
        angle=angle,
        config=RotationConfig(**config_dict),
    )


def _process_single_image(
    scanned_image: ScannedImage,
    angle: float,
    config: RotationConfig,
) -> FileResult:
    try:
        result = rotate_file(
            scanned_image.image_path,
            scanned_image.output_path,
            angle,
            config=config,
        )
    except RasterRotateError as rotation_error:
        logger.warning("Rotation failed for %s: %s", scanned_image.image_name, rotation_error)
        return FileResult(
            image_name=scanned_image.image_name,
            input_path=scanned_image.image_path,
            output_path=scanned_image.output_path,
            error=str(rotation_error),
        )

    return FileResult(
        image_name=scanned_image.image_name,
        input_path=scanned_image.image_path,
        output_path=scanned_image.output_path,
        size=result.raster.shape,
    )


def _record_completion(image_name: str, succeeded: bool) -> None:
    assert _worker_context is not None
    with _worker_context.progress_lock:
        _worker_context.progress_counter.value += 1
        if not succeeded:
            return
        try:
            with open(_worker_context.resume_log_path, "a") as resume_log:
                resume_log.write(resume_entry(image_name, _worker_context.angle) + "\n")
                resume_log.flush()
        except OSError as log_error:
            logger.warning("Could not update resume log: %s", log_error)


def process_batch(batch: list[ScannedImage]) -> list[FileResult]:
    assert _worker_context is not None
    batch_results: list[FileResult] = []

    for scanned_image in batch:
        file_result = _process_single_image(
            scanned_image, _worker_context.angle, _worker_context.config
        )
        batch_results.append(file_result)
        _record_completion(scanned_image.image_name, file_result.error is None)

    return batch_results
