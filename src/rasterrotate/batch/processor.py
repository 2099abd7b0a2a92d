from __future__ import annotations

import logging
import multiprocessing
import sys
import time
from dataclasses import asdict
from multiprocessing.pool import AsyncResult, Pool
from pathlib import Path

from tqdm import tqdm

from rasterrotate.batch.scanner import ScannedImage, resume_entry, scan_directory
from rasterrotate.batch.worker import initialize_worker, process_batch
from rasterrotate.config import RESUME_LOG_FILENAME, RotationConfig
from rasterrotate.exceptions import BatchProcessingError
from rasterrotate.rotation import validate_angle
from rasterrotate.types import BatchSummary, FileResult

logger = logging.getLogger(__name__)

PROGRESS_POLL_SECONDS = 0.3
RESULT_TIMEOUT_SECONDS = 60


def _load_resume_entries(resume_log_path: Path) -> set[str]:
    if not resume_log_path.exists():
        return set()
    with open(resume_log_path) as resume_log:
        return {line.strip() for line in resume_log if line.strip()}


def _split_round_robin(
    items: list[ScannedImage],
    batch_count: int,
) -> list[list[ScannedImage]]:
    return [items[batch_index::batch_count] for batch_index in range(batch_count)]


def _build_summary(
    input_directory: Path,
    output_directory: Path,
    angle: float,
    scanned_images: list[ScannedImage],
    results_by_name: dict[str, FileResult],
) -> BatchSummary:
    file_results = [
        results_by_name[scanned_image.image_name]
        for scanned_image in scanned_images
        if scanned_image.image_name in results_by_name
    ]
    error_count = sum(1 for file_result in file_results if file_result.error is not None)

    return BatchSummary(
        input_directory=str(input_directory),
        output_directory=str(output_directory),
        angle=angle,
        total_files=len(scanned_images),
        rotated=len(file_results) - error_count,
        skipped=len(scanned_images) - len(file_results),
        errors=error_count,
        files=tuple(file_results),
    )


def default_output_directory(input_path: Path, angle: float) -> Path:
    return input_path.parent / f"{input_path.name}_rot{angle:g}"


def _select_pending_images(
    scanned_images: list[ScannedImage],
    angle: float,
    resume_log_path: Path,
    resume_enabled: bool,
) -> list[ScannedImage]:
    if not resume_enabled:
        return list(scanned_images)

    completed_entries = _load_resume_entries(resume_log_path)
    pending_images = [
        scanned_image
        for scanned_image in scanned_images
        if resume_entry(scanned_image.image_name, angle) not in completed_entries
    ]
    resumed_count = len(scanned_images) - len(pending_images)
    if resumed_count:
        logger.info("Resuming: %d images already rotated by %g degrees", resumed_count, angle)
    return pending_images


def _start_worker_pool(
    worker_count: int,
    angle: float,
    config: RotationConfig,
    resume_log_path: Path,
    progress_counter,
    progress_lock,
) -> Pool:
    return multiprocessing.Pool(
        processes=worker_count,
        initializer=initialize_worker,
        initargs=(progress_counter, progress_lock, str(resume_log_path), angle, asdict(config)),
        maxtasksperchild=1,
    )


def _wait_for_batches(
    async_results: list[AsyncResult],
    progress_counter,
    total_images: int,
    show_progress: bool,
) -> None:
    with tqdm(
        total=total_images,
        desc="Rotating",
        unit="image",
        disable=not show_progress,
    ) as progress_bar:
        while True:
            finished = all(async_result.ready() for async_result in async_results)
            progress_bar.n = progress_counter.value
            progress_bar.refresh()
            if finished:
                return
            time.sleep(PROGRESS_POLL_SECONDS)


def _collect_results(async_results: list[AsyncResult]) -> dict[str, FileResult]:
    results_by_name: dict[str, FileResult] = {}
    for async_result in async_results:
        try:
            batch_results = async_result.get(timeout=RESULT_TIMEOUT_SECONDS)
        except Exception as pool_error:
            raise BatchProcessingError(f"Worker pool error: {pool_error}") from pool_error
        results_by_name.update(
            (file_result.image_name, file_result) for file_result in batch_results
        )
    return results_by_name


def _rotate_in_workers(
    pending_images: list[ScannedImage],
    angle: float,
    config: RotationConfig,
    resume_log_path: Path,
    show_progress: bool,
) -> dict[str, FileResult]:
    worker_count = min(config.effective_workers, len(pending_images))
    progress_counter = multiprocessing.Value("i", 0)
    progress_lock = multiprocessing.Lock()

    worker_pool = _start_worker_pool(
        worker_count, angle, config, resume_log_path, progress_counter, progress_lock
    )
    async_results = [
        worker_pool.apply_async(process_batch, (batch,))
        for batch in _split_round_robin(pending_images, worker_count)
    ]
    worker_pool.close()

    try:
        _wait_for_batches(async_results, progress_counter, len(pending_images), show_progress)
    except KeyboardInterrupt:
        worker_pool.terminate()
        worker_pool.join()
        sys.exit(1)

    results_by_name = _collect_results(async_results)
    worker_pool.join()
    return results_by_name


def process_directory(
    input_dir: str | Path,
    angle: float,
    *,
    output_dir: str | Path | None = None,
    config: RotationConfig | None = None,
    limit: int = 0,
    show_progress: bool = True,
) -> BatchSummary:
    effective_config = config or RotationConfig()
    angle = validate_angle(angle)

    input_path = Path(input_dir).resolve()
    if output_dir is None:
        output_path = default_output_directory(input_path, angle)
    else:
        output_path = Path(output_dir).resolve()
    output_path.mkdir(parents=True, exist_ok=True)

    scanned_images = scan_directory(
        input_path,
        output_path,
        supported_extensions=effective_config.supported_extensions,
        limit=limit,
    )
    if not scanned_images:
        logger.warning("No supported images found in %s", input_path)
        return _build_summary(input_path, output_path, angle, [], {})

    resume_log_path = output_path / RESUME_LOG_FILENAME
    pending_images = _select_pending_images(
        scanned_images, angle, resume_log_path, effective_config.resume_enabled
    )

    results_by_name: dict[str, FileResult] = {}
    if pending_images:
        results_by_name = _rotate_in_workers(
            pending_images, angle, effective_config, resume_log_path, show_progress
        )

    return _build_summary(input_path, output_path, angle, scanned_images, results_by_name)
