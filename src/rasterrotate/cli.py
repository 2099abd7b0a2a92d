from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rasterrotate._version import __version__
from rasterrotate.batch.processor import process_directory
from rasterrotate.config import RotationConfig
from rasterrotate.exceptions import RasterRotateError
from rasterrotate.transform import rotate_file
from rasterrotate.types import BatchSummary

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="rasterrotate",
        description="Rotate a grayscale raster image by an arbitrary angle in degrees.",
    )
    parser.add_argument(
        "input",
        type=str,
        help="Input image file, or a directory of images.",
    )
    parser.add_argument(
        "output",
        type=str,
        help="Output image file, or the output directory when the input is a directory.",
    )
    parser.add_argument(
        "angle",
        type=float,
        help="Rotation angle in degrees. Any sign and magnitude.",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Number of parallel worker processes for directories. Default: cpu_count - 2.",
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Maximum number of images to rotate from a directory. 0 means all.",
    )
    parser.add_argument(
        "--quality", "-q",
        type=int,
        default=92,
        help="Output quality for lossy formats (1-100). Default: 92.",
    )
    parser.add_argument(
        "--no-resume",
        action="store_true",
        default=False,
        help="Disable resume from a previous directory run.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=False,
        help="Suppress progress and summary output.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"rasterrotate {__version__}",
    )
    return parser


def _print_summary(summary: BatchSummary) -> None:
    print(f"\n{'=' * 60}")
    print("  SUMMARY")
    print(f"{'=' * 60}")
    print(f"  Output:          {summary.output_directory}")
    print(f"  Angle:           {summary.angle:g}°")
    print(f"  Images found:    {summary.total_files}")
    print(f"  Rotated:         {summary.rotated}")
    if summary.skipped > 0:
        print(f"  Skipped (resume): {summary.skipped}")
    print(f"  Errors:          {summary.errors}")
    print(f"{'=' * 60}\n")

    failed_files = [file_result for file_result in summary.files if file_result.error]
    if failed_files:
        print("Failures:")
        for file_result in failed_files:
            print(f"  {file_result.image_name}: {file_result.error}")
        print()


def _rotate_single_file(
    input_path: Path, output_path: Path, angle: float, config: RotationConfig, quiet: bool
) -> int:
    result = rotate_file(input_path, output_path, angle, config=config)
    if not quiet:
        rows, cols = result.raster.shape
        print(f"{input_path} -> {output_path} ({cols}x{rows}, {angle:g}°)")
    return EXIT_SUCCESS


def _rotate_directory(
    input_path: Path,
    output_path: Path,
    angle: float,
    config: RotationConfig,
    limit: int,
    quiet: bool,
) -> int:
    summary = process_directory(
        input_path,
        angle,
        output_dir=output_path,
        config=config,
        limit=limit,
        show_progress=not quiet,
    )
    if not quiet:
        _print_summary(summary)
    return EXIT_FAILURE if summary.errors else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = _build_argument_parser()
    arguments = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if arguments.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(arguments.input)
    output_path = Path(arguments.output)
    if not input_path.exists():
        print(f"Error: '{arguments.input}' does not exist.", file=sys.stderr)
        return EXIT_FAILURE

    try:
        config = RotationConfig(
            output_quality=arguments.quality,
            workers=arguments.workers,
            resume_enabled=not arguments.no_resume,
        )
        if input_path.is_dir():
            return _rotate_directory(
                input_path, output_path, arguments.angle, config, arguments.limit, arguments.quiet
            )
        return _rotate_single_file(
            input_path, output_path, arguments.angle, config, arguments.quiet
        )
    except RasterRotateError as rotation_error:
        print(f"Error: {rotation_error}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
