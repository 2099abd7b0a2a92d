"""Arbitrary-angle raster rotation by inverse nearest-pixel mapping.

A rotation is carried out as a sequence of elementary rotations, each by an
angle in ``[0, 90]`` degrees: negative angles are shifted by whole turns,
then full 90 degree steps are peeled off before the remainder. Every
elementary step allocates a black raster sized to the bounding box of the
rotated rectangle and fills it by mapping each destination pixel back onto
the source grid.

Step order is observable in the output because of floating-point rounding,
so angles are reduced by repeated addition/subtraction rather than modulo.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from rasterrotate.config import BLACK
from rasterrotate.exceptions import InvalidInputError
from rasterrotate.raster import Raster
from rasterrotate.types import RotationResult

logger = logging.getLogger(__name__)

FULL_TURN = 360.0
QUARTER_TURN = 90.0


def round_half_away(value: float) -> int:
    truncated = math.trunc(value)
    if abs(value - truncated) >= 0.5:
        return truncated + (1 if value > 0 else -1)
    return truncated


def _round_half_away_array(values: np.ndarray) -> np.ndarray:
    truncated = np.trunc(values)
    rounded = np.where(
        np.abs(values - truncated) >= 0.5, truncated + np.sign(values), truncated
    )
    return rounded.astype(np.int64)


def _validate_angle(angle: float) -> float:
    angle = float(angle)
    if not math.isfinite(angle):
        raise InvalidInputError(f"Rotation angle must be finite, got {angle}")
    return angle


def validate_angle(angle: float) -> float:
    """Reject angles the quarter-turn reduction cannot make progress on.

    Past roughly 1e18 degrees a float no longer changes when 90 or 360 is
    added or subtracted, so the reduction loops would never terminate.
    """
    angle = _validate_angle(angle)
    if angle - QUARTER_TURN == angle:
        raise InvalidInputError(
            f"Rotation angle {angle!r} is too large to reduce in {QUARTER_TURN:g} degree steps"
        )
    return angle


def _validate_raster(raster: Raster) -> None:
    if raster.is_empty():
        raise InvalidInputError(
            f"Cannot rotate an empty raster ({raster.row_count}x{raster.col_count})"
        )


def normalize_angle(angle: float) -> float:
    angle = validate_angle(angle)
    while angle < 0.0:
        angle = FULL_TURN + angle
    return angle


def decompose_angle(angle: float) -> list[float]:
    remaining = normalize_angle(angle)
    steps: list[float] = []
    while remaining > QUARTER_TURN:
        steps.append(QUARTER_TURN)
        remaining -= QUARTER_TURN
    steps.append(remaining)
    return steps


def _trig(angle: float) -> tuple[float, float]:
    radians = angle * math.pi / 180.0
    return math.sin(radians), math.cos(radians)


def rotated_dimensions(rows: int, cols: int, angle: float) -> tuple[int, int]:
    sin_a, cos_a = _trig(angle)
    new_rows = round_half_away(cos_a * rows + sin_a * cols)
    new_cols = round_half_away(cos_a * cols + sin_a * rows)
    return new_rows, new_cols


def rotate_step(raster: Raster, angle: float, fill_value: int = BLACK) -> Raster:
    """Apply one elementary rotation (``0 <= angle <= 90``).

    The returned raster is indexed from 0 and the input is left untouched.
    Destination pixel ``(i, j)`` takes the source pixel at::

        old_i = round(sin^2 * old_rows + cos * i - sin * j)
        old_j = round(sin * i + cos * j - sin * cos * old_rows)

    when that coordinate lies inside the source bounds.
    """
    angle = _validate_angle(angle)
    if not 0.0 <= angle <= QUARTER_TURN:
        raise InvalidInputError(f"Elementary rotation angle must be within [0, 90], got {angle}")
    _validate_raster(raster)

    old_rows = raster.row_count
    old_cols = raster.col_count
    sin_a, cos_a = _trig(angle)
    rows, cols = rotated_dimensions(old_rows, old_cols, angle)

    result = Raster.filled(0, rows - 1, 0, cols - 1, fill_value)

    row_index, col_index = np.meshgrid(
        np.arange(result.first_row, result.last_row + 1, dtype=np.float64),
        np.arange(result.first_col, result.last_col + 1, dtype=np.float64),
        indexing="ij",
    )
    # evaluation order matches the scalar formulas term by term
    old_i = _round_half_away_array(
        sin_a * sin_a * old_rows + cos_a * row_index - sin_a * col_index
    )
    old_j = _round_half_away_array(
        sin_a * row_index + cos_a * col_index - sin_a * cos_a * old_rows
    )

    in_bounds = (
        (old_i >= raster.first_row)
        & (old_i <= raster.last_row)
        & (old_j >= raster.first_col)
        & (old_j <= raster.last_col)
    )
    result.pixels[in_bounds] = raster.pixels[
        old_i[in_bounds] - raster.first_row,
        old_j[in_bounds] - raster.first_col,
    ]

    logger.debug(
        "Rotated %dx%d raster by %.6g degrees into %dx%d",
        old_rows,
        old_cols,
        angle,
        rows,
        cols,
    )
    return result


def rotate(raster: Raster, angle: float, fill_value: int = BLACK) -> RotationResult:
    _validate_raster(raster)
    steps = decompose_angle(angle)

    current = raster
    for step_angle in steps:
        current = rotate_step(current, step_angle, fill_value)

    return RotationResult(raster=current, angle=float(angle), steps=tuple(steps))


def rotate_raster(raster: Raster, angle: float, fill_value: int = BLACK) -> Raster:
    return rotate(raster, angle, fill_value).raster
