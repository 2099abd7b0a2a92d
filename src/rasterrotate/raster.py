from __future__ import annotations

import numpy as np
from PIL import Image

from rasterrotate.exceptions import InvalidInputError

PIXEL_DTYPE = np.uint8
PIXEL_MIN = 0
PIXEL_MAX = 255


def _check_pixel_value(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInputError(f"Pixel value must be an integer, got {value!r}")
    if not PIXEL_MIN <= value <= PIXEL_MAX:
        raise InvalidInputError(
            f"Pixel value {value} outside {PIXEL_MIN}..{PIXEL_MAX}"
        )
    return int(value)


def _coerce_pixels(pixels: np.ndarray) -> np.ndarray:
    if pixels.ndim != 2:
        raise InvalidInputError(f"Raster pixels must be 2-D, got shape {pixels.shape}")
    if pixels.dtype == PIXEL_DTYPE or pixels.size == 0:
        return pixels.astype(PIXEL_DTYPE, copy=False)
    if not np.issubdtype(pixels.dtype, np.integer):
        raise InvalidInputError(f"Raster pixels must be integers, got dtype {pixels.dtype}")
    if pixels.min() < PIXEL_MIN or pixels.max() > PIXEL_MAX:
        raise InvalidInputError(
            f"Raster pixels must lie within {PIXEL_MIN}..{PIXEL_MAX}, "
            f"got {pixels.min()}..{pixels.max()}"
        )
    return pixels.astype(PIXEL_DTYPE)


class Raster:
    """Grid of 0-255 intensities addressed by inclusive row/column ranges.

    Indices start at ``first_row``/``first_col``, so a raster read from a
    file and reindexed to ``(1, 1)`` is addressed ``1..row_count``. The
    pixels live in a numpy array whose ``[0, 0]`` element is
    ``(first_row, first_col)``.
    """

    __slots__ = ("_pixels", "_first_row", "_first_col")

    def __init__(self, pixels: np.ndarray, first_row: int = 0, first_col: int = 0) -> None:
        self._pixels = _coerce_pixels(np.asarray(pixels))
        self._first_row = int(first_row)
        self._first_col = int(first_col)

    @classmethod
    def filled(
        cls,
        first_row: int,
        last_row: int,
        first_col: int,
        last_col: int,
        value: int = 0,
    ) -> Raster:
        row_count = last_row - first_row + 1
        col_count = last_col - first_col + 1
        if row_count < 0 or col_count < 0:
            raise InvalidInputError(
                f"Invalid raster bounds rows={first_row}..{last_row} "
                f"cols={first_col}..{last_col}"
            )
        pixels = np.full((row_count, col_count), _check_pixel_value(value), dtype=PIXEL_DTYPE)
        return cls(pixels, first_row, first_col)

    @classmethod
    def from_array(cls, array, first_row: int = 0, first_col: int = 0) -> Raster:
        return cls(np.array(array, copy=True), first_row, first_col)

    @classmethod
    def from_image(cls, image: Image.Image, grayscale_mode: str = "L") -> Raster:
        grayscale_image = image if image.mode == grayscale_mode else image.convert(grayscale_mode)
        raster = cls(np.array(grayscale_image, dtype=PIXEL_DTYPE))
        if grayscale_image is not image:
            grayscale_image.close()
        return raster

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self._pixels))

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def first_row(self) -> int:
        return self._first_row

    @property
    def last_row(self) -> int:
        return self._first_row + self._pixels.shape[0] - 1

    @property
    def first_col(self) -> int:
        return self._first_col

    @property
    def last_col(self) -> int:
        return self._first_col + self._pixels.shape[1] - 1

    @property
    def row_count(self) -> int:
        return self._pixels.shape[0]

    @property
    def col_count(self) -> int:
        return self._pixels.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.row_count, self.col_count

    def is_empty(self) -> bool:
        return self.row_count == 0 or self.col_count == 0

    def contains(self, row: int, col: int) -> bool:
        return (
            self.first_row <= row <= self.last_row
            and self.first_col <= col <= self.last_col
        )

    def _offset(self, row: int, col: int) -> tuple[int, int]:
        if not self.contains(row, col):
            raise IndexError(
                f"Pixel ({row}, {col}) outside rows {self.first_row}..{self.last_row} "
                f"cols {self.first_col}..{self.last_col}"
            )
        return row - self._first_row, col - self._first_col

    def get(self, row: int, col: int) -> int:
        return int(self._pixels[self._offset(row, col)])

    def set(self, row: int, col: int, value: int) -> None:
        self._pixels[self._offset(row, col)] = _check_pixel_value(value)

    def __getitem__(self, index: tuple[int, int]) -> int:
        return self.get(*index)

    def __setitem__(self, index: tuple[int, int], value: int) -> None:
        self.set(index[0], index[1], value)

    def reindex(self, first_row: int, first_col: int) -> Raster:
        return Raster(self._pixels.copy(), first_row, first_col)

    def copy(self) -> Raster:
        return Raster(self._pixels.copy(), self._first_row, self._first_col)

    def tolist(self) -> list[list[int]]:
        return self._pixels.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return (
            self._first_row == other._first_row
            and self._first_col == other._first_col
            and np.array_equal(self._pixels, other._pixels)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Raster(rows={self.first_row}..{self.last_row}, "
            f"cols={self.first_col}..{self.last_col})"
        )
