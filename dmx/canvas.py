"""Canvas: fixed-size boolean pixel grid that every DM-X signal lives on."""

from typing import Iterable

import numpy as np

from dmx.logging import audit, get_logger, trace

log = get_logger("canvas")

# Exact internal dimensions of the pixel store.
HEIGHT = 30
WIDTH = 65


class Canvas:
    """A ``HEIGHT`` x ``WIDTH`` grid of pixels, row 0 at the top.

    Out-of-range access never raises: reads return False and writes are
    ignored and report failure. Geometry code in the codec walks off the
    edges of the grid and relies on this.
    """

    __slots__ = ("_pixels",)

    def __init__(self):
        self._pixels = np.zeros((HEIGHT, WIDTH), dtype=bool)

    @classmethod
    @trace
    def from_rows(cls, rows: Iterable[str] | None) -> "Canvas":
        """Build a canvas from text rows where any non-space character is a set pixel.

        Leading and trailing blank rows are dropped and the remaining block
        is anchored to the bottom of the canvas. Each kept row is stripped
        and written from column 0; interior blank rows stay blank.

        Raises:
            ValueError: if ``rows`` is empty, holds more than ``HEIGHT`` rows,
                has a row longer than ``WIDTH`` characters, or is all blank.
        """
        if rows is None:
            raise ValueError("Pattern rows are required")
        rows = list(rows)
        if not rows:
            raise ValueError("Pattern has no rows")
        if len(rows) > HEIGHT:
            raise ValueError(f"Pattern has {len(rows)} rows, maximum is {HEIGHT}")
        for i, row in enumerate(rows):
            if len(row) > WIDTH:
                raise ValueError(f"Pattern row {i} is {len(row)} characters wide, maximum is {WIDTH}")

        kept = [i for i, row in enumerate(rows) if row.strip()]
        if not kept:
            raise ValueError("Pattern rows are all blank")

        canvas = cls()
        block = rows[kept[0]:kept[-1] + 1]
        top = HEIGHT - len(block)
        for offset, row in enumerate(block):
            for col, ch in enumerate(row.strip()):
                if ch != " ":
                    canvas._pixels[top + offset, col] = True

        audit("canvas.loaded", logger=log, rows=len(block), pixels=canvas.count())
        return canvas

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "Canvas":
        """Wrap a copy of a ``(HEIGHT, WIDTH)`` array; any truthy value is a set pixel."""
        pixels = np.asarray(pixels)
        if pixels.shape != (HEIGHT, WIDTH):
            raise ValueError(f"Pixel array must be {HEIGHT}x{WIDTH}, got {pixels.shape}")
        canvas = cls()
        canvas._pixels = pixels.astype(bool, copy=True)
        return canvas

    @staticmethod
    def in_bounds(row: int, col: int) -> bool:
        return 0 <= row < HEIGHT and 0 <= col < WIDTH

    def get(self, row: int, col: int) -> bool:
        if not self.in_bounds(row, col):
            return False
        return bool(self._pixels[row, col])

    def set(self, row: int, col: int, value: bool) -> bool:
        if not self.in_bounds(row, col):
            return False
        self._pixels[row, col] = bool(value)
        return True

    def duplicate(self) -> "Canvas":
        clone = Canvas()
        clone._pixels = self._pixels.copy()
        return clone

    def count(self) -> int:
        """Number of set pixels."""
        return int(np.count_nonzero(self._pixels))

    def to_array(self) -> np.ndarray:
        return self._pixels.copy()

    def to_rows(self, black: str = "*", white: str = " ") -> list[str]:
        """Dump the whole canvas, padding included, one string per row."""
        return ["".join(black if px else white for px in row) for row in self._pixels]

    def __eq__(self, other):
        if not isinstance(other, Canvas):
            return NotImplemented
        return bool(np.array_equal(self._pixels, other._pixels))

    def __repr__(self):
        return f"Canvas({HEIGHT}x{WIDTH}, set={self.count()})"
