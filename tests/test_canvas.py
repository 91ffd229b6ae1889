"""Tests for the fixed-size pixel store."""

import numpy as np
import pytest

from dmx.canvas import HEIGHT, WIDTH, Canvas


class TestConstruction:
    def test_new_canvas_is_blank(self):
        canvas = Canvas()
        assert canvas.count() == 0
        assert canvas.to_array().shape == (HEIGHT, WIDTH)

    def test_from_array_copies(self):
        pixels = np.zeros((HEIGHT, WIDTH), dtype=bool)
        canvas = Canvas.from_array(pixels)
        pixels[0, 0] = True
        assert not canvas.get(0, 0)

    def test_from_array_wrong_shape(self):
        with pytest.raises(ValueError):
            Canvas.from_array(np.zeros((3, 3), dtype=bool))


class TestFromRows:
    def test_bottom_anchored_and_stripped(self):
        canvas = Canvas.from_rows(["", "   ", "  * *  ", "  "])
        assert canvas.get(HEIGHT - 1, 0)
        assert not canvas.get(HEIGHT - 1, 1)
        assert canvas.get(HEIGHT - 1, 2)
        assert canvas.count() == 2

    def test_interior_blank_rows_kept(self):
        canvas = Canvas.from_rows(["  *  ", "", " ** "])
        assert canvas.get(HEIGHT - 3, 0)
        assert canvas.to_rows()[HEIGHT - 2].strip() == ""
        assert canvas.get(HEIGHT - 1, 0)
        assert canvas.get(HEIGHT - 1, 1)
        assert canvas.count() == 3

    def test_any_non_space_is_set(self):
        canvas = Canvas.from_rows(["x#."])
        assert [canvas.get(HEIGHT - 1, c) for c in range(4)] == [True, True, True, False]

    def test_maximum_size_accepted(self):
        rows = ["*" * WIDTH] * HEIGHT
        canvas = Canvas.from_rows(rows)
        assert canvas.count() == HEIGHT * WIDTH

    @pytest.mark.parametrize("rows", [
        [],
        None,
        ["*"] * (HEIGHT + 1),
        ["*" * (WIDTH + 1)],
        ["*", "*" * (WIDTH + 1)],
        ["   ", ""],
    ])
    def test_invalid_input_rejected(self, rows):
        with pytest.raises(ValueError):
            Canvas.from_rows(rows)


class TestPixelAccess:
    def test_set_and_get(self):
        canvas = Canvas()
        assert canvas.set(3, 4, True)
        assert canvas.get(3, 4)
        assert canvas.set(3, 4, False)
        assert not canvas.get(3, 4)

    @pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (HEIGHT, 0), (0, WIDTH), (HEIGHT, WIDTH)])
    def test_out_of_bounds_is_silent(self, row, col):
        canvas = Canvas()
        assert canvas.get(row, col) is False
        assert canvas.set(row, col, True) is False
        assert canvas.count() == 0

    def test_negative_index_does_not_wrap(self):
        canvas = Canvas()
        canvas.set(HEIGHT - 1, WIDTH - 1, True)
        assert not canvas.get(-1, -1)


class TestDuplicate:
    def test_duplicate_is_independent(self):
        canvas = Canvas()
        canvas.set(0, 0, True)
        clone = canvas.duplicate()
        assert clone == canvas
        clone.set(1, 1, True)
        assert not canvas.get(1, 1)
        assert clone != canvas

    def test_to_rows_dump(self):
        canvas = Canvas()
        canvas.set(0, 1, True)
        rows = canvas.to_rows()
        assert len(rows) == HEIGHT
        assert rows[0] == " *" + " " * (WIDTH - 2)
