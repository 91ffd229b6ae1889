"""Shared test fixtures."""

import logging

import numpy as np
import pytest

from dmx.canvas import HEIGHT, WIDTH, Canvas
from dmx.codec import Codec


# "Hi" encoded and rendered: H = 0b01001000, i = 0b01101001, bit 0 on the second-to-last row.
HI_PATTERN = """\
------
|* * |
|*  *|
|*** |
|* **|
|*   |
|****|
|*   |
|*  *|
|* * |
|****|
------
"""


def shift(canvas: Canvas, up: int, right: int) -> Canvas:
    """Move every pixel ``up`` rows toward the top and ``right`` columns to the right."""
    src = canvas.to_array()
    out = np.zeros_like(src)
    out[:HEIGHT - up, right:] = src[up:, :WIDTH - right]
    return Canvas.from_array(out)


@pytest.fixture(autouse=True)
def _reset_dmx_logger():
    yield
    root = logging.getLogger("dmx")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


@pytest.fixture
def hi_codec():
    codec = Codec()
    assert codec.load_text("Hi")
    assert codec.encode()
    return codec


@pytest.fixture
def hi_canvas(hi_codec):
    return hi_codec.canvas.duplicate()
