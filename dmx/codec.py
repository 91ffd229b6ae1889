"""DM-X codec: text <-> stacked pixel barcode on a fixed canvas.

Signal layout, anchored to the lower-left corner of the canvas::

    row HEIGHT-h     * * * * ...    timing row, even columns set
    rows HEIGHT-9    |d d d    |
      .. HEIGHT-2    |d d d   *|    one data column per character,
                     |d d d    |    bit 0 at the bottom; left frame
                     |d d d   *|    column solid, right frame set on
                     ...            odd canvas rows
    row HEIGHT-1     ***********    solid start row, measures the width

A signal is ``len(text) + 2`` columns wide and 10 rows tall when built
from text. A scanned pattern is measured from its frame instead.
"""

from enum import Enum

import numpy as np

from dmx.canvas import HEIGHT, WIDTH, Canvas
from dmx.console import ConsoleRenderer
from dmx.logging import audit, get_logger, trace

log = get_logger("codec")

DATA_BITS = 8
# 8 data rows + timing row + start row
SIGNAL_HEIGHT = DATA_BITS + 2
# Left and right frame columns
FRAME_WIDTH = 2
MAX_CODE_POINT = (1 << DATA_BITS) - 1


class Authority(Enum):
    """Which representation the codec state was last loaded from."""
    NONE = "none"
    PATTERN = "pattern"
    TEXT = "text"


# ---------------------------------------------------------------------------
# Bit helpers
# ---------------------------------------------------------------------------

def char_to_bits(value: int) -> list[int]:
    """Split a code point into exactly 8 bits, least significant first."""
    if not 0 <= value <= MAX_CODE_POINT:
        raise ValueError(f"Code point {value} does not fit in {DATA_BITS} bits")
    bits = [0] * DATA_BITS
    i = 0
    while value:
        bits[i] = value % 2
        value >>= 1
        i += 1
    return bits


def bits_to_char(bits: list[int]) -> str:
    """Inverse of :func:`char_to_bits`; bits beyond the eighth are ignored."""
    total = 0
    for i, bit in enumerate(bits[:DATA_BITS]):
        total += (1 if bit else 0) << i
    return chr(total)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def find_anchor(canvas: Canvas) -> tuple[int, int] | None:
    """Locate the normalization anchor.

    Scan order is bottom row first, moving up, and left to right within a
    row. The first set pixel met is the anchor. Returns None for an empty
    canvas.
    """
    for row in range(HEIGHT - 1, -1, -1):
        for col in range(WIDTH):
            if canvas.get(row, col):
                return row, col
    return None


@trace
def normalize(canvas: Canvas) -> Canvas:
    """Shift a pattern so its anchor sits at ``(HEIGHT-1, 0)``.

    A canvas whose bottom-left pixel is already set is returned as is, as
    is an empty one. Otherwise a new canvas is built with every pixel
    moved by the same row and column offset; pixels pushed past the left
    edge are dropped. Assumes the canvas holds a single signal.
    """
    if canvas.get(HEIGHT - 1, 0):
        return canvas

    anchor = find_anchor(canvas)
    if anchor is None:
        return canvas

    anchor_row, anchor_col = anchor
    drop = HEIGHT - 1 - anchor_row
    src = canvas.to_array()
    shifted = np.zeros_like(src)
    shifted[drop:, :WIDTH - anchor_col] = src[:HEIGHT - drop, anchor_col:]

    audit("codec.normalized", logger=log, anchor=f"{anchor_row},{anchor_col}",
          shift=f"{drop},{-anchor_col}")
    return Canvas.from_array(shifted)


def measure_width(canvas: Canvas) -> int:
    """Length of the run of set pixels starting at the bottom-left corner."""
    width = 0
    while canvas.get(HEIGHT - 1, width):
        width += 1
    return width


def measure_height(canvas: Canvas) -> int:
    """Number of consecutive set pixels in column 0, counted upward from the bottom."""
    height = 0
    while canvas.get(HEIGHT - 1 - height, 0):
        height += 1
    return height


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

class Codec:
    """Holds one canvas and one text and converts between them.

    The two are loaded independently. :meth:`encode` rebuilds the canvas
    from the text, :meth:`decode` rebuilds the text from the canvas, and
    neither happens implicitly. :attr:`authority` and :attr:`is_synced`
    tell a caller which side is current.
    """

    def __init__(self, canvas: Canvas | None = None, text: str | None = None,
                 renderer: ConsoleRenderer | None = None):
        if canvas is not None and text is not None:
            raise ValueError("Provide a pattern or a text, not both")

        self._canvas: Canvas | None = None
        self._text = ""
        self._signal_width = 0
        self._signal_height = 0
        self._authority = Authority.NONE
        self._synced = False
        self.renderer = renderer or ConsoleRenderer()

        if canvas is not None and not self.load_pattern(canvas):
            raise ValueError("Pattern could not be loaded")
        if text is not None and not self.load_text(text):
            raise ValueError(f"Text cannot be encoded: {text!r}")

    # -- state ---------------------------------------------------------------

    @property
    def canvas(self) -> Canvas | None:
        return self._canvas

    @property
    def text(self) -> str:
        return self._text

    @property
    def signal_width(self) -> int:
        return self._signal_width

    @property
    def signal_height(self) -> int:
        return self._signal_height

    @property
    def authority(self) -> Authority:
        return self._authority

    @property
    def is_synced(self) -> bool:
        """True once encode() or decode() has run since the last load."""
        return self._synced

    def _fail(self, op: str, reason: str, **context) -> bool:
        audit(f"codec.{op}_fail", logger=log, reason=reason, **context)
        return False

    # -- loading -------------------------------------------------------------

    @trace
    def load_pattern(self, canvas: Canvas) -> bool:
        """Take a private copy of ``canvas``, normalize it and measure the signal.

        The current text is left as is until :meth:`decode` runs.
        """
        if not isinstance(canvas, Canvas):
            return self._fail("load_pattern", "no_canvas")

        image = normalize(canvas.duplicate())
        self._canvas = image
        self._signal_width = measure_width(image)
        self._signal_height = measure_height(image)
        self._authority = Authority.PATTERN
        self._synced = False

        audit("codec.pattern_loaded", logger=log,
              signal=f"{self._signal_width}x{self._signal_height}", pixels=image.count())
        return True

    @trace
    def load_text(self, text: str | None) -> bool:
        """Accept text for encoding and reset the canvas to blank.

        Rejects missing, empty or whitespace-only text, text containing
        code points above 255, and text too long to fit between the frame
        columns (``len(text) + 2`` must stay below ``WIDTH``). State is
        untouched on rejection. Pixels are not drawn until :meth:`encode`.
        """
        if not text:
            return self._fail("load_text", "empty_text")
        if not text.strip():
            return self._fail("load_text", "blank_text")
        if len(text) + FRAME_WIDTH >= WIDTH:
            return self._fail("load_text", "text_too_long", length=len(text), max_length=WIDTH - FRAME_WIDTH - 1)
        if any(ord(ch) > MAX_CODE_POINT for ch in text):
            return self._fail("load_text", "non_8bit_char")

        self._text = text
        self._canvas = Canvas()
        self._signal_height = SIGNAL_HEIGHT
        self._signal_width = len(text) + FRAME_WIDTH
        self._authority = Authority.TEXT
        self._synced = False

        audit("codec.text_loaded", logger=log, length=len(text),
              signal=f"{self._signal_width}x{self._signal_height}")
        return True

    # -- conversion ----------------------------------------------------------

    @trace
    def encode(self) -> bool:
        """Draw the frame and one data column per character into the canvas."""
        if not self._text or not self._text.strip():
            return self._fail("encode", "no_text")
        if self._canvas is None:
            return self._fail("encode", "no_canvas")

        image = self._canvas
        width = self._signal_width
        bottom = HEIGHT - 1
        top = HEIGHT - self._signal_height

        for col in range(width):
            image.set(bottom, col, True)
            image.set(top, col, col % 2 == 0)

        for index, ch in enumerate(self._text):
            for bit_index, bit in enumerate(char_to_bits(ord(ch))):
                image.set(bottom - 1 - bit_index, 1 + index, bool(bit))

        # Frame columns across the data band; the right one on odd canvas rows only.
        for bit_index in range(DATA_BITS):
            row = bottom - 1 - bit_index
            image.set(row, 0, True)
            if row % 2 == 1:
                image.set(row, width - 1, True)

        self._authority = Authority.TEXT
        self._synced = True
        audit("codec.encoded", logger=log, text=self._text,
              signal=f"{width}x{self._signal_height}", pixels=image.count())
        return True

    @trace
    def decode(self) -> bool:
        """Rebuild the text from the data columns of the canvas.

        Reads columns ``1 .. signal_width - 2``. A canvas that was never
        encoded still decodes, to whatever its blank columns spell.
        """
        if self._canvas is None:
            return self._fail("decode", "no_canvas")

        image = self._canvas
        start_row = HEIGHT - 2
        chars = []
        for col in range(1, self._signal_width - 1):
            bits = [1 if image.get(start_row - i, col) else 0 for i in range(DATA_BITS)]
            chars.append(bits_to_char(bits))

        self._text = "".join(chars)
        self._authority = Authority.PATTERN
        self._synced = True
        audit("codec.decoded", logger=log, text=self._text, length=len(self._text))
        return True

    # -- output --------------------------------------------------------------

    def render_text(self):
        self.renderer.render_text(self._text)

    def render_pattern(self):
        """Print the measured signal rectangle inside a dash and pipe border."""
        if self._canvas is None:
            log.warning("render_pattern: no canvas loaded")
            return

        top = HEIGHT - self._signal_height
        while top < HEIGHT - 1 and not self._canvas.get(top, 0):
            top += 1
        self.renderer.render_pattern(self._canvas, top, self._signal_width)

    def __repr__(self):
        return (f"Codec(authority={self._authority.value}, "
                f"signal={self._signal_width}x{self._signal_height}, text={self._text!r})")
