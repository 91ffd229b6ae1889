"""Console rendering of decoded text and signal patterns."""

import sys
from typing import TextIO

from dmx.canvas import HEIGHT, Canvas

BLACK_CHAR = "*"
WHITE_CHAR = " "
RULE_CHAR = "-"
POST_CHAR = "|"


class ConsoleRenderer:
    """Writes text and bordered patterns to a text stream.

    ``stream`` defaults to whatever ``sys.stdout`` is at write time, so
    output captured by test harnesses or redirected by the CLI lands in
    the right place.
    """

    def __init__(self, stream: TextIO | None = None, black: str = BLACK_CHAR, white: str = WHITE_CHAR):
        self._stream = stream
        self.black = black
        self.white = white

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def render_text(self, text: str):
        self.stream.write(f"{text}\n")

    def format_pattern(self, canvas: Canvas, top: int, width: int, bottom: int = HEIGHT) -> str:
        """Bordered block covering rows ``[top, bottom)`` and columns ``[0, width)``."""
        rule = RULE_CHAR * (width + 2)
        lines = [rule]
        for row in range(top, bottom):
            pixels = "".join(self.black if canvas.get(row, col) else self.white for col in range(width))
            lines.append(f"{POST_CHAR}{pixels}{POST_CHAR}")
        lines.append(rule)
        return "\n".join(lines) + "\n"

    def render_pattern(self, canvas: Canvas, top: int, width: int, bottom: int = HEIGHT):
        self.stream.write(self.format_pattern(canvas, top, width, bottom))
