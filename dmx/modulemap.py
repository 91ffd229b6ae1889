"""Structural map of a DM-X signal: which pixels are frame, timing or data."""

from PIL import Image, ImageDraw

from dmx.canvas import HEIGHT
from dmx.codec import DATA_BITS, Codec
from dmx.logging import audit, get_logger, trace

log = get_logger("modulemap")


@trace
def get_module_map(codec: Codec) -> dict:
    """Classify every pixel of the codec's current signal rectangle.

    Returns a dict with:
        - 'width', 'height': measured signal size
        - 'top_row': canvas row of the timing row
        - 'char_count': number of data columns
        - 'pixels': bool rows of the signal rectangle, top row first
        - 'frame_positions': start row, left column, right column odd rows
        - 'timing_positions': the alternating top row
        - 'data_positions': the 8-bit band of each data column
    Positions are (canvas_row, col) tuples.
    """
    canvas = codec.canvas
    width = codec.signal_width
    height = codec.signal_height
    bottom = HEIGHT - 1
    top = HEIGHT - height

    frame_pos = []
    timing_pos = []
    data_pos = []

    for col in range(width):
        frame_pos.append((bottom, col))

    band = [bottom - 1 - i for i in range(DATA_BITS) if bottom - 1 - i > top]
    for row in band:
        frame_pos.append((row, 0))
        if row % 2 == 1 and width > 1:
            frame_pos.append((row, width - 1))

    if top < bottom:
        for col in range(width):
            timing_pos.append((top, col))

    fixed = set(frame_pos + timing_pos)
    for row in band:
        for col in range(1, width - 1):
            if (row, col) not in fixed:
                data_pos.append((row, col))

    pixels = []
    if canvas is not None:
        pixels = [[canvas.get(row, col) for col in range(width)] for row in range(top, HEIGHT)]

    audit("signal.module_map", logger=log,
          size=f"{width}x{height}", frame=len(frame_pos),
          timing=len(timing_pos), data=len(data_pos))

    return {
        "width": width,
        "height": height,
        "top_row": top,
        "char_count": max(width - 2, 0),
        "pixels": pixels,
        "frame_positions": frame_pos,
        "timing_positions": timing_pos,
        "data_positions": data_pos,
    }


@trace
def render_bitmap_dump(module_map: dict, scale: int = 20) -> Image.Image:
    """Render a color-coded in-memory bitmap of the module map.

    Colors:
        - Red: frame pixels
        - Green: timing row
        - Black/White: data pixels (actual value)
        - Light gray: unassigned pixels inside the rectangle
    """
    width = module_map["width"]
    height = module_map["height"]
    top = module_map["top_row"]
    pixels = module_map["pixels"]
    img = Image.new("RGB", (max(width, 1) * scale, max(height, 1) * scale), (255, 255, 255))

    frame_set = set(module_map["frame_positions"])
    timing_set = set(module_map["timing_positions"])
    data_set = set(module_map["data_positions"])

    draw = ImageDraw.Draw(img)
    for y, row_pixels in enumerate(pixels):
        row = top + y
        for col, value in enumerate(row_pixels):
            x0, y0 = col * scale, y * scale
            x1, y1 = x0 + scale - 1, y0 + scale - 1
            pos = (row, col)

            if pos in frame_set:
                color = (220, 50, 50) if value else (255, 180, 180)
            elif pos in timing_set:
                color = (50, 180, 50) if value else (180, 255, 180)
            elif pos in data_set:
                color = (0, 0, 0) if value else (255, 255, 255)
            else:
                color = (160, 160, 160) if value else (220, 220, 220)

            draw.rectangle([x0, y0, x1, y1], fill=color)
            draw.rectangle([x0, y0, x1, y1], outline=(230, 230, 230))

    return img
