# rgb565.py
# RGBA -> big-endian RGB565, 2 bytes per pixel

import logging

import numpy as np

from bitmap_config import ColorMode
from pixel_source import PixelBuffer
from to_bin import PackedBitmap

log = logging.getLogger(__name__)


def color565(r: int, g: int, b: int) -> int:
    """RRRRRGGGGGGBBBBB"""
    return ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)


def pack_color(buffer: PixelBuffer, invert_polarity: bool = False) -> PackedBitmap:
    px = buffer.as_array().astype(np.uint16)

    color = ((px[:, 0] >> 3) << 11) | ((px[:, 1] >> 2) << 5) | (px[:, 2] >> 3)

    # high byte first, pixels in source order
    out = np.empty(color.size * 2, dtype=np.uint8)
    out[0::2] = color >> 8
    out[1::2] = color & 0xFF

    if invert_polarity:
        out = ~out

    log.debug("rgb565: %dx%d -> %d bytes (invert=%s)", buffer.width, buffer.height, out.size, invert_polarity)

    return PackedBitmap(
        data=out.tobytes(),
        width=buffer.width,
        height=buffer.height,
        bytes_per_page=buffer.width * 2,
        page_count=buffer.height,
        sampling_mode=None,
        color_mode=ColorMode.COLOR,
    )
