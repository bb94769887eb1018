# to_bin.py
# Packs a 0/1 luminance map into bytes, 8 pixels per byte

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from bitmap_config import ColorMode, SamplingMode
from bitmap_errors import InvalidInput

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedBitmap:
    data: bytes
    width: int
    height: int
    bytes_per_page: int
    page_count: int
    sampling_mode: Optional[SamplingMode] = None
    color_mode: ColorMode = ColorMode.MONOCHROME

    def __len__(self) -> int:
        return len(self.data)


def _pages_of_8(n):
    return (n + 7) // 8


@dataclass(frozen=True)
class _Layout:
    # bytes in one page, from (width, height)
    bytes_per_page: Callable[[int, int], int]
    # number of pages, from (width, height)
    page_count: Callable[[int, int], int]
    # byte index, from (x, y, width, height, bytes_per_page)
    position: Callable
    # bit index inside the byte before bit-order reversal, from (x, y)
    offset: Callable


_LAYOUTS = {
    # every row is a page, x walks the bits
    SamplingMode.ROW: _Layout(
        bytes_per_page=lambda w, h: _pages_of_8(w),
        page_count=lambda w, h: h,
        position=lambda x, y, w, h, bpp: y * bpp + x // 8,
        offset=lambda x, y: x % 8,
    ),
    # every column is a page, y walks the bits
    SamplingMode.COL: _Layout(
        bytes_per_page=lambda w, h: _pages_of_8(h),
        page_count=lambda w, h: w,
        position=lambda x, y, w, h, bpp: x * bpp + y // 8,
        offset=lambda x, y: y % 8,
    ),
    # 8 rows form a band, one byte per column inside the band
    SamplingMode.COL_ROW: _Layout(
        bytes_per_page=lambda w, h: _pages_of_8(h),
        page_count=lambda w, h: w,
        position=lambda x, y, w, h, bpp: x + (y // 8) * w,
        offset=lambda x, y: y % 8,
    ),
    # 8 columns form a band, one byte per row inside the band
    SamplingMode.ROW_COL: _Layout(
        bytes_per_page=lambda w, h: _pages_of_8(w),
        page_count=lambda w, h: h,
        position=lambda x, y, w, h, bpp: (x // 8) * h + y,
        offset=lambda x, y: x % 8,
    ),
}


def packed_size(width: int, height: int, mode) -> int:
    layout = _LAYOUTS[SamplingMode.parse(mode)]
    return layout.bytes_per_page(width, height) * layout.page_count(width, height)


def pack(
    lum_map,
    width: int,
    height: int,
    mode=SamplingMode.ROW,
    reverse_bit_order: bool = False,
    invert_polarity: bool = False,
) -> PackedBitmap:
    """
    Pack one 0/1 value per pixel (row-major) into bytes.

    A pixel that is 0 (after optional inversion) SETS its bit, a pixel
    that is 1 leaves it clear. Firmware consuming this format relies on
    that polarity. Bits go LSB-first unless reverse_bit_order is set.
    """
    mode = SamplingMode.parse(mode)
    layout = _LAYOUTS[mode]

    for name, value in (("width", width), ("height", height)):
        if value <= 0:
            raise InvalidInput(f"{name} must be greater than 0, got {value}")

    values = np.asarray(lum_map).reshape(-1)
    if values.size != width * height:
        raise InvalidInput(f"luminance map holds {values.size} values, expected {width * height} for {width}x{height}")

    bpp = layout.bytes_per_page(width, height)
    pages = layout.page_count(width, height)
    buf = np.zeros(bpp * pages, dtype=np.uint8)

    y, x = np.divmod(np.arange(width * height), width)

    offset = layout.offset(x, y)
    shift = 7 - offset if reverse_bit_order else offset

    lit = values != 0
    if invert_polarity:
        lit = ~lit
    sets_bit = ~lit

    positions = layout.position(x, y, width, height, bpp)[sets_bit]
    bits = np.left_shift(1, shift[sets_bit]).astype(np.uint8)
    # each (byte, bit) pair belongs to exactly one pixel
    np.bitwise_or.at(buf, positions, bits)

    log.debug("%s: %dx%d -> %d pages x %d bytes", mode.name, width, height, pages, bpp)

    return PackedBitmap(
        data=buf.tobytes(),
        width=width,
        height=height,
        bytes_per_page=bpp,
        page_count=pages,
        sampling_mode=mode,
        color_mode=ColorMode.MONOCHROME,
    )
