# binarize.py
# RGBA -> 1 bit per pixel by weighted luminance

import numbers

import numpy as np

from bitmap_errors import InvalidInput
from pixel_source import PixelBuffer

# ITU-R BT.601 luma weights
WEIGHT_R = 0.299
WEIGHT_G = 0.587
WEIGHT_B = 0.114


def check_threshold(threshold) -> None:
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise InvalidInput(f"threshold must be a number, got {threshold!r}")
    if not 0 <= threshold <= 255:
        raise InvalidInput(f"threshold must be within 0..255, got {threshold}")


def luminance(buffer: PixelBuffer) -> np.ndarray:
    px = buffer.as_array().astype(np.float64)
    # same evaluation order as the scalar formula so ties land identically
    return px[:, 0] * WEIGHT_R + px[:, 1] * WEIGHT_G + px[:, 2] * WEIGHT_B


def binarize(buffer: PixelBuffer, threshold) -> np.ndarray:
    """
    One 0/1 value per pixel, row-major. A pixel is 1 only when its
    luminance is strictly greater than threshold; alpha is ignored.
    """
    check_threshold(threshold)
    return (luminance(buffer) > threshold).astype(np.uint8)
