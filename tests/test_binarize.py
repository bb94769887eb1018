import numpy as np
import pytest

from binarize import binarize, luminance
from bitmap_errors import InvalidInput
from pixel_source import PixelBuffer


def gray_pixel(v, alpha=255):
    return [v, v, v, alpha]


def test_strictly_greater_than_threshold():
    buf = PixelBuffer(2, 1, gray_pixel(100) + gray_pixel(160))
    assert binarize(buf, 128).tolist() == [0, 1]
    # a threshold equal to the luminance gives 0
    exact = luminance(buf)[1]
    assert binarize(buf, exact).tolist() == [0, 0]


def test_weights():
    buf = PixelBuffer(3, 1, [255, 0, 0, 255, 0, 255, 0, 255, 0, 0, 255, 255])
    np.testing.assert_allclose(luminance(buf), [76.245, 149.685, 29.07])
    assert binarize(buf, 100).tolist() == [0, 1, 0]


def test_alpha_is_ignored():
    buf = PixelBuffer(2, 1, gray_pixel(200, alpha=0) + gray_pixel(200, alpha=255))
    assert binarize(buf, 128).tolist() == [1, 1]


def test_row_major_order():
    # 2x2: top-left and bottom-right white
    buf = PixelBuffer(2, 2, gray_pixel(255) + gray_pixel(0) + gray_pixel(0) + gray_pixel(255))
    assert binarize(buf, 128).tolist() == [1, 0, 0, 1]


def test_threshold_bounds():
    buf = PixelBuffer(1, 1, gray_pixel(200))
    assert binarize(buf, 255).tolist() == [0]
    assert binarize(buf, 0).tolist() == [1]
    with pytest.raises(InvalidInput, match="threshold"):
        binarize(buf, 256)
    with pytest.raises(InvalidInput, match="threshold"):
        binarize(buf, "128")


def test_buffer_length_mismatch():
    with pytest.raises(InvalidInput, match="expected 8"):
        binarize(PixelBuffer(2, 1, bytes(7)), 128)


def test_zero_width():
    with pytest.raises(InvalidInput, match="width"):
        binarize(PixelBuffer(0, 4, b""), 128)
