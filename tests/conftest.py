import numpy as np
import pytest

from pixel_source import ArrayPixelSource, PixelBuffer


def mono_buffer(bits, width):
    """PixelBuffer whose pixels are white where bits is 1 and black where it is 0."""
    bits = np.asarray(bits, dtype=np.uint8).reshape(-1, width)
    rgb = np.where(bits[..., None] == 1, 255, 0).astype(np.uint8)
    rgb = np.repeat(rgb, 3, axis=2)
    return ArrayPixelSource(rgb).read()


@pytest.fixture
def random_bits():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 2, size=(10, 9), dtype=np.uint8)


@pytest.fixture
def red_white_buffer():
    # 2x1: pure red, pure white
    return PixelBuffer(2, 1, bytes([255, 0, 0, 255, 255, 255, 255, 255]))
