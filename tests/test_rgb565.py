import pytest

from bitmap_config import ColorMode
from bitmap_errors import InvalidInput
from pixel_source import PixelBuffer
from rgb565 import color565, pack_color


def test_red_and_white(red_white_buffer):
    out = pack_color(red_white_buffer)
    assert out.data == bytes([0xF8, 0x00, 0xFF, 0xFF])
    assert out.color_mode is ColorMode.COLOR
    assert out.sampling_mode is None


def test_inverted(red_white_buffer):
    out = pack_color(red_white_buffer, invert_polarity=True)
    assert out.data == bytes([0x07, 0xFF, 0x00, 0x00])


def test_channel_quantization():
    # green keeps 6 bits, blue keeps 5, alpha is skipped
    buf = PixelBuffer(2, 1, [0, 255, 0, 0, 0, 0, 255, 17])
    assert pack_color(buf).data == bytes([0x07, 0xE0, 0x00, 0x1F])
    assert color565(0, 255, 0) == 0x07E0


def test_size_and_pages():
    buf = PixelBuffer(3, 2, bytes(3 * 2 * 4))
    out = pack_color(buf)
    assert len(out.data) == 3 * 2 * 2
    assert (out.bytes_per_page, out.page_count) == (6, 2)


def test_malformed_buffer():
    with pytest.raises(InvalidInput):
        pack_color(PixelBuffer(3, 2, bytes(10)))
