# codec.py
# PixelBuffer + threshold + Config -> packed bitmap -> formatted output

import logging
from typing import Optional

from binarize import binarize
from bitmap_config import ColorMode, Config
from hex_output import DEFAULT_LINE_BREAK, FormattedOutput, format_output
from pixel_source import PixelBuffer
from rgb565 import pack_color
from to_bin import PackedBitmap, pack

log = logging.getLogger(__name__)


def encode(buffer: PixelBuffer, threshold, config: Optional[Config] = None) -> PackedBitmap:
    if config is None:
        config = Config()

    buffer.validate()

    if config.color_mode is ColorMode.COLOR:
        return pack_color(buffer, config.invert_polarity)

    lum_map = binarize(buffer, threshold)
    return pack(
        lum_map,
        buffer.width,
        buffer.height,
        config.sampling_mode,
        reverse_bit_order=config.reverse_bit_order,
        invert_polarity=config.invert_polarity,
    )


def generate(
    buffer: PixelBuffer,
    threshold,
    config: Optional[Config] = None,
    line_break_every: int = DEFAULT_LINE_BREAK,
) -> FormattedOutput:
    if config is None:
        config = Config()

    bitmap = encode(buffer, threshold, config)
    out = format_output(bitmap, config.output_mode, line_break_every)

    log.debug(
        "generate %dx%d %s/%s -> %s",
        buffer.width, buffer.height, config.color_mode.name, config.output_mode.name, out.size.formatted,
    )
    return out
