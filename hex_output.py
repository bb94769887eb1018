# hex_output.py
# Turns packed bytes into what callers consume: raw bytes, 0x tokens, text

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

import numpy as np

from bitmap_config import OutputMode
from bitmap_errors import InvalidInput
from to_bin import PackedBitmap

DEFAULT_LINE_BREAK = 16


class OutputSize(NamedTuple):
    bytes: int
    kilobytes: float

    @property
    def formatted(self) -> str:
        return f"{self.bytes} bytes ({self.kilobytes:.2f} KB)"


def output_size(data) -> OutputSize:
    n = len(data) if data is not None else 0
    return OutputSize(n, n / 1024)


def to_hex_tokens(data) -> List[str]:
    if not data:
        return []
    return [f"0x{b:02x}" for b in bytes(data)]


def _check_line_break(line_break_every: int) -> None:
    if line_break_every < 1:
        raise InvalidInput(f"line_break_every must be at least 1, got {line_break_every}")


def _wrap(items: List[str], sep: str, line_break_every: int, line_end: str) -> str:
    lines = [
        sep.join(items[i:i + line_break_every])
        for i in range(0, len(items), line_break_every)
    ]
    return (line_end + "\n").join(lines)


@dataclass(frozen=True)
class FormattedOutput:
    output_mode: OutputMode
    data: bytes
    tokens: Optional[List[str]] = None

    @property
    def payload(self):
        """The returned artifact: hex tokens or the raw byte buffer."""
        if self.output_mode is OutputMode.HEX_PREFIXED:
            return self.tokens
        return self.data

    @property
    def size(self) -> OutputSize:
        return output_size(self.data)

    def display(self, line_break_every: int = DEFAULT_LINE_BREAK) -> str:
        _check_line_break(line_break_every)
        if not self.data:
            return ""
        if self.output_mode is OutputMode.HEX_PREFIXED:
            return _wrap(self.tokens, ", ", line_break_every, ",")
        return _wrap([f"{b:02x}" for b in self.data], " ", line_break_every, "")


def format_output(
    bitmap: PackedBitmap,
    output_mode=OutputMode.HEX_PREFIXED,
    line_break_every: int = DEFAULT_LINE_BREAK,
) -> FormattedOutput:
    output_mode = OutputMode.parse(output_mode)
    _check_line_break(line_break_every)
    data = bytes(bitmap.data)
    if output_mode is OutputMode.HEX_PREFIXED:
        return FormattedOutput(output_mode, data, to_hex_tokens(data))
    return FormattedOutput(output_mode, data)


def preview(lum_map, width: int) -> str:
    """Debug view of a luminance map: one '0'/'1' per pixel, one line per row."""
    values = np.asarray(lum_map).reshape(-1) if lum_map is not None else np.empty(0)
    if values.size == 0:
        return ""
    if width < 1:
        raise InvalidInput(f"width must be greater than 0, got {width}")

    out = []
    for i, v in enumerate(values):
        out.append("0" if v == 0 else "1")
        if (i + 1) % width == 0:
            out.append("\n")
    return "".join(out)


def to_c_array(bitmap: PackedBitmap, name: str = "image_bits", line_break_every: int = DEFAULT_LINE_BREAK) -> str:
    """Render the bitmap as a C declaration for inclusion in firmware sources."""
    _check_line_break(line_break_every)
    if not name.isidentifier():
        raise InvalidInput(f"array name must be a C identifier, got {name!r}")

    if bitmap.sampling_mode is None:
        layout = "RGB565 big-endian, 2 bytes per pixel"
    else:
        layout = f"1bpp, {bitmap.sampling_mode.description}"

    tokens = to_hex_tokens(bitmap.data)
    lines = [
        "#pragma once",
        "#include <stdint.h>",
        "",
        f"// Size: {bitmap.width}x{bitmap.height}, {layout}",
        f"// {bitmap.page_count} pages x {bitmap.bytes_per_page} bytes",
        "",
        f"#define {name.upper()}_W {bitmap.width}",
        f"#define {name.upper()}_H {bitmap.height}",
        "",
        f"static const uint8_t {name}[{len(tokens)}] = {{",
    ]
    for i in range(0, len(tokens), line_break_every):
        lines.append("  " + ", ".join(tokens[i:i + line_break_every]) + ",")
    lines.append("};")
    return "\n".join(lines) + "\n"
