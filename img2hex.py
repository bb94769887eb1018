#!/usr/bin/env python3
"""
Convert an image to a packed display bitmap.

Usage:
  img2hex logo.png                          # logo.bin, 1bpp row-major
  img2hex logo.png --size 128x64 --mode col-row --format c --name logo
  img2hex photo.jpg --color --out photo565.bin

Sampling modes (--mode):
  row      one page per pixel row
  col      one page per pixel column
  col-row  8-row bands, one byte per column (SSD1306 page layout)
  row-col  8-column bands, one byte per row
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PIL import UnidentifiedImageError

from bitmap_config import ColorMode, Config, SamplingMode
from bitmap_errors import CodecError
from codec import encode
from hex_output import DEFAULT_LINE_BREAK, format_output, to_c_array
from pixel_source import ImagePixelSource

_SUFFIX = {"bin": ".bin", "hex": ".txt", "c": ".h"}


def parse_size(text: str):
    try:
        w, h = text.lower().split("x")
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")


def convert_to_bin(input_path, output_path, threshold=128, config=None, size=None, fmt="bin",
                   name="image_bits", line_break=DEFAULT_LINE_BREAK) -> int:
    """Encode one image file and write it out; returns the packed byte count."""
    config = config or Config()
    buffer = ImagePixelSource(str(input_path), size=size, keep_aspect=size is not None).read()
    bitmap = encode(buffer, threshold, config)

    output_path = Path(output_path)
    if fmt == "c":
        output_path.write_text(to_c_array(bitmap, name, line_break), encoding="utf-8")
    elif fmt == "hex":
        text = format_output(bitmap, "hex", line_break).display(line_break)
        output_path.write_text(text + "\n", encoding="utf-8")
    else:
        output_path.write_bytes(bitmap.data)

    return len(bitmap)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="img2hex", description="Convert an image to a packed display bitmap.")
    parser.add_argument("input", help="Input image file (png, bmp, jpg, ...)")
    parser.add_argument("-o", "--out", default=None,
                        help="Output path (default: input name with .bin/.txt/.h)")
    parser.add_argument("--threshold", type=float, default=128,
                        help="Luminance threshold 0..255; brighter pixels count as 1 (default: 128)")
    parser.add_argument("--size", type=parse_size, default=None,
                        help="Fit the image into WIDTHxHEIGHT before encoding")
    parser.add_argument("--invert", action="store_true", help="Invert polarity")
    parser.add_argument("--mode", default="row",
                        choices=["row", "col", "col-row", "row-col"], help="Sampling mode (default: row)")
    parser.add_argument("--reverse-bits", action="store_true", help="MSB-first bit order")
    parser.add_argument("--color", action="store_true", help="Encode RGB565 instead of 1bpp")
    parser.add_argument("--format", default="bin", choices=sorted(_SUFFIX), help="Output form (default: bin)")
    parser.add_argument("--name", default="image_bits", help="Array name for --format c")
    parser.add_argument("--line-break", type=int, default=DEFAULT_LINE_BREAK,
                        help="Bytes per line in text output (default: 16)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"ERROR: Input file not found: {input_path}", file=sys.stderr)
        return 3

    out_path = Path(args.out) if args.out else input_path.with_suffix(_SUFFIX[args.format])

    config = Config(
        invert_polarity=args.invert,
        sampling_mode=SamplingMode.parse(args.mode),
        reverse_bit_order=args.reverse_bits,
        color_mode=ColorMode.COLOR if args.color else ColorMode.MONOCHROME,
    )

    try:
        n = convert_to_bin(input_path, out_path, args.threshold, config, args.size,
                           args.format, args.name, args.line_break)
    except UnidentifiedImageError as e:
        print(f"ERROR: Failed to open image: {e}", file=sys.stderr)
        return 3
    except CodecError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Wrote {n} bytes to: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
