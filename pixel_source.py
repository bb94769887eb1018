# pixel_source.py
# Where pixel buffers come from: the PixelBuffer type and its sources

from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from bitmap_errors import InvalidInput

DEPTH = 4  # RGBA8


@dataclass(frozen=True)
class PixelBuffer:
    """
    Decoded RGBA8 image, row-major.

    pixels may be bytes-like, a flat sequence of ints, or a sequence of
    RGBA quadruples. The length is checked by validate(), which every codec
    entry point calls before touching the data.
    """

    width: int
    height: int
    pixels: object

    def validate(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidInput(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidInput(f"{name} must be greater than 0, got {value}")

        expected = self.width * self.height * DEPTH
        actual = self._flat().size
        if actual != expected:
            raise InvalidInput(
                f"pixel buffer holds {actual} values, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )

    def _flat(self) -> np.ndarray:
        if isinstance(self.pixels, (bytes, bytearray, memoryview)):
            return np.frombuffer(self.pixels, dtype=np.uint8)
        try:
            return np.asarray(self.pixels, dtype=np.uint8).reshape(-1)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidInput(f"pixel buffer is not RGBA8 data: {e}") from e

    def as_array(self) -> np.ndarray:
        """Validated (width*height, 4) uint8 view; read-only."""
        self.validate()
        arr = self._flat().reshape(self.width * self.height, DEPTH)
        arr.flags.writeable = False
        return arr

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        img = img.convert("RGBA")
        return cls(img.width, img.height, img.tobytes())


class PixelSource(Protocol):
    def read(self) -> PixelBuffer:
        ...


ImageInput = Union[str, Path, bytes, Image.Image]


# =========================
# Pillow backend
# =========================
def open_image(src: ImageInput) -> Image.Image:
    """Open a path, raw encoded bytes, a data:image/... base64 URL, or pass an Image through."""
    if isinstance(src, Image.Image):
        return src
    if isinstance(src, str) and src.startswith("data:image/"):
        try:
            _, payload = src.split(",", 1)
            src = base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise InvalidInput(f"not a valid base64 image: {e}") from e
    if isinstance(src, (bytes, bytearray)):
        src = io.BytesIO(src)
    img = Image.open(src)
    img.load()
    return img


def fit_to_canvas(img: Image.Image, size: Tuple[int, int], background=(255, 255, 255)) -> Image.Image:
    """Shrink keeping aspect ratio and center on a solid canvas of exactly `size`."""
    target_w, target_h = size
    img = img.convert("RGBA")
    img.thumbnail((target_w, target_h), Image.LANCZOS)

    canvas = Image.new("RGBA", (target_w, target_h), background + (255,))
    x_offset = (target_w - img.width) // 2
    y_offset = (target_h - img.height) // 2
    canvas.paste(img, (x_offset, y_offset), img)
    return canvas


class ImagePixelSource:
    """
    PixelSource backed by Pillow.

    size: optional (width, height) to resize to. With keep_aspect the
    image is fitted onto a white canvas instead of being stretched.
    grayscale: run the image through a luminance filter first, the way
    the monochrome preview path expects.
    """

    def __init__(
        self,
        src: ImageInput,
        size: Optional[Tuple[int, int]] = None,
        grayscale: bool = False,
        keep_aspect: bool = False,
    ):
        self.src = src
        self.size = size
        self.grayscale = grayscale
        self.keep_aspect = keep_aspect

    def read(self) -> PixelBuffer:
        img = open_image(self.src)

        if self.size is not None:
            w, h = self.size
            if w <= 0 or h <= 0:
                raise InvalidInput(f"resize target must be positive, got {w}x{h}")
            if self.keep_aspect:
                img = fit_to_canvas(img, (w, h))
            else:
                img = img.convert("RGBA").resize((w, h), Image.LANCZOS)

        if self.grayscale:
            rgba = img.convert("RGBA")
            alpha = rgba.getchannel("A")
            gray = ImageOps.grayscale(rgba).convert("RGBA")
            gray.putalpha(alpha)
            img = gray

        return PixelBuffer.from_image(img)


# =========================
# numpy backend (fixtures, pre-decoded frames)
# =========================
class ArrayPixelSource:
    def __init__(self, data):
        arr = np.asarray(data, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidInput(f"expected an (h, w, 3) or (h, w, 4) array, got shape {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        self.data = arr

    def read(self) -> PixelBuffer:
        h, w, _ = self.data.shape
        return PixelBuffer(w, h, self.data.tobytes())
