# bitmap_errors.py
# Error types raised by the bitmap codec


class CodecError(ValueError):
    """Base class for every failure the codec reports."""


class InvalidInput(CodecError):
    """Pixel data, dimensions or numeric parameters are malformed."""


class InvalidConfig(CodecError):
    """An encoding flag holds a value outside its closed set."""
