# bitmap_config.py
# Encoding flags for the bitmap codec

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from bitmap_errors import InvalidConfig


class _CodedEnum(Enum):
    """Enum whose members also carry the numeric code used by older config arrays."""

    @property
    def code(self) -> int:
        return self.value

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidConfig(f"{cls._flag}: unrecognized value {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidConfig(f"{cls._flag}: unrecognized value {value!r}") from None
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            if key.isdigit():
                return cls.parse(int(key))
            key = cls._aliases.get(key, key)
            if key in cls.__members__:
                return cls[key]
        raise InvalidConfig(f"{cls._flag}: unrecognized value {value!r}")


class SamplingMode(_CodedEnum):
    ROW = 0
    COL = 1
    COL_ROW = 2
    ROW_COL = 3

    @property
    def description(self) -> str:
        return _SAMPLING_DESCRIPTIONS[self]


SamplingMode._flag = "sampling_mode"
SamplingMode._aliases = {"COLROW": "COL_ROW", "ROWCOL": "ROW_COL", "COLUMN": "COL"}

_SAMPLING_DESCRIPTIONS = {
    SamplingMode.ROW: "row by row (left to right, top to bottom)",
    SamplingMode.COL: "column by column (top to bottom, left to right)",
    SamplingMode.COL_ROW: "column-row (8-row pages, one byte per column)",
    SamplingMode.ROW_COL: "row-column (8-column pages, one byte per row)",
}


class OutputMode(_CodedEnum):
    HEX_PREFIXED = 0
    RAW_BYTES = 1


OutputMode._flag = "output_mode"
OutputMode._aliases = {"HEX": "HEX_PREFIXED", "RAW": "RAW_BYTES", "BYTES": "RAW_BYTES"}


class ColorMode(_CodedEnum):
    COLOR = 0
    MONOCHROME = 1


ColorMode._flag = "color_mode"
ColorMode._aliases = {"MONO": "MONOCHROME", "RGB565": "COLOR"}


def _parse_flag(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("1", "true", "on", "yes"):
            return True
        if v in ("0", "false", "off", "no", ""):
            return False
    raise InvalidConfig(f"{name}: unrecognized value {value!r}")


@dataclass(frozen=True)
class Config:
    invert_polarity: bool = False
    sampling_mode: SamplingMode = SamplingMode.ROW
    reverse_bit_order: bool = False
    output_mode: OutputMode = OutputMode.HEX_PREFIXED
    color_mode: ColorMode = ColorMode.MONOCHROME

    def __post_init__(self):
        # frozen, so go through object.__setattr__
        object.__setattr__(self, "invert_polarity", _parse_flag("invert_polarity", self.invert_polarity))
        object.__setattr__(self, "sampling_mode", SamplingMode.parse(self.sampling_mode))
        object.__setattr__(self, "reverse_bit_order", _parse_flag("reverse_bit_order", self.reverse_bit_order))
        object.__setattr__(self, "output_mode", OutputMode.parse(self.output_mode))
        object.__setattr__(self, "color_mode", ColorMode.parse(self.color_mode))

    @classmethod
    def from_codes(cls, codes: Sequence[int]) -> "Config":
        """
        Build a Config from the five-integer array used by older callers:
        [invert, sampling mode, reverse bit order, output mode, color mode].
        """
        codes = list(codes)
        if len(codes) != 5:
            raise InvalidConfig(f"config codes: expected 5 values, got {len(codes)}")
        return cls(
            invert_polarity=_parse_flag("invert_polarity", codes[0]),
            sampling_mode=SamplingMode.parse(codes[1]),
            reverse_bit_order=_parse_flag("reverse_bit_order", codes[2]),
            output_mode=OutputMode.parse(codes[3]),
            color_mode=ColorMode.parse(codes[4]),
        )

    def to_codes(self) -> list[int]:
        return [
            int(self.invert_polarity),
            self.sampling_mode.code,
            int(self.reverse_bit_order),
            self.output_mode.code,
            self.color_mode.code,
        ]
