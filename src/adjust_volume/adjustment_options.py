"""Shared adjustment option enums and parsing helpers."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class AdjustmentMode(str, Enum):
    """How each eligible file is routed to a strategy."""

    BASIC = "basic"
    LOUDNESS = "loudness"
    AUTO = "auto"


class AdjustmentStrategy(str, Enum):
    """Concrete processing strategy applied to a single file."""

    PEAK_GAIN = "peak-gain"
    LOUDNESS_NORMALIZATION = "loudness-normalization"

    @property
    def description(self) -> str:
        if self is AdjustmentStrategy.PEAK_GAIN:
            return "peak volume adjustment"
        return "two phase loudnorm normalization"


# Numeric mode selectors accepted on the command line.
MODE_NUMBERS: dict[str, AdjustmentMode] = {
    "1": AdjustmentMode.BASIC,
    "2": AdjustmentMode.LOUDNESS,
    "3": AdjustmentMode.AUTO,
}


EnumT = TypeVar("EnumT", bound=Enum)


def enum_values(enum_cls: type[EnumT]) -> tuple[str, ...]:
    """Return enum values for help text in declaration order."""

    return tuple(str(member.value) for member in enum_cls)


def parse_case_insensitive_enum(raw_value: str, enum_cls: type[EnumT]) -> EnumT:
    """Parse enum values case-insensitively and raise ValueError with allowed values."""

    normalized = raw_value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == normalized:
            return member

    allowed = ", ".join(enum_values(enum_cls))
    enum_name = enum_cls.__name__
    raise ValueError(f"Invalid {enum_name}: '{raw_value}'. Allowed values: {allowed}.")


def parse_mode(raw_value: str) -> AdjustmentMode:
    """Parse a mode given as ``1``/``2``/``3`` or by name."""

    selector = raw_value.strip()
    if selector in MODE_NUMBERS:
        return MODE_NUMBERS[selector]
    try:
        return parse_case_insensitive_enum(selector, AdjustmentMode)
    except ValueError:
        raise ValueError(
            f"Invalid mode: '{raw_value}'. Use '1' (basic) for volume adjustment, "
            "'2' (loudness) for normalization or '3' (auto) to normalize lossy "
            "tracks and volume adjust lossless tracks."
        ) from None
