"""FFmpeg time durations, held as a whole number of microseconds."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

_MICROS_PER_SEC = 1_000_000.0
_MILLIS_PER_SEC = 1_000.0
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class ParseFfmpegTimeStrError(ValueError):
    """A string could not be read as an FFmpeg time duration."""

    def __init__(self, message: str = "Failed to parse FFmpeg time string") -> None:
        super().__init__(message)


def _parse_float(text: str) -> Optional[float]:
    if _FLOAT_RE.fullmatch(text) is None:
        return None
    return float(text)


def _saturating_int(value: float) -> int:
    """Truncate towards zero, clamping to the signed 64-bit range; NaN gives 0."""
    if math.isnan(value):
        return 0
    if value >= 2.0**63:
        return _I64_MAX
    if value < -(2.0**63):
        return _I64_MIN
    return int(value)


def _strip_suffix(text: str, suffix: str) -> str:
    while text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


@dataclass(frozen=True, order=True)
class FfmpegTimeDuration:
    """A time duration in FFmpeg's syntax, stored in microseconds.

    Numbers added to a duration, or converted from one, are in seconds.
    """

    microseconds: int = 0

    @classmethod
    def from_micros(cls, microseconds: int) -> FfmpegTimeDuration:
        return cls(microseconds)

    @classmethod
    def from_seconds(cls, seconds: float) -> FfmpegTimeDuration:
        return cls(_saturating_int(seconds * _MICROS_PER_SEC))

    @classmethod
    def from_str(cls, text: str) -> Optional[FfmpegTimeDuration]:
        """Parse ``HH:MM:SS.mmm``, plain seconds, or values ending in ``ms``/``us``.

        Returns None if the text is not a duration.
        """
        text = text.strip()
        negative = text.startswith("-")
        if negative:
            text = text[1:]

        if text.endswith("us"):
            value = _parse_float(_strip_suffix(text, "us").strip())
            if value is None:
                return None
            micros = _saturating_int(value)
        elif text.endswith("ms"):
            value = _parse_float(_strip_suffix(text, "ms").strip())
            if value is None:
                return None
            micros = _saturating_int(value * _MILLIS_PER_SEC)
        elif ":" in text:
            parts = reversed(text.split(":"))
            seconds = 0.0
            sec = next(parts, None)
            if sec is not None:
                value = _parse_float(sec)
                if value is None:
                    return None
                seconds += value
            minutes = next(parts, None)
            if minutes is not None:
                value = _parse_float(minutes)
                if value is None:
                    return None
                seconds += value * 60.0
            hours = next(parts, None)
            if hours is not None:
                value = _parse_float(hours)
                if value is None:
                    return None
                seconds += value * 60.0 * 60.0
            micros = _saturating_int(seconds * _MICROS_PER_SEC)
        else:
            value = _parse_float(text)
            if value is None:
                return None
            micros = _saturating_int(value * _MICROS_PER_SEC)

        return cls(-micros if negative else micros)

    @classmethod
    def parse(cls, text: str) -> FfmpegTimeDuration:
        """Like :meth:`from_str`, but raise :class:`ParseFfmpegTimeStrError` on failure."""
        duration = cls.from_str(text)
        if duration is None:
            raise ParseFfmpegTimeStrError()
        return duration

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> FfmpegTimeDuration:
        return cls(delta // timedelta(microseconds=1))

    def as_micros(self) -> int:
        return self.microseconds

    def as_seconds(self) -> float:
        return self.microseconds / _MICROS_PER_SEC

    def as_timedelta(self) -> timedelta:
        """The magnitude of this duration as a timedelta."""
        return timedelta(microseconds=abs(self.microseconds))

    def to_alt_string(self) -> str:
        """The duration in microseconds with a ``us`` suffix."""
        return f"{self.microseconds}us"

    def __str__(self) -> str:
        seconds = self.as_seconds()
        abs_seconds = abs(seconds)
        hours = math.floor(abs_seconds / 3600.0)
        minutes = math.floor((abs_seconds / 60.0) % 60.0)
        secs = abs_seconds % 60.0
        sign = "-" if seconds < 0.0 else ""
        return f"{sign}{hours:02d}:{minutes:02d}:{secs:06.3f}"

    def __format__(self, spec: str) -> str:
        if spec == "#":
            return self.to_alt_string()
        return format(str(self), spec)

    def __add__(self, other: Union[FfmpegTimeDuration, int, float]) -> FfmpegTimeDuration:
        if isinstance(other, FfmpegTimeDuration):
            return FfmpegTimeDuration(self.microseconds + other.microseconds)
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return FfmpegTimeDuration(self.microseconds + other * 1_000_000)
        if isinstance(other, float):
            return FfmpegTimeDuration(
                self.microseconds + _saturating_int(other * _MICROS_PER_SEC)
            )
        return NotImplemented

    def __sub__(self, other: FfmpegTimeDuration) -> FfmpegTimeDuration:
        if isinstance(other, FfmpegTimeDuration):
            return FfmpegTimeDuration(self.microseconds - other.microseconds)
        return NotImplemented

    def __float__(self) -> float:
        return self.as_seconds()

    def __int__(self) -> int:
        return int(self.as_seconds())