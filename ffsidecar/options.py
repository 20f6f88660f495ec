"""Building FFmpeg argument lists with named aliases and presets."""

from __future__ import annotations

import math
import os
import struct
from collections.abc import Iterable
from decimal import Decimal
from typing import TypeVar, Union

_U32_MAX = 2**32 - 1

ArgLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

_Self = TypeVar("_Self", bound="ArgumentBuilder")


def _as_f32(value: float) -> float:
    """Round a float to single precision; out-of-range values become infinite."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _format_f32(value: float) -> str:
    """Shortest decimal text that reads back as the same single-precision value."""
    single = _as_f32(float(value))
    if math.isnan(single):
        return "NaN"
    if math.isinf(single):
        return "inf" if single > 0 else "-inf"
    packed = struct.pack("<f", single)
    text = repr(single)
    for precision in range(1, 10):
        candidate = f"{single:.{precision}g}"
        if struct.pack("<f", float(candidate)) == packed:
            text = candidate
            break
    return format(Decimal(text), "f")


def _format_u32(value: int, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, not {type(value).__name__}")
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} must be between 0 and {_U32_MAX}, got {value}")
    return str(value)


class ArgumentBuilder:
    """An ordered list of FFmpeg arguments with chainable aliases for common options.

    Every method appends to the list and returns the builder itself.
    """

    def __init__(self) -> None:
        self._args: list[str] = []

    # Plain arguments

    def arg(self: _Self, arg: ArgLike) -> _Self:
        """Append one argument."""
        self._args.append(os.fsdecode(arg))
        return self

    def args(self: _Self, args: Iterable[ArgLike]) -> _Self:
        """Append several arguments in order."""
        if isinstance(args, (str, bytes)):
            raise TypeError("args expects an iterable of arguments, not a single string")
        for item in args:
            self.arg(item)
        return self

    def get_args(self) -> tuple[str, ...]:
        """The arguments added so far."""
        return tuple(self._args)

    def _option(self: _Self, flag: str, value: str) -> _Self:
        self._args.append(flag)
        self._args.append(value)
        return self

    # Generic options

    def hide_banner(self: _Self) -> _Self:
        """``-hide_banner``: suppress the copyright notice and build information."""
        return self.arg("-hide_banner")

    # Main options

    def format(self: _Self, format_name: str) -> _Self:
        """``-f``: force the input or output file format."""
        return self._option("-f", format_name)

    def input(self: _Self, path_or_url: ArgLike) -> _Self:
        """``-i``: an input file path or URL; ``-`` or ``pipe:0`` reads stdin."""
        return self._option("-i", os.fsdecode(path_or_url))

    def output(self: _Self, path_or_url: ArgLike) -> _Self:
        """An output file path or URL; ``-`` or ``pipe:1`` writes to stdout."""
        return self.arg(path_or_url)

    def overwrite(self: _Self) -> _Self:
        """``-y``: overwrite output files without asking."""
        return self.arg("-y")

    def no_overwrite(self: _Self) -> _Self:
        """``-n``: never overwrite; exit if an output file already exists."""
        return self.arg("-n")

    def codec_video(self: _Self, codec: str) -> _Self:
        """``-c:v``: encoder or decoder for video streams, or ``copy``."""
        return self._option("-c:v", codec)

    def codec_audio(self: _Self, codec: str) -> _Self:
        """``-c:a``: encoder or decoder for audio streams, or ``copy``."""
        return self._option("-c:a", codec)

    def codec_subtitle(self: _Self, codec: str) -> _Self:
        """``-c:s``: encoder or decoder for subtitle streams, or ``copy``."""
        return self._option("-c:s", codec)

    def duration(self: _Self, duration: str) -> _Self:
        """``-t``: limit the duration read from an input or written to an output."""
        return self._option("-t", str(duration))

    def to(self: _Self, position: str) -> _Self:
        """``-to``: stop reading or writing at a position."""
        return self._option("-to", str(position))

    def limit_file_size(self: _Self, size_in_bytes: int) -> _Self:
        """``-fs``: stop writing once the output exceeds this many bytes."""
        return self._option("-fs", _format_u32(size_in_bytes, "size_in_bytes"))

    def seek(self: _Self, position: str) -> _Self:
        """``-ss``: seek an input, or discard output until a position."""
        return self._option("-ss", str(position))

    def seek_eof(self: _Self, position: str) -> _Self:
        """``-sseof``: like ``-ss`` but relative to the end of the file."""
        return self._option("-sseof", str(position))

    def filter(self: _Self, filtergraph: str) -> _Self:
        """``-filter``: a simple filtergraph with one input and one output."""
        return self._option("-filter", filtergraph)

    # Video options

    def crf(self: _Self, crf: int) -> _Self:
        """``-crf:v``: constant rate factor for quality-based encoding."""
        return self._option("-crf:v", _format_u32(crf, "crf"))

    def frames(self: _Self, framecount: int) -> _Self:
        """``-frames:v``: stop after this many video frames."""
        return self._option("-frames:v", _format_u32(framecount, "framecount"))

    def preset(self: _Self, preset: str) -> _Self:
        """``-preset:v``: encoder speed against compression trade-off."""
        return self._option("-preset:v", preset)

    def rate(self: _Self, fps: float) -> _Self:
        """``-r``: frame rate in Hz."""
        return self._option("-r", _format_f32(fps))

    def size(self: _Self, width: int, height: int) -> _Self:
        """``-s``: frame size as ``WIDTHxHEIGHT``."""
        width_text = _format_u32(width, "width")
        height_text = _format_u32(height, "height")
        return self._option("-s", f"{width_text}x{height_text}")

    def no_video(self: _Self) -> _Self:
        """``-vn``: block or disable video streams."""
        return self.arg("-vn")

    # Advanced video options

    def pix_fmt(self: _Self, pix_fmt: str) -> _Self:
        """``-pix_fmt``: the pixel format."""
        return self._option("-pix_fmt", pix_fmt)

    def hwaccel(self: _Self, hwaccel: str) -> _Self:
        """``-hwaccel``: hardware acceleration method for decoding."""
        return self._option("-hwaccel", hwaccel)

    # Audio options

    def no_audio(self: _Self) -> _Self:
        """``-an``: block or disable audio streams."""
        return self.arg("-an")

    # Advanced options

    def map(self: _Self, map_string: str) -> _Self:
        """``-map``: select input streams or filtergraph outputs for an output."""
        return self._option("-map", map_string)

    def readrate(self: _Self, speed: float) -> _Self:
        """``-readrate``: limit input read speed; ``1`` is real time."""
        return self._option("-readrate", _format_f32(speed))

    def realtime(self: _Self) -> _Self:
        """``-re``: read input at its native frame rate."""
        return self.arg("-re")

    def fps_mode(self: _Self, parameter: str) -> _Self:
        """``-fps_mode``: video sync method."""
        return self._option("-fps_mode", parameter)

    def bitstream_filter_video(self: _Self, bitstream_filters: str) -> _Self:
        """``-bsf:v``: comma-separated bitstream filters for video streams."""
        return self._option("-bsf:v", bitstream_filters)

    def filter_complex(self: _Self, filtergraph: str) -> _Self:
        """``-filter_complex``: a filtergraph with any number of inputs and outputs."""
        return self._option("-filter_complex", filtergraph)

    # Presets

    def testsrc(self: _Self) -> _Self:
        """A ten-second procedural test video (320x240 at 25 fps)."""
        return self.args(["-f", "lavfi", "-i", "testsrc=duration=10"])

    def rawvideo(self: _Self) -> _Self:
        """Raw RGB24 frames on stdout."""
        return self.args(["-f", "rawvideo", "-pix_fmt", "rgb24", "-"])