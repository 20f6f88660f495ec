"""Events emitted while an FFmpeg process runs, and the data they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class LogLevel(Enum):
    """The log level FFmpeg attaches to each message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    UNKNOWN = "unknown"


@dataclass
class FfmpegVersion:
    version: str
    raw_log_message: str


@dataclass
class FfmpegConfiguration:
    configuration: list[str]
    raw_log_message: str


@dataclass
class FfmpegInput:
    index: int
    duration: Optional[float]
    raw_log_message: str


@dataclass
class FfmpegDuration:
    input_index: int
    duration: float
    raw_log_message: str


_STDOUT_TARGETS = frozenset({"pipe", "pipe:", "pipe:1"})


@dataclass
class FfmpegOutput:
    to: str
    index: int
    raw_log_message: str

    def is_stdout(self) -> bool:
        """True if this output is written to stdout."""
        return self.to in _STDOUT_TARGETS


@dataclass
class AudioStream:
    """Metadata found only on audio streams."""

    sample_rate: int
    channels: str


@dataclass
class VideoStream:
    """Metadata found only on video streams."""

    pix_fmt: str
    width: int
    height: int
    fps: float


@dataclass
class SubtitleStream:
    """Marker for subtitle streams."""


@dataclass
class OtherStream:
    """Marker for streams of any other kind."""


StreamTypeSpecificData = Union[AudioStream, VideoStream, SubtitleStream, OtherStream]


@dataclass
class Stream:
    """Metadata about one input or output stream."""

    format: str
    language: str
    parent_index: int
    stream_index: int
    raw_log_message: str
    type_specific_data: StreamTypeSpecificData

    def is_audio(self) -> bool:
        return isinstance(self.type_specific_data, AudioStream)

    def is_subtitle(self) -> bool:
        return isinstance(self.type_specific_data, SubtitleStream)

    def is_video(self) -> bool:
        return isinstance(self.type_specific_data, VideoStream)

    def is_other(self) -> bool:
        return isinstance(self.type_specific_data, OtherStream)

    def audio_data(self) -> Optional[AudioStream]:
        data = self.type_specific_data
        return data if isinstance(data, AudioStream) else None

    def video_data(self) -> Optional[VideoStream]:
        data = self.type_specific_data
        return data if isinstance(data, VideoStream) else None


@dataclass
class FfmpegProgress:
    """A progress line: frame index, rates, size and elapsed media time."""

    frame: int
    fps: float
    q: float
    size_kb: int
    time: str
    bitrate_kbps: float
    speed: float
    raw_log_message: str


@dataclass
class OutputVideoFrame:
    """One decoded frame read from stdout; the repr omits the pixel data."""

    width: int
    height: int
    pix_fmt: str
    output_index: int
    data: bytes = field(repr=False)
    frame_num: int = field(repr=False)
    timestamp: float = field(repr=False)


@dataclass
class ParsedVersion:
    version: FfmpegVersion


@dataclass
class ParsedConfiguration:
    configuration: FfmpegConfiguration


@dataclass
class ParsedStreamMapping:
    mapping: str


@dataclass
class ParsedInput:
    input: FfmpegInput


@dataclass
class ParsedOutput:
    output: FfmpegOutput


@dataclass
class ParsedInputStream:
    stream: Stream


@dataclass
class ParsedOutputStream:
    stream: Stream


@dataclass
class ParsedDuration:
    duration: FfmpegDuration


@dataclass
class Log:
    level: LogLevel
    message: str


@dataclass
class LogEOF:
    """The log stream has ended."""


@dataclass
class ErrorEvent:
    """An error that did not come from the FFmpeg logs."""

    message: str


@dataclass
class Progress:
    progress: FfmpegProgress


@dataclass
class OutputFrame:
    frame: OutputVideoFrame


@dataclass
class OutputChunk:
    """Output bytes that need not align with frame boundaries."""

    data: bytes


@dataclass
class Done:
    """All output has been read."""


FfmpegEvent = Union[
    ParsedVersion,
    ParsedConfiguration,
    ParsedStreamMapping,
    ParsedInput,
    ParsedOutput,
    ParsedInputStream,
    ParsedOutputStream,
    ParsedDuration,
    Log,
    LogEOF,
    ErrorEvent,
    Progress,
    OutputFrame,
    OutputChunk,
    Done,
]