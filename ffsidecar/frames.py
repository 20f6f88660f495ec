"""Reading FFmpeg's stdout into events, and filters over event streams."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from typing import BinaryIO, Optional

from .events import (
    Done,
    ErrorEvent,
    FfmpegEvent,
    FfmpegOutput,
    FfmpegProgress,
    Log,
    LogLevel,
    OutputChunk,
    OutputFrame,
    OutputVideoFrame,
    ParsedConfiguration,
    ParsedDuration,
    ParsedInput,
    ParsedInputStream,
    ParsedOutput,
    ParsedOutputStream,
    ParsedStreamMapping,
    ParsedVersion,
    Progress,
    Stream,
)
from .pix_fmt import get_bytes_per_frame

# Read size used when frame boundaries are unknown.
_CHUNK_SIZE = 65_536

_FRAMERATE_MISMATCH = (
    "Multiple output streams with different framerates are not supported "
    "when outputting to stdout. Falling back to chunked mode."
)


def _frame_size(stream: Stream) -> Optional[int]:
    """Bytes per frame of a rawvideo stream, or None if frames cannot be delimited."""
    if stream.format != "rawvideo":
        return None
    video_data = stream.video_data()
    if video_data is None:
        return None
    return get_bytes_per_frame(video_data)


def _read_exact(stdout: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, or fewer only at end of stream."""
    buffer = bytearray()
    while len(buffer) < size:
        data = stdout.read(size - len(buffer))
        if not data:
            break
        buffer += data
    return bytes(buffer)


def _timestamp(frame_num: int, fps: float) -> float:
    if fps == 0:
        return math.nan if frame_num == 0 else math.inf
    return frame_num / fps


def _chunk_events(stdout: BinaryIO) -> Iterator[FfmpegEvent]:
    read = getattr(stdout, "read1", stdout.read)
    while True:
        try:
            data = read(_CHUNK_SIZE)
        except OSError as exc:
            yield ErrorEvent(str(exc))
            return
        if not data:
            return
        yield OutputChunk(bytes(data))


def _frame_events(
    stdout: BinaryIO, video_streams: Sequence[Stream], frame_sizes: Sequence[int]
) -> Iterator[FfmpegEvent]:
    count = len(frame_sizes)
    frame_num = 0
    while True:
        index = frame_num % count
        video_data = video_streams[index].video_data()
        assert video_data is not None
        output_frame_num = frame_num // count
        frame_num += 1
        size = frame_sizes[index]
        try:
            data = _read_exact(stdout, size)
        except OSError as exc:
            yield ErrorEvent(str(exc))
            return
        if len(data) < size:
            return
        yield OutputFrame(
            OutputVideoFrame(
                width=video_data.width,
                height=video_data.height,
                pix_fmt=video_data.pix_fmt,
                output_index=index,
                data=data,
                frame_num=output_frame_num,
                timestamp=_timestamp(output_frame_num, video_data.fps),
            )
        )


def stdout_events(
    stdout: BinaryIO,
    output_streams: Sequence[Stream],
    outputs: Sequence[FfmpegOutput],
) -> Iterator[FfmpegEvent]:
    """Yield output frames or chunks read from FFmpeg's stdout, then ``Done``.

    Whole frames are yielded when every stream on stdout is ``rawvideo`` of a
    known, byte-aligned size and all share one framerate; otherwise the data
    is yielded in chunks of arbitrary size.
    """

    def goes_to_stdout(stream: Stream) -> bool:
        index = stream.parent_index
        return 0 <= index < len(outputs) and outputs[index].is_stdout()

    stdout_streams = [stream for stream in output_streams if goes_to_stdout(stream)]
    if not stdout_streams:
        yield ErrorEvent("No streams found")
        return

    video_streams = [stream for stream in stdout_streams if stream.is_video()]
    chunked = not video_streams

    frame_sizes: list[int] = []
    for stream in video_streams:
        size = _frame_size(stream)
        if size is None:
            chunked = True
            size = 0
        frame_sizes.append(size)

    framerates = []
    for stream in video_streams:
        if stream.format != "rawvideo":
            continue
        video_data = stream.video_data()
        framerates.append(video_data.fps if video_data is not None else -1.0)
    if any(fps != framerates[0] or fps == -1.0 for fps in framerates):
        yield ErrorEvent(_FRAMERATE_MISMATCH)
        chunked = True

    if chunked:
        yield from _chunk_events(stdout)
    else:
        if not frame_sizes:
            yield ErrorEvent("No frame buffers found")
            return
        yield from _frame_events(stdout, video_streams, frame_sizes)

    yield Done()


def filter_errors(events: Iterable[FfmpegEvent]) -> Iterator[str]:
    """Messages of error events and of error-level log lines."""
    for event in events:
        match event:
            case ErrorEvent(message=message):
                yield message
            case Log(level=LogLevel.ERROR, message=message):
                yield message


def filter_progress(events: Iterable[FfmpegEvent]) -> Iterator[FfmpegProgress]:
    """Only the progress updates."""
    for event in events:
        if isinstance(event, Progress):
            yield event.progress


def filter_frames(events: Iterable[FfmpegEvent]) -> Iterator[OutputVideoFrame]:
    """Only the decoded output frames."""
    for event in events:
        if isinstance(event, OutputFrame):
            yield event.frame


def filter_chunks(events: Iterable[FfmpegEvent]) -> Iterator[bytes]:
    """Only the raw output chunks."""
    for event in events:
        if isinstance(event, OutputChunk):
            yield event.data


def stderr_lines(events: Iterable[FfmpegEvent]) -> Iterator[str]:
    """Every line FFmpeg wrote to stderr, as raw text."""
    for event in events:
        match event:
            case ParsedVersion(version=parsed):
                yield parsed.raw_log_message
            case ParsedConfiguration(configuration=parsed):
                yield parsed.raw_log_message
            case ParsedStreamMapping(mapping=mapping):
                yield mapping
            case ParsedOutput(output=parsed):
                yield parsed.raw_log_message
            case ParsedInputStream(stream=stream) | ParsedOutputStream(stream=stream):
                yield stream.raw_log_message
            case Log(message=message):
                yield message
            case Progress(progress=progress):
                yield progress.raw_log_message
            case ParsedInput(input=parsed):
                yield parsed.raw_log_message
            case ParsedDuration(duration=parsed):
                yield parsed.raw_log_message
            case _:
                pass