import io
import math

from ffsidecar.events import (
    AudioStream,
    Done,
    ErrorEvent,
    FfmpegConfiguration,
    FfmpegOutput,
    FfmpegProgress,
    FfmpegVersion,
    Log,
    LogEOF,
    LogLevel,
    OutputChunk,
    OutputFrame,
    OutputVideoFrame,
    ParsedConfiguration,
    ParsedOutput,
    ParsedStreamMapping,
    ParsedVersion,
    Progress,
    Stream,
    VideoStream,
)
from ffsidecar.frames import (
    filter_chunks,
    filter_errors,
    filter_frames,
    filter_progress,
    stderr_lines,
    stdout_events,
)


def _video(parent, fmt="rawvideo", pix_fmt="rgb24", width=2, height=2, fps=10.0):
    return Stream(
        format=fmt,
        language="",
        parent_index=parent,
        stream_index=0,
        raw_log_message="stream",
        type_specific_data=VideoStream(pix_fmt, width, height, fps),
    )


def _audio(parent):
    return Stream(
        format="pcm_s16le",
        language="",
        parent_index=parent,
        stream_index=0,
        raw_log_message="stream",
        type_specific_data=AudioStream(44100, "mono"),
    )


def _out(to, index=0):
    return FfmpegOutput(to=to, index=index, raw_log_message="output")


PIXELS = bytes([255, 0, 0, 0, 255, 0, 0, 0, 255, 255, 255, 255])


def test_rawvideo_frames_are_split_exactly():
    stdout = io.BytesIO(PIXELS * 3 + b"\x01\x02")
    events = list(stdout_events(stdout, [_video(0)], [_out("pipe:1")]))
    frames = [e.frame for e in events if isinstance(e, OutputFrame)]
    assert len(frames) == 3
    assert [f.data for f in frames] == [PIXELS] * 3
    assert [f.frame_num for f in frames] == [0, 1, 2]
    assert all(f.output_index == 0 for f in frames)
    assert all((f.width, f.height, f.pix_fmt) == (2, 2, "rgb24") for f in frames)
    assert isinstance(events[-1], Done)


def test_frame_timestamps_follow_fps():
    stdout = io.BytesIO(PIXELS * 4)
    frames = list(filter_frames(stdout_events(stdout, [_video(0)], [_out("pipe")])))
    assert frames[0].timestamp == 0.0
    for prev, cur in zip(frames, frames[1:]):
        assert math.isclose(cur.timestamp - prev.timestamp, 0.1, abs_tol=1e-9)


def test_no_stdout_streams_reports_error_only():
    stdout = io.BytesIO(PIXELS)
    events = list(stdout_events(stdout, [_video(0)], [_out("out.mp4")]))
    assert events == [ErrorEvent("No streams found")]


def test_encoded_video_is_chunked():
    payload = bytes(range(256)) * 10
    events = list(stdout_events(io.BytesIO(payload), [_video(0, fmt="h264")], [_out("pipe:")]))
    assert isinstance(events[-1], Done)
    assert not any(isinstance(e, OutputFrame) for e in events)
    assert b"".join(filter_chunks(events)) == payload


def test_audio_only_is_chunked():
    payload = b"\x00\x01" * 1000
    events = list(stdout_events(io.BytesIO(payload), [_audio(0)], [_out("pipe:1")]))
    assert b"".join(filter_chunks(events)) == payload
    assert isinstance(events[-1], Done)


def test_non_byte_aligned_frame_size_falls_back_to_chunks():
    stream = _video(0, pix_fmt="yuv420p", width=3, height=1)
    payload = b"abcdefgh"
    events = list(stdout_events(io.BytesIO(payload), [stream], [_out("pipe:1")]))
    assert list(filter_chunks(events)) == [payload]
    assert list(filter_frames(events)) == []


def test_mismatched_framerates_report_error_and_chunk():
    streams = [_video(0, fps=25.0), _video(1, fps=30.0)]
    outputs = [_out("pipe:1", 0), _out("pipe:1", 1)]
    payload = PIXELS * 2
    events = list(stdout_events(io.BytesIO(payload), streams, outputs))
    assert isinstance(events[0], ErrorEvent)
    assert events[0].message.startswith("Multiple output streams with different framerates")
    assert b"".join(filter_chunks(events)) == payload
    assert isinstance(events[-1], Done)


def test_interleaved_outputs_with_same_framerate():
    streams = [_video(0), _video(1)]
    outputs = [_out("pipe:1", 0), _out("pipe:1", 1)]
    events = stdout_events(io.BytesIO(PIXELS * 4), streams, outputs)
    frames = list(filter_frames(events))
    assert [f.output_index for f in frames] == [0, 1, 0, 1]
    assert [f.frame_num for f in frames] == [0, 0, 1, 1]


def test_empty_stdout_yields_only_done():
    events = list(stdout_events(io.BytesIO(b""), [_video(0)], [_out("pipe:1")]))
    assert events == [Done()]


def _progress():
    return FfmpegProgress(
        frame=5, fps=1.0, q=0.0, size_kb=10, time="00:00:05.00",
        bitrate_kbps=1.0, speed=1.0, raw_log_message="frame=5",
    )


def _sample_events():
    frame = OutputVideoFrame(2, 2, "rgb24", 0, PIXELS, 0, 0.0)
    return [
        ParsedVersion(FfmpegVersion("6.0", "ffmpeg version 6.0")),
        ParsedConfiguration(FfmpegConfiguration(["--enable-gpl"], "configuration: --enable-gpl")),
        ParsedStreamMapping("Stream #0:0 -> #0:0"),
        ParsedOutput(_out("pipe:1")),
        Log(LogLevel.INFO, "info line"),
        Log(LogLevel.ERROR, "error line"),
        ErrorEvent("broken"),
        Progress(_progress()),
        OutputFrame(frame),
        OutputChunk(b"chunk"),
        LogEOF(),
        Done(),
    ]


def test_filter_errors():
    assert list(filter_errors(_sample_events())) == ["error line", "broken"]


def test_filter_progress():
    assert list(filter_progress(_sample_events())) == [_progress()]


def test_filter_frames_and_chunks():
    events = _sample_events()
    assert [f.data for f in filter_frames(events)] == [PIXELS]
    assert list(filter_chunks(events)) == [b"chunk"]


def test_stderr_lines():
    assert list(stderr_lines(_sample_events())) == [
        "ffmpeg version 6.0",
        "configuration: --enable-gpl",
        "Stream #0:0 -> #0:0",
        "output",
        "info line",
        "error line",
        "frame=5",
    ]