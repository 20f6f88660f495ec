# ffsidecar

Build FFmpeg command lines, run a standalone `ffmpeg` binary as a child
process with all three standard streams piped, and turn what it writes to
stdout into whole video frames or raw byte chunks.

## Installation

```console
pip install ffsidecar
```

The package needs an `ffmpeg` executable and has no other dependencies.
`ffsidecar.paths.ffmpeg_path()` returns the binary it uses. This is `ffmpeg`
in the directory of the running Python interpreter
(`ffsidecar.paths.sidecar_path()`, with `.exe` on Windows) if that file
exists, and otherwise plain `ffmpeg` from `PATH`.
`ffsidecar.command.ffmpeg_is_installed()` reports whether that binary runs
`-version` successfully.

## Building commands

`FfmpegCommand` is an argument list with chainable aliases for common
options. Each method appends arguments and returns the command itself.

```python
from ffsidecar.command import FfmpegCommand

command = (
    FfmpegCommand()           # or FfmpegCommand("/path/to/ffmpeg")
    .hide_banner()            # -hide_banner
    .testsrc()                # -f lavfi -i testsrc=duration=10
    .rawvideo()               # -f rawvideo -pix_fmt rgb24 -
)
print(command.get_args())
print(command.command_line())
```

The option aliases are defined on `ffsidecar.options.ArgumentBuilder`:

- Plain arguments: `arg`, `args`.
- Inputs and outputs: `format`, `input`, `output`, `overwrite` (`-y`) and
  `no_overwrite` (`-n`).
- Codecs: `codec_video`, `codec_audio`, `codec_subtitle`.
- Timing and seeking: `duration`, `to`, `seek`, `seek_eof`.
- Size limit: `limit_file_size`.
- Filters: `filter`, `filter_complex`, `bitstream_filter_video`.
- Video: `crf`, `frames`, `preset`, `rate`, `size`, `no_video`, `pix_fmt`,
  `hwaccel`.
- Audio: `no_audio`.
- Stream mapping and reading: `map`, `readrate`, `realtime`, `fps_mode`.
- Presets: `testsrc`, `rawvideo`.

Integer options (`limit_file_size`, `crf`, `frames`, `size`) accept values
from 0 to 2³²−1. Other values raise `ValueError`, and values that are not
ints raise `TypeError`. `rate` and `readrate` write their value at
single-precision.

Every new `FfmpegCommand` starts with `-loglevel level+info`, so each log line
FFmpeg writes carries its level in square brackets. `pipe_stdout()` appends
`-` to send the output to stdout. `print_command()` prints `command_line()`,
which is the command with each `-` option on a new continued line.

## Running FFmpeg

`spawn()` starts the process and returns an `ffsidecar.child.FfmpegChild`.
Before it starts the process, it appends `-n` unless `-y`, `-n` or
`-nostdin` is already present. This stops FFmpeg from waiting forever at an
overwrite prompt.

`FfmpegChild` wraps the `subprocess.Popen` object, which is available as
`child.process`:

- `quit()` sends `q` on stdin to ask FFmpeg to stop gracefully.
- `send_stdin_command(command)` writes any other interactive command, given
  as `bytes`.
- `kill()` terminates the process.
- `wait()` reads stderr to the end if nobody has taken it, then returns the
  exit code.
- `take_stdin()`, `take_stdout()` and `take_stderr()` hand a pipe over to
  your code. Each returns `None` once the pipe has been taken.

Used as a context manager, `FfmpegChild` does the following on exit:

1. It kills the process if an exception is propagating.
2. It closes stdin and stdout if they have not been taken.
3. It waits for the process.

## Reading frames from stdout

`ffsidecar.frames.stdout_events(stdout, output_streams, outputs)` reads
FFmpeg's stdout and yields events from `ffsidecar.events`, then `Done`. You
describe what FFmpeg writes there with `Stream` and `FfmpegOutput` values:

- An output counts as stdout when its `to` is `pipe`, `pipe:` or `pipe:1`.
- Streams on stdout arrive as whole `OutputFrame` events when all of these
  hold:
  - every stream is `rawvideo`;
  - every pixel format is known to `ffsidecar.pix_fmt`;
  - every frame size is a whole number of bytes;
  - all streams share one framerate.
- Otherwise the data arrives as `OutputChunk` events of up to 64 KiB.
- A framerate mismatch is reported first as an `ErrorEvent`.

```python
import threading

from ffsidecar.command import FfmpegCommand
from ffsidecar.events import FfmpegOutput, Stream, VideoStream
from ffsidecar.frames import filter_frames, stdout_events

outputs = [FfmpegOutput(to="pipe:1", index=0, raw_log_message="")]
streams = [
    Stream(
        format="rawvideo",
        language="",
        parent_index=0,
        stream_index=0,
        raw_log_message="",
        type_specific_data=VideoStream(pix_fmt="rgb24", width=320, height=240, fps=25.0),
    )
]

with FfmpegCommand().testsrc().rawvideo().spawn() as child:
    stderr = child.take_stderr()
    # Keep stderr drained so FFmpeg never blocks on a full pipe.
    threading.Thread(target=stderr.read, daemon=True).start()
    for frame in filter_frames(stdout_events(child.take_stdout(), streams, outputs)):
        print(frame.frame_num, frame.timestamp, len(frame.data))
```

`ffsidecar.frames` also has filters that pick one kind of event out of any
iterable of events:

- `filter_errors` yields messages from `ErrorEvent` and from error-level
  `Log` events.
- `filter_progress`, `filter_frames` and `filter_chunks` yield the progress,
  frames and chunks.
- `stderr_lines` yields the raw log text carried by log and parsed events.

`ffsidecar.metadata.FfmpegMetadata` collects inputs, outputs and streams from
`Parsed…` events passed to `handle_event()`. `is_completed()` becomes true
once there are as many output streams as stream mappings.

## Other utilities

- `ffsidecar.time_duration.FfmpegTimeDuration` holds a duration in
  microseconds.
  - `from_str()` parses `HH:MM:SS.mmm`, plain seconds, `400ms` or `3000us`,
    and returns `None` on bad input. `parse()` raises
    `ParseFfmpegTimeStrError` instead.
  - `str()` gives `HH:MM:SS.mmm`, and `format(d, "#")` gives the `…us` form.
  - Durations can be added and subtracted. Numbers added to them count as
    seconds.
- `ffsidecar.pix_fmt.get_bits_per_pixel()` and `get_bytes_per_frame()` give
  pixel and frame sizes.
- `ffsidecar.comma_iter.iter_comma_separated()` splits a string on commas
  outside parentheses.
- `ffsidecar.read_until.read_until_any()` reads a binary stream up to any of
  several delimiter bytes.
- `ffsidecar.ffprobe` locates `ffprobe` the same way as `ffmpeg`. It has
  `ffprobe_is_installed()`, and `ffprobe_version()` returns the raw output of
  `ffprobe -version`.
- `ffsidecar.download` fetches release builds. Supported targets are Windows,
  Linux and macOS on x86_64 or aarch64.
  - `auto_download()` downloads and unpacks FFmpeg into `sidecar_dir()` when
    it is not already installed. `auto_download_with_progress(callback)` also
    reports `FfmpegDownloadProgressEvent` values.
  - Lower-level steps are `ffmpeg_download_url()`,
    `download_ffmpeg_package()`, `unpack_ffmpeg()` and
    `check_latest_version()`.

## What this package does not do

- It does not parse FFmpeg's stderr log into events. It has no single
  iterator over everything a running process reports. Log, progress and
  `Parsed…` events, and the streams and outputs that `stdout_events` needs,
  must be built by your own code.
- It does not read the version number out of `ffmpeg -version`.
- It does not create named pipes or FIFOs for FFmpeg outputs.