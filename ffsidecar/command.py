"""Building and spawning FFmpeg commands."""

from __future__ import annotations

import os
import subprocess
from typing import Optional, Union

from .child import FfmpegChild
from .options import ArgumentBuilder
from .paths import ffmpeg_path

_CREATE_NO_WINDOW = 0x08000000

# Arguments that already settle how FFmpeg treats existing output files.
_OVERWRITE_ARGS = frozenset({"-y", "-n", "-nostdin"})


def _creation_flags() -> int:
    """Keep a console window from opening for the child process on Windows."""
    return _CREATE_NO_WINDOW if os.name == "nt" else 0


class FfmpegCommand(ArgumentBuilder):
    """An FFmpeg invocation: the program path plus an argument list.

    A new command starts with ``-loglevel level+info`` so that every log line
    carries its level in square brackets.
    """

    def __init__(self, path: Optional[Union[str, "os.PathLike[str]"]] = None) -> None:
        super().__init__()
        self.program = os.fsdecode(ffmpeg_path() if path is None else path)
        self.args(["-loglevel", "level+info"])

    def pipe_stdout(self) -> FfmpegCommand:
        """Send the output to stdout (``-``)."""
        return self.arg("-")

    def command_line(self) -> str:
        """The command as text that can be pasted into a shell.

        Every argument starting with ``-`` begins a new continued line.
        """
        parts = [f"\\\n  {arg}" if arg.startswith("-") else arg for arg in self.get_args()]
        return f"{self.program} {' '.join(parts)}"

    def print_command(self) -> FfmpegCommand:
        """Print :meth:`command_line` to stdout."""
        print(self.command_line())
        return self

    def _prevent_overwrite_prompt(self) -> None:
        # An interactive overwrite prompt would never be answered and would
        # look like a hang, so refuse to overwrite unless told otherwise.
        if not _OVERWRITE_ARGS.intersection(self.get_args()):
            self.no_overwrite()

    def spawn(self) -> FfmpegChild:
        """Start FFmpeg with all three standard streams piped.

        Appends ``-n`` first unless ``-y``, ``-n`` or ``-nostdin`` is present.
        Call :meth:`FfmpegChild.wait` on the result to reap the process.
        """
        self._prevent_overwrite_prompt()
        process = subprocess.Popen(
            [self.program, *self.get_args()],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            creationflags=_creation_flags(),
        )
        return FfmpegChild(process)

    def __repr__(self) -> str:
        return " ".join(repr(part) for part in (self.program, *self.get_args()))


def ffmpeg_is_installed() -> bool:
    """True if the default FFmpeg binary runs ``-version`` successfully."""
    try:
        result = subprocess.run(
            [os.fspath(ffmpeg_path()), "-version"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            creationflags=_creation_flags(),
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0