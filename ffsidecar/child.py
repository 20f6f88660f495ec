"""A running FFmpeg process with piped stdin, stdout and stderr."""

from __future__ import annotations

import subprocess
from typing import IO, Optional

_DRAIN_SIZE = 65_536


class FfmpegChild:
    """Wraps a spawned FFmpeg process and its three pipes."""

    def __init__(self, process: subprocess.Popen) -> None:
        if process.stdin is None:
            raise ValueError("stdin was not piped")
        if process.stdout is None:
            raise ValueError("stdout was not piped")
        if process.stderr is None:
            raise ValueError("stderr was not piped")
        self.process = process
        self._stdin: Optional[IO[bytes]] = process.stdin
        self._stdout: Optional[IO[bytes]] = process.stdout
        self._stderr: Optional[IO[bytes]] = process.stderr

    def take_stdout(self) -> Optional[IO[bytes]]:
        """Hand over the stdout pipe; later calls return None."""
        stdout, self._stdout = self._stdout, None
        return stdout

    def take_stderr(self) -> Optional[IO[bytes]]:
        """Hand over the stderr pipe; later calls return None."""
        stderr, self._stderr = self._stderr, None
        return stderr

    def take_stdin(self) -> Optional[IO[bytes]]:
        """Hand over the stdin pipe; commands can no longer be sent afterwards."""
        stdin, self._stdin = self._stdin, None
        return stdin

    def send_stdin_command(self, command: bytes) -> None:
        """Write an interactive command to FFmpeg's stdin.

        Only delivery is checked, not whether FFmpeg understood it. If the
        write fails, the stdin pipe is given up.
        """
        stdin = self.take_stdin()
        if stdin is None:
            raise RuntimeError("Missing child stdin")
        stdin.write(command)
        stdin.flush()
        self._stdin = stdin

    def quit(self) -> None:
        """Ask FFmpeg to stop gracefully by sending ``q``."""
        self.send_stdin_command(b"q")

    def kill(self) -> None:
        """Forcibly terminate the process."""
        self.process.kill()

    def wait(self) -> int:
        """Wait for the process to exit and return its exit code.

        Stderr is read to the end first if nobody has taken it, so that a
        full pipe cannot block the process.
        """
        stderr = self.take_stderr()
        if stderr is not None:
            while stderr.read(_DRAIN_SIZE):
                pass
            stderr.close()
        return self.process.wait()

    def __enter__(self) -> FfmpegChild:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and self.process.poll() is None:
            self.kill()
        for pipe in (self.take_stdin(), self.take_stdout()):
            if pipe is not None:
                try:
                    pipe.close()
                except OSError:
                    pass
        self.wait()
        return False