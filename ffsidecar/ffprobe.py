"""Locating and running the FFprobe binary."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Union

from .paths import sidecar_dir

_CREATE_NO_WINDOW = 0x08000000


def _creation_flags() -> int:
    return _CREATE_NO_WINDOW if os.name == "nt" else 0


def ffprobe_sidecar_path() -> Path:
    """The expected path of an FFprobe binary next to the running executable."""
    path = sidecar_dir() / "ffprobe"
    if os.name == "nt":
        path = path.with_suffix(".exe")
    return path


def ffprobe_path() -> Path:
    """The sidecar FFprobe if it exists, otherwise ``ffprobe`` from the system path.

    Not every FFmpeg distribution includes FFprobe.
    """
    default = Path("ffprobe")
    try:
        path = ffprobe_sidecar_path()
    except OSError:
        return default
    return path if path.exists() else default


def ffprobe_version_with_path(path: Union[str, os.PathLike]) -> str:
    """Run ``<path> -version`` and return its standard output.

    The output is returned whole; the exit status is not checked.
    """
    result = subprocess.run(
        [os.fspath(path), "-version"],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        creationflags=_creation_flags(),
        check=False,
    )
    return result.stdout.decode("utf-8")


def ffprobe_version() -> str:
    """Run ``ffprobe -version`` on the default binary and return its output."""
    return ffprobe_version_with_path(ffprobe_path())


def ffprobe_is_installed() -> bool:
    """True if the default FFprobe binary runs and exits successfully."""
    try:
        result = subprocess.run(
            [os.fspath(ffprobe_path()), "-version"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            creationflags=_creation_flags(),
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0