"""Locating FFmpeg binaries on the system."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def _executable_dir() -> Path:
    executable = sys.executable
    if not executable:
        raise OSError("Can't get parent of current executable")
    return Path(executable).parent


def sidecar_path() -> Path:
    """The expected path of an FFmpeg binary next to the running executable."""
    path = _executable_dir() / "ffmpeg"
    if os.name == "nt":
        path = path.with_suffix(".exe")
    return path


def sidecar_dir() -> Path:
    """The directory downloads and unpacked binaries go to by default."""
    return sidecar_path().parent


def ffmpeg_path() -> Path:
    """The sidecar binary if it exists, otherwise ``ffmpeg`` from the system path."""
    default = Path("ffmpeg")
    try:
        path = sidecar_path()
    except OSError:
        return default
    return path if path.exists() else default