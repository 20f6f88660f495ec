"""Downloading and unpacking FFmpeg release builds."""

from __future__ import annotations

import os
import platform
import shutil
import sys
import tarfile
import urllib.error
import urllib.request
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from .command import ffmpeg_is_installed
from .paths import sidecar_dir

UNPACK_DIRNAME = "ffmpeg_release_temp"
"""Name of the temporary directory an archive is unpacked into."""

_CHUNK_SIZE = 65_536

_MANIFEST_URLS = {
    "windows": "https://www.gyan.dev/ffmpeg/builds/release-version",
    "macos": "https://evermeet.cx/ffmpeg/info/ffmpeg/release",
    "linux": "https://johnvansickle.com/ffmpeg/release-readme.txt",
}

_DOWNLOAD_URLS = {
    ("windows", "x86_64"): "https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip",
    ("windows", "aarch64"): "https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip",
    ("linux", "x86_64"): "https://johnvansickle.com/ffmpeg/releases/ffmpeg-release-amd64-static.tar.xz",
    ("linux", "aarch64"): "https://johnvansickle.com/ffmpeg/releases/ffmpeg-release-arm64-static.tar.xz",
    ("macos", "x86_64"): "https://evermeet.cx/ffmpeg/getrelease/zip",
    ("macos", "aarch64"): "https://www.osxexperts.net/ffmpeg80arm.zip",
}

PathLike = Union[str, "os.PathLike[str]"]


class DownloadStage(Enum):
    """The stage an automatic download has reached."""

    STARTING = "starting"
    DOWNLOADING = "downloading"
    UNPACKING_ARCHIVE = "unpacking_archive"
    DONE = "done"


@dataclass(frozen=True)
class FfmpegDownloadProgressEvent:
    """Progress of a download; byte counts are set only while downloading."""

    stage: DownloadStage
    total_bytes: int = 0
    downloaded_bytes: int = 0


ProgressCallback = Callable[[FfmpegDownloadProgressEvent], None]


def _target_os() -> Optional[str]:
    if sys.platform == "win32":
        return "windows"
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("linux"):
        return "linux"
    return None


def _target_arch() -> str:
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return "x86_64"
    if machine in ("aarch64", "arm64"):
        return "aarch64"
    return machine


def ffmpeg_manifest_url() -> str:
    """URL of a manifest naming the latest FFmpeg release for this platform."""
    if _target_arch() != "x86_64":
        raise RuntimeError("Downloads must be manually provided for non-x86_64 architectures")
    url = _MANIFEST_URLS.get(_target_os() or "")
    if url is None:
        raise RuntimeError("Unsupported platform")
    return url


def ffmpeg_download_url() -> str:
    """URL of the latest FFmpeg release archive for this platform."""
    url = _DOWNLOAD_URLS.get((_target_os() or "", _target_arch()))
    if url is None:
        raise RuntimeError(
            "Unsupported platform; you can provide your own URL instead "
            "and call download_ffmpeg_package directly."
        )
    return url


def parse_macos_version(version: str) -> Optional[str]:
    """Read the version number from the macOS JSON manifest."""
    sections = version.split('"version":')
    if len(sections) < 2:
        return None
    quoted = sections[1].strip().split('"')
    return quoted[1] if len(quoted) > 1 else None


def parse_linux_version(version: str) -> Optional[str]:
    """Read the version number from the Linux release readme."""
    sections = version.split("version:")
    if len(sections) < 2:
        return None
    words = sections[1].split()
    return words[0] if words else None


def _fetch(url: str, message: str):
    try:
        return urllib.request.urlopen(url)
    except (urllib.error.URLError, ValueError) as exc:
        raise RuntimeError(message) from exc


def check_latest_version() -> str:
    """Ask the release site for the latest version available for this platform."""
    os_name = _target_os()
    if os_name == "macos" and _target_arch() == "aarch64":
        # No manifest for this build; matches the version of the download URL.
        return "7.0"

    manifest_url = ffmpeg_manifest_url()
    with _fetch(manifest_url, "Failed to GET the latest ffmpeg version") as response:
        try:
            text = response.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RuntimeError("Failed to read response text") from exc

    if os_name == "windows":
        return text
    if os_name == "macos":
        parsed = parse_macos_version(text)
        if parsed is None:
            raise RuntimeError("failed to parse version number (macos variant)")
        return parsed
    if os_name == "linux":
        parsed = parse_linux_version(text)
        if parsed is None:
            raise RuntimeError("failed to parse version number (linux variant)")
        return parsed
    raise RuntimeError("Unsupported platform")


def _archive_path(url: str, download_dir: PathLike) -> Path:
    filename = PurePosixPath(url).name
    if not filename or filename == "..":
        raise ValueError("Failed to get filename")
    return Path(download_dir) / filename


def download_ffmpeg_package(url: str, download_dir: PathLike) -> Path:
    """Download an archive into ``download_dir`` and return its path."""
    archive_path = _archive_path(url, download_dir)
    with _fetch(url, "Failed to download ffmpeg") as response:
        with open(archive_path, "wb") as file:
            shutil.copyfileobj(response, file)
    return archive_path


def download_ffmpeg_package_with_progress(
    url: str, download_dir: PathLike, progress_callback: ProgressCallback
) -> Path:
    """Like :func:`download_ffmpeg_package`, reporting progress after every read.

    The total is taken from ``Content-Length`` and is 0 if it is missing.
    """
    archive_path = _archive_path(url, download_dir)
    with _fetch(url, "Failed to download ffmpeg") as response:
        try:
            total = int(response.headers.get("Content-Length") or 0)
        except ValueError:
            total = 0
        downloaded = 0
        with open(archive_path, "wb") as file:
            while True:
                chunk = response.read(_CHUNK_SIZE)
                downloaded += len(chunk)
                progress_callback(
                    FfmpegDownloadProgressEvent(
                        DownloadStage.DOWNLOADING,
                        total_bytes=total,
                        downloaded_bytes=downloaded,
                    )
                )
                if not chunk:
                    break
                file.write(chunk)
    return archive_path


def _extract_tar_xz(archive: Path, destination: Path) -> None:
    try:
        with tarfile.open(archive, "r:xz") as tar:
            if hasattr(tarfile, "data_filter"):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except tarfile.TarError as exc:
        raise RuntimeError("Failed to unpack ffmpeg") from exc


def _extract_zip(archive: Path, destination: Path) -> None:
    try:
        zip_file = zipfile.ZipFile(archive)
    except zipfile.BadZipFile as exc:
        raise RuntimeError("Failed to read ZIP archive") from exc
    with zip_file:
        try:
            for info in zip_file.infolist():
                extracted = zip_file.extract(info, destination)
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    os.chmod(extracted, mode)
        except zipfile.BadZipFile as exc:
            raise RuntimeError("Failed to unpack ffmpeg") from exc


def _first_entry(folder: Path) -> Path:
    entries = sorted(folder.iterdir())
    if not entries:
        raise RuntimeError("Failed to get inner folder")
    return entries[0]


def unpack_ffmpeg(from_archive: PathLike, binary_folder: PathLike) -> None:
    """Unpack an archive, move its binaries into ``binary_folder`` and clean up.

    ``ffmpeg`` must be present; ``ffprobe`` and ``ffplay`` are moved if found.
    The temporary folder and the archive are deleted afterwards.
    """
    archive = Path(from_archive)
    binaries = Path(binary_folder)
    temp_folder = binaries / UNPACK_DIRNAME
    temp_folder.mkdir(parents=True, exist_ok=True)

    os_name = _target_os()
    if os_name == "linux":
        _extract_tar_xz(archive, temp_folder)
    else:
        _extract_zip(archive, temp_folder)

    if os_name == "windows":
        bin_dir = _first_entry(temp_folder) / "bin"
        ffmpeg, ffplay, ffprobe = (
            bin_dir / "ffmpeg.exe",
            bin_dir / "ffplay.exe",
            bin_dir / "ffprobe.exe",
        )
    elif os_name == "linux":
        inner = _first_entry(temp_folder)
        ffmpeg, ffplay, ffprobe = inner / "ffmpeg", inner / "ffplay", inner / "ffprobe"
    elif os_name == "macos":
        ffmpeg, ffplay, ffprobe = (
            temp_folder / "ffmpeg",
            temp_folder / "ffplay",
            temp_folder / "ffprobe",
        )
    else:
        raise RuntimeError("Unsupported platform")

    def move_bin(path: Path) -> None:
        if not path.name:
            raise ValueError(f"Path {path} does not have a file_name")
        os.replace(path, binaries / path.name)

    move_bin(ffmpeg)
    if ffprobe.exists():
        move_bin(ffprobe)
    if ffplay.exists():
        move_bin(ffplay)

    if temp_folder.is_dir():
        shutil.rmtree(temp_folder)
    if archive.exists():
        archive.unlink()


def auto_download() -> None:
    """Download and unpack FFmpeg next to the executable unless it is installed."""
    if ffmpeg_is_installed():
        return
    download_url = ffmpeg_download_url()
    destination = sidecar_dir()
    archive_path = download_ffmpeg_package(download_url, destination)
    unpack_ffmpeg(archive_path, destination)
    if not ffmpeg_is_installed():
        raise RuntimeError("FFmpeg failed to install, please install manually.")


def auto_download_with_progress(progress_callback: ProgressCallback) -> None:
    """Like :func:`auto_download`, reporting each stage to ``progress_callback``."""
    if ffmpeg_is_installed():
        return
    progress_callback(FfmpegDownloadProgressEvent(DownloadStage.STARTING))
    download_url = ffmpeg_download_url()
    destination = sidecar_dir()
    archive_path = download_ffmpeg_package_with_progress(
        download_url, destination, progress_callback
    )
    progress_callback(FfmpegDownloadProgressEvent(DownloadStage.UNPACKING_ARCHIVE))
    unpack_ffmpeg(archive_path, destination)
    progress_callback(FfmpegDownloadProgressEvent(DownloadStage.DONE))
    if not ffmpeg_is_installed():
        raise RuntimeError("FFmpeg failed to install, please install manually.")