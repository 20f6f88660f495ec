import io
import os
import platform
import sys
import tarfile
import zipfile

import pytest

from ffsidecar.download import (
    UNPACK_DIRNAME,
    DownloadStage,
    FfmpegDownloadProgressEvent,
    check_latest_version,
    download_ffmpeg_package,
    download_ffmpeg_package_with_progress,
    ffmpeg_download_url,
    ffmpeg_manifest_url,
    parse_linux_version,
    parse_macos_version,
    unpack_ffmpeg,
)


def _set_platform(monkeypatch, plat, machine):
    monkeypatch.setattr(sys, "platform", plat)
    monkeypatch.setattr(platform, "machine", lambda: machine)


def _write_zip(path, members):
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in members.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = 0o755 << 16
            archive.writestr(info, data)


def _write_tar_xz(path, members):
    with tarfile.open(path, "w:xz") as archive:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            archive.addfile(info, io.BytesIO(data))


def test_parse_macos_version():
    json_string = '{"name":"ffmpeg","type":"release","version":"6.0",...}'
    assert parse_macos_version(json_string) == "6.0"


def test_parse_macos_version_missing():
    assert parse_macos_version('{"name":"ffmpeg"}') is None


def test_parse_linux_version():
    text = "build: ffmpeg-5.1.1-amd64-static.tar.xz\nversion: 5.1.1\n\ngcc: 8.3.0"
    assert parse_linux_version(text) == "5.1.1"


def test_parse_linux_version_missing():
    assert parse_linux_version("build: something") is None


@pytest.mark.parametrize(
    "plat, machine, expected",
    [
        ("win32", "AMD64", "https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip"),
        ("linux", "x86_64", "https://johnvansickle.com/ffmpeg/releases/ffmpeg-release-amd64-static.tar.xz"),
        ("linux", "aarch64", "https://johnvansickle.com/ffmpeg/releases/ffmpeg-release-arm64-static.tar.xz"),
        ("darwin", "x86_64", "https://evermeet.cx/ffmpeg/getrelease/zip"),
        ("darwin", "arm64", "https://www.osxexperts.net/ffmpeg80arm.zip"),
    ],
)
def test_download_url_per_platform(monkeypatch, plat, machine, expected):
    _set_platform(monkeypatch, plat, machine)
    assert ffmpeg_download_url() == expected


def test_download_url_unsupported(monkeypatch):
    _set_platform(monkeypatch, "sunos5", "x86_64")
    with pytest.raises(RuntimeError, match="Unsupported platform"):
        ffmpeg_download_url()


def test_manifest_url_linux(monkeypatch):
    _set_platform(monkeypatch, "linux", "x86_64")
    assert ffmpeg_manifest_url() == "https://johnvansickle.com/ffmpeg/release-readme.txt"


def test_manifest_url_rejects_other_architectures(monkeypatch):
    _set_platform(monkeypatch, "linux", "aarch64")
    with pytest.raises(RuntimeError, match="non-x86_64"):
        ffmpeg_manifest_url()


def test_manifest_url_unsupported_os(monkeypatch):
    _set_platform(monkeypatch, "sunos5", "x86_64")
    with pytest.raises(RuntimeError, match="Unsupported platform"):
        ffmpeg_manifest_url()


def test_check_latest_version_mac_arm(monkeypatch):
    _set_platform(monkeypatch, "darwin", "arm64")
    assert check_latest_version() == "7.0"


def test_download_package_from_file_url(tmp_path):
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    dest = tmp_path / "dest"
    dest.mkdir()
    payload = bytes(range(256)) * 300
    source = source_dir / "pkg.zip"
    source.write_bytes(payload)

    result = download_ffmpeg_package(source.as_uri(), dest)

    assert result == dest / "pkg.zip"
    assert result.read_bytes() == payload


def test_download_package_missing_source(tmp_path):
    url = (tmp_path / "missing.zip").as_uri()
    with pytest.raises(RuntimeError, match="Failed to download ffmpeg"):
        download_ffmpeg_package(url, tmp_path)


def test_download_package_without_filename(tmp_path):
    with pytest.raises(ValueError, match="Failed to get filename"):
        download_ffmpeg_package("/", tmp_path)


def test_download_with_progress_reports_bytes(tmp_path):
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    dest = tmp_path / "dest"
    dest.mkdir()
    payload = b"x" * 200_000
    source = source_dir / "pkg.tar.xz"
    source.write_bytes(payload)
    events = []

    result = download_ffmpeg_package_with_progress(source.as_uri(), dest, events.append)

    assert result.read_bytes() == payload
    assert all(e.stage is DownloadStage.DOWNLOADING for e in events)
    assert all(e.total_bytes == len(payload) for e in events)
    counts = [e.downloaded_bytes for e in events]
    assert counts == sorted(counts)
    assert counts[-1] == len(payload)
    assert counts[-1] == counts[-2]


def test_progress_event_defaults():
    event = FfmpegDownloadProgressEvent(DownloadStage.STARTING)
    assert (event.total_bytes, event.downloaded_bytes) == (0, 0)


def test_unpack_macos_zip(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "darwin", "x86_64")
    archive = tmp_path / "ffmpeg.zip"
    _write_zip(archive, {"ffmpeg": b"ffmpeg-binary", "ffprobe": b"ffprobe-binary"})

    unpack_ffmpeg(archive, tmp_path)

    assert (tmp_path / "ffmpeg").read_bytes() == b"ffmpeg-binary"
    assert (tmp_path / "ffprobe").read_bytes() == b"ffprobe-binary"
    assert not (tmp_path / "ffplay").exists()
    assert not (tmp_path / UNPACK_DIRNAME).exists()
    assert not archive.exists()
    assert os.stat(tmp_path / "ffmpeg").st_mode & 0o777 == 0o755


def test_unpack_linux_tar_xz(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "linux", "x86_64")
    archive = tmp_path / "ffmpeg-release-amd64-static.tar.xz"
    _write_tar_xz(
        archive,
        {
            "ffmpeg-7.0-amd64-static/ffmpeg": b"ffmpeg-binary",
            "ffmpeg-7.0-amd64-static/ffprobe": b"ffprobe-binary",
        },
    )

    unpack_ffmpeg(archive, tmp_path)

    assert (tmp_path / "ffmpeg").read_bytes() == b"ffmpeg-binary"
    assert (tmp_path / "ffprobe").read_bytes() == b"ffprobe-binary"
    assert not (tmp_path / UNPACK_DIRNAME).exists()
    assert not archive.exists()


def test_unpack_windows_zip(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "win32", "AMD64")
    archive = tmp_path / "ffmpeg-release-essentials.zip"
    _write_zip(
        archive,
        {
            "release/bin/ffmpeg.exe": b"ffmpeg-binary",
            "release/bin/ffplay.exe": b"ffplay-binary",
            "release/bin/ffprobe.exe": b"ffprobe-binary",
        },
    )

    unpack_ffmpeg(archive, tmp_path)

    assert (tmp_path / "ffmpeg.exe").read_bytes() == b"ffmpeg-binary"
    assert (tmp_path / "ffplay.exe").read_bytes() == b"ffplay-binary"
    assert (tmp_path / "ffprobe.exe").read_bytes() == b"ffprobe-binary"
    assert not archive.exists()


def test_unpack_without_ffmpeg_fails(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "darwin", "x86_64")
    archive = tmp_path / "ffmpeg.zip"
    _write_zip(archive, {"ffprobe": b"ffprobe-binary"})
    with pytest.raises(FileNotFoundError):
        unpack_ffmpeg(archive, tmp_path)


def test_unpack_bad_zip(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "darwin", "x86_64")
    archive = tmp_path / "ffmpeg.zip"
    archive.write_bytes(b"not a zip")
    with pytest.raises(RuntimeError, match="ZIP"):
        unpack_ffmpeg(archive, tmp_path)


def test_unpack_unsupported_platform(monkeypatch, tmp_path):
    _set_platform(monkeypatch, "sunos5", "x86_64")
    archive = tmp_path / "ffmpeg.zip"
    _write_zip(archive, {"ffmpeg": b"ffmpeg-binary"})
    with pytest.raises(RuntimeError, match="Unsupported platform"):
        unpack_ffmpeg(archive, tmp_path)