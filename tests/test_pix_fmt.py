import pytest

from ffsidecar.events import VideoStream
from ffsidecar.pix_fmt import get_bits_per_pixel, get_bytes_per_frame


def test_known_format():
    assert get_bits_per_pixel("rgb24") == 24


def test_unknown_format():
    assert get_bits_per_pixel("asdf") is None


def test_hardware_format_has_zero_bits():
    assert get_bits_per_pixel("cuda") == 0


@pytest.mark.parametrize("pix_fmt", ["rgb24", "yuv420p", "gray", "rgba", "nv12"])
def test_bytes_per_frame_matches_bits(pix_fmt):
    video = VideoStream(pix_fmt=pix_fmt, width=320, height=240, fps=25.0)
    size = get_bytes_per_frame(video)
    assert size * 8 == 320 * 240 * get_bits_per_pixel(pix_fmt)


def test_yuv420_frame_size():
    video = VideoStream(pix_fmt="yuv420p", width=320, height=240, fps=25.0)
    assert get_bytes_per_frame(video) == 320 * 240 * 12 // 8


def test_non_byte_aligned_frame_is_rejected():
    video = VideoStream(pix_fmt="yuv420p", width=321, height=241, fps=25.0)
    assert get_bytes_per_frame(video) is None


def test_unknown_format_frame_is_rejected():
    video = VideoStream(pix_fmt="asdf", width=2, height=2, fps=1.0)
    assert get_bytes_per_frame(video) is None