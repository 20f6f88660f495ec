"""Bits per pixel for the pixel formats FFmpeg knows, and frame sizes."""

from __future__ import annotations

from typing import Optional

from .events import VideoStream

_BITS_PER_PIXEL: dict[str, int] = {
    "yuv420p": 12, "yuyv422": 16, "rgb24": 24, "bgr24": 24, "yuv422p": 16,
    "yuv444p": 24, "yuv410p": 9, "yuv411p": 12, "gray": 8, "monow": 1,
    "monob": 1, "pal8": 8, "yuvj420p": 12, "yuvj422p": 16, "yuvj444p": 24,
    "uyvy422": 16, "uyyvyy411": 12, "bgr8": 8, "bgr4": 4, "rgb8": 8,
    "rgb4": 4, "nv12": 12, "nv21": 12, "argb": 32, "rgba": 32, "abgr": 32,
    "bgra": 32, "gray16be": 16, "gray16le": 16, "yuv440p": 16,
    "yuvj440p": 16, "yuva420p": 20, "rgb48be": 48, "rgb48le": 48,
    "rgb565be": 16, "rgb565le": 16, "rgb555be": 15, "rgb555le": 15,
    "bgr565be": 16, "bgr565le": 16, "bgr555be": 15, "bgr555le": 15,
    "vaapi": 0, "yuv420p16le": 24, "yuv420p16be": 24, "yuv422p16le": 32,
    "yuv422p16be": 32, "yuv444p16le": 48, "yuv444p16be": 48, "dxva2": 0,
    "rgb444le": 12, "rgb444be": 12, "bgr444le": 12, "bgr444be": 12,
    "ya8": 16, "bgr48be": 48, "bgr48le": 48, "yuv420p9be": 13,
    "yuv420p9le": 13, "yuv420p10be": 15, "yuv420p10le": 15,
    "yuv422p10be": 20, "yuv422p10le": 20, "yuv444p9be": 27,
    "yuv444p9le": 27, "yuv444p10be": 30, "yuv444p10le": 30,
    "yuv422p9be": 18, "yuv422p9le": 18, "gbrp": 24, "gbrp9be": 27,
    "gbrp9le": 27, "gbrp10be": 30, "gbrp10le": 30, "gbrp16be": 48,
    "gbrp16le": 48, "yuva422p": 24, "yuva444p": 32, "yuva420p9be": 22,
    "yuva420p9le": 22, "yuva422p9be": 27, "yuva422p9le": 27,
    "yuva444p9be": 36, "yuva444p9le": 36, "yuva420p10be": 25,
    "yuva420p10le": 25, "yuva422p10be": 30, "yuva422p10le": 30,
    "yuva444p10be": 40, "yuva444p10le": 40, "yuva420p16be": 40,
    "yuva420p16le": 40, "yuva422p16be": 48, "yuva422p16le": 48,
    "yuva444p16be": 64, "yuva444p16le": 64, "vdpau": 0, "xyz12le": 36,
    "xyz12be": 36, "nv16": 16, "nv20le": 20, "nv20be": 20, "rgba64be": 64,
    "rgba64le": 64, "bgra64be": 64, "bgra64le": 64, "yvyu422": 16,
    "ya16be": 32, "ya16le": 32, "gbrap": 32, "gbrap16be": 64,
    "gbrap16le": 64, "qsv": 0, "mmal": 0, "d3d11va": 0, "cuda": 0,
    "0rgb": 24, "rgb0": 24, "0bgr": 24, "bgr0": 24, "yuv420p12be": 18,
    "yuv420p12le": 18, "yuv420p14be": 21, "yuv420p14le": 21,
    "yuv422p12be": 24, "yuv422p12le": 24, "yuv422p14be": 28,
    "yuv422p14le": 28, "yuv444p12be": 36, "yuv444p12le": 36,
    "yuv444p14be": 42, "yuv444p14le": 42, "gbrp12be": 36, "gbrp12le": 36,
    "gbrp14be": 42, "gbrp14le": 42, "yuvj411p": 12, "bayer": 3, "xvmc": 0,
    "yuv440p10le": 20, "yuv440p10be": 20, "yuv440p12le": 24,
    "yuv440p12be": 24, "ayuv64le": 64, "ayuv64be": 64, "videotoolbox": 0,
    "p010le": 15, "p010be": 15, "gbrap12be": 48, "gbrap12le": 48,
    "gbrap10be": 40, "gbrap10le": 40, "mediacodec": 0, "gray12be": 12,
    "gray12le": 12, "gray10be": 10, "gray10le": 10, "p016le": 24,
    "p016be": 24, "d3d11": 0, "gray9be": 9, "gray9le": 9, "gbrpf32be": 96,
    "gbrpf32le": 96, "gbrapf32be": 128, "gbrapf32le": 128, "drm": 0,
    "opencl": 0, "gray14be": 14, "gray14le": 14, "grayf32be": 32,
    "grayf32le": 32, "yuva422p12be": 36, "yuva422p12le": 36,
    "yuva444p12be": 48, "yuva444p12le": 48, "nv24": 24, "nv42": 24,
    "vulkan": 0, "y210be": 20, "y210le": 20, "x2rgb10le": 30,
    "x2rgb10be": 30, "x2bgr10le": 30, "x2bgr10be": 30, "p210be": 20,
    "p210le": 20, "p410be": 30, "p410le": 30, "p216be": 32, "p216le": 32,
    "p416be": 48, "p416le": 48, "vuya": 32, "rgbaf16be": 64,
    "rgbaf16le": 64, "vuyx": 24, "p012le": 18, "p012be": 18, "y212be": 24,
    "y212le": 24, "xv30be": 30, "xv30le": 30, "xv36be": 36, "xv36le": 36,
    "rgbf32be": 96, "rgbf32le": 96, "rgbaf32be": 128, "rgbaf32le": 128,
}


def get_bits_per_pixel(pix_fmt: str) -> Optional[int]:
    """Bits per pixel of a pixel format, or None if it is not recognised."""
    return _BITS_PER_PIXEL.get(pix_fmt)


def get_bytes_per_frame(video_data: VideoStream) -> Optional[int]:
    """Size in bytes of one frame, or None if unknown or not byte-aligned."""
    bits_per_pixel = get_bits_per_pixel(video_data.pix_fmt)
    if bits_per_pixel is None:
        return None
    num_bits = video_data.width * video_data.height * bits_per_pixel
    whole_bytes, remainder = divmod(num_bits, 8)
    return None if remainder else whole_bytes