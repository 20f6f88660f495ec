[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ffsidecar"
version = "2.3.0"
description = "Build, spawn and read from a standalone FFmpeg binary as a child process."
requires-python = ">=3.10"
keywords = ["ffmpeg", "ffprobe", "video", "subprocess", "rawvideo"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ffsidecar"]

[tool.pytest.ini_options]
addopts = "-ra"
