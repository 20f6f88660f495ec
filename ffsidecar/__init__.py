"""Build FFmpeg commands, run FFmpeg as a child process and read frames from its stdout."""

__version__ = "2.3.0"