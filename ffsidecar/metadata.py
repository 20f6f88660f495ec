"""Metadata about an FFmpeg process and its streams, gathered from events."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

from .events import (
    FfmpegEvent,
    FfmpegInput,
    FfmpegOutput,
    ParsedDuration,
    ParsedInput,
    ParsedInputStream,
    ParsedOutput,
    ParsedOutputStream,
    ParsedStreamMapping,
    Stream,
)


@dataclass
class FfmpegMetadata:
    """Inputs, outputs and streams reported by FFmpeg before it starts work."""

    outputs: list[FfmpegOutput] = field(default_factory=list)
    output_streams: list[Stream] = field(default_factory=list)
    inputs: list[FfmpegInput] = field(default_factory=list)
    input_streams: list[Stream] = field(default_factory=list)
    _expected_output_streams: int = field(default=0, init=False, repr=False)
    _completed: bool = field(default=False, init=False, repr=False)

    def is_completed(self) -> bool:
        """True once every output stream has been reported."""
        return self._completed

    def duration(self) -> Optional[float]:
        """The duration in seconds of the first input."""
        return self.inputs[0].duration

    def handle_event(self, item: Optional[FfmpegEvent]) -> None:
        """Record what an event says about inputs, outputs and streams."""
        if self._completed:
            raise RuntimeError("Metadata is already completed")

        match item:
            case ParsedStreamMapping():
                # One stream mapping per output stream.
                self._expected_output_streams += 1
            case ParsedInput(input=parsed_input):
                self.inputs.append(dataclasses.replace(parsed_input))
            case ParsedOutput(output=output):
                self.outputs.append(dataclasses.replace(output))
            case ParsedDuration(duration=duration):
                self.inputs[duration.input_index].duration = duration.duration
            case ParsedOutputStream(stream=stream):
                self.output_streams.append(dataclasses.replace(stream))
            case ParsedInputStream(stream=stream):
                self.input_streams.append(dataclasses.replace(stream))
            case _:
                pass

        if (
            self._expected_output_streams > 0
            and len(self.output_streams) == self._expected_output_streams
        ):
            self._completed = True