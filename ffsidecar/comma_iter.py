"""Splitting of comma-separated values from FFmpeg logs."""

from __future__ import annotations

from collections.abc import Iterator


def iter_comma_separated(text: str) -> Iterator[str]:
    """Yield comma-separated sections, ignoring commas inside parentheses.

    Only one level of parentheses is recognised. Iteration stops at the
    first empty section.
    """
    pos = 0
    length = len(text)
    while True:
        start = pos
        end = None
        while pos < length:
            char = text[pos]
            pos += 1
            if char == "(":
                close = text.find(")", pos)
                pos = length if close == -1 else close + 1
            elif char == ",":
                end = pos - 1
                break
        section = text[start:pos if end is None else end]
        if not section:
            return
        yield section