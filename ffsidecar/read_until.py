"""Reading from a binary stream up to any of several delimiter bytes."""

from __future__ import annotations

from typing import BinaryIO


def read_until_any(reader: BinaryIO, delims: bytes) -> bytes:
    """Read up to and including the first delimiter byte after any leading ones.

    Leading delimiters are kept in the result rather than ending it. At end
    of stream the bytes read so far are returned; if they are only
    delimiters (or nothing), ``b""`` is returned.
    """
    delim_set = frozenset(delims)
    peek = getattr(reader, "peek", None)
    out = bytearray()
    leading = True

    while True:
        chunk = peek() if peek is not None else reader.read(1)
        if not chunk:
            break

        start = 0
        if leading:
            start = len(chunk) - len(chunk.lstrip(delims))
            leading = start == len(chunk)

        hits = [pos for pos in (chunk.find(d, start) for d in delim_set) if pos != -1]
        used = min(hits) + 1 if hits else len(chunk)

        out += chunk[:used]
        if peek is not None:
            reader.read(used)
        if hits:
            return bytes(out)

    if all(byte in delim_set for byte in out):
        return b""
    return bytes(out)