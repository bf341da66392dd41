from __future__ import annotations

import sys
import zlib

from savethesize.errors import CorruptStreamError, DecompressedSizeMismatchError

# raw DEFLATE: no zlib header/adler32 trailer
RAW_WBITS = -15


class CodecDeflate:
    """Raw DEFLATE byte codec (stdlib zlib, no external deps)."""

    def __init__(self, level: int = -1):
        if not (-1 <= level <= 9):
            raise ValueError(f"deflate level must be -1..9, got {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        c = zlib.compressobj(self.level, zlib.DEFLATED, RAW_WBITS)
        return c.compress(bytes(data)) + c.flush()

    def decompress(self, comp: bytes, out_size: int) -> bytes:
        """Inflate ``comp`` and require exactly ``out_size`` bytes of output.

        At most ``out_size + 1`` bytes are ever produced, so a header that
        lies about the size cannot force a huge allocation.
        """
        if not isinstance(comp, (bytes, bytearray)):
            raise TypeError("comp must be bytes")
        expected = int(out_size)
        if expected < 0:
            raise ValueError(f"out_size must be >= 0, got {out_size}")

        d = zlib.decompressobj(RAW_WBITS)
        try:
            out = d.decompress(bytes(comp), min(expected + 1, sys.maxsize))
        except zlib.error as err:
            raise CorruptStreamError(f"invalid deflate stream: {err}") from err

        if len(out) > expected:
            raise DecompressedSizeMismatchError(
                f"decompressed size mismatch: got more than {expected} bytes"
            )
        if not d.eof:
            raise CorruptStreamError("invalid deflate stream: truncated (no end-of-stream marker)")
        if d.unused_data:
            raise CorruptStreamError(
                f"invalid deflate stream: {len(d.unused_data)} trailing bytes after end of stream"
            )
        if len(out) != expected:
            raise DecompressedSizeMismatchError(
                f"decompressed size mismatch: got={len(out)} expected={expected}"
            )
        return out
