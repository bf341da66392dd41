"""Fixed-layout container header (280 bytes).

Layout (little endian, no padding):
  magic           4B  uint32  0x53545346
  version         4B  uint32  1
  original_size   8B  uint64  length of the uncompressed data
  compressed_size 8B  uint64  length of the payload right after the header
  original_name 256B          UTF-8 file name, zero padded (max 255 bytes used)

Fields are packed one by one with an explicit byte order; the layout never
depends on how the interpreter lays out objects in memory.

decode_header() is purely structural: magic/version/sizes are checked by
the container codec, not here.
"""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass

from savethesize.errors import TooSmallError

MAGIC = 0x53545346
VERSION = 1

NAME_FIELD_SIZE = 256
# one byte always left for the terminator
NAME_MAX_BYTES = NAME_FIELD_SIZE - 1

_HEADER_STRUCT = struct.Struct(f"<IIQQ{NAME_FIELD_SIZE}s")
HEADER_SIZE = _HEADER_STRUCT.size  # 280

_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class Header:
    magic: int
    version: int
    original_size: int
    compressed_size: int
    original_name: str


def basename(filename: str) -> str:
    """Last path component, treating both '/' and '\\' as separators."""
    return re.split(r"[\\/]", str(filename))[-1]


def encode_name(name: str) -> bytes:
    """UTF-8 encode ``name`` and cut it to NAME_MAX_BYTES.

    The cut never splits a multi-byte character, so the stored prefix always
    decodes back to a prefix of ``name``. Characters UTF-8 cannot encode
    (surrogate escapes of undecodable file-name bytes) are stored as '?'.
    """
    # undecodable bytes from os.fsdecode() arrive as lone surrogates
    raw = name.encode("utf-8", errors="replace")
    if len(raw) <= NAME_MAX_BYTES:
        return raw
    cut = NAME_MAX_BYTES
    # back off UTF-8 continuation bytes (10xxxxxx)
    while cut > 0 and (raw[cut] & 0xC0) == 0x80:
        cut -= 1
    return raw[:cut]


def truncate_name(name: str) -> str:
    return encode_name(name).decode("utf-8")


def build_header(original_size: int, compressed_size: int, filename: str) -> Header:
    """Header for a fresh container: constants + basename of ``filename``."""
    return Header(
        magic=MAGIC,
        version=VERSION,
        original_size=int(original_size),
        compressed_size=int(compressed_size),
        original_name=truncate_name(basename(filename)),
    )


def _check_range(field: str, value: int, max_value: int) -> int:
    v = int(value)
    if not (0 <= v <= max_value):
        raise ValueError(f"header: {field} out of range: {value}")
    return v


def encode_header(h: Header) -> bytes:
    return _HEADER_STRUCT.pack(
        _check_range("magic", h.magic, _U32_MAX),
        _check_range("version", h.version, _U32_MAX),
        _check_range("original_size", h.original_size, _U64_MAX),
        _check_range("compressed_size", h.compressed_size, _U64_MAX),
        # struct zero-fills the rest of the 256-byte field
        encode_name(h.original_name),
    )


def decode_name(field: bytes) -> str:
    # untrusted metadata: not necessarily valid UTF-8, never a trusted path
    return bytes(field).rstrip(b"\x00").decode("utf-8", errors="replace")


def decode_header(blob: bytes) -> Header:
    if len(blob) < HEADER_SIZE:
        raise TooSmallError(
            f"not a valid container: smaller than header size ({len(blob)} < {HEADER_SIZE} bytes)"
        )
    magic, version, original_size, compressed_size, name_field = _HEADER_STRUCT.unpack_from(
        blob, 0
    )
    return Header(
        magic=magic,
        version=version,
        original_size=original_size,
        compressed_size=compressed_size,
        original_name=decode_name(name_field),
    )
