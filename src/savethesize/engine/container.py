from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from savethesize.core.codec_deflate import CodecDeflate
from savethesize.engine.header import (
    HEADER_SIZE,
    MAGIC,
    VERSION,
    Header,
    basename,
    build_header,
    decode_header,
    encode_header,
)
from savethesize.errors import (
    BadMagicError,
    DecompressedSizeMismatchError,
    SizeMismatchError,
    UnsupportedVersionError,
)

CONTAINER_SUFFIX = ".savethesize"
COLLISION_INFIX = "_decompressed"


# -------------------
# Container
# [HEADER(280)|PAYLOAD(compressed_size)]
# -------------------
def compress(
    input_bytes: bytes, filename_hint: str, *, codec: CodecDeflate | None = None
) -> tuple[Header, bytes]:
    """Compress ``input_bytes``; return the header to embed and the payload."""
    data = bytes(input_bytes)
    if not data:
        # zero-length payload round-trips as empty, no deflate stream at all
        payload = b""
    else:
        payload = (codec or CodecDeflate()).compress(data)

    header = build_header(len(data), len(payload), filename_hint)
    return header, payload


def pack_container(header: Header, payload: bytes) -> bytes:
    if header.compressed_size != len(payload):
        raise ValueError(
            f"compressed_size={header.compressed_size} does not match payload ({len(payload)} bytes)"
        )
    return encode_header(header) + bytes(payload)


def compress_container(
    input_bytes: bytes, filename_hint: str, *, codec: CodecDeflate | None = None
) -> bytes:
    header, payload = compress(input_bytes, filename_hint, codec=codec)
    return pack_container(header, payload)


def _read_checked_header(blob: bytes) -> Header:
    # decode_header raises TooSmallError on short input
    header = decode_header(blob)
    if header.magic != MAGIC:
        raise BadMagicError(
            f"not a valid container: wrong magic number 0x{header.magic:08X} "
            f"(expected 0x{MAGIC:08X})"
        )
    return header


def inspect(container_bytes: bytes) -> Header:
    """Decode the header for display.

    Only the length and the magic are fatal: an unsupported version or a
    size mismatch is still shown as-is.
    """
    return _read_checked_header(container_bytes)


def decompress(
    container_bytes: bytes, *, codec: CodecDeflate | None = None
) -> tuple[Header, bytes]:
    blob = bytes(container_bytes)
    header = _read_checked_header(blob)
    if header.version != VERSION:
        raise UnsupportedVersionError(
            f"unsupported container version: {header.version} (supported: {VERSION})"
        )

    expected_total = HEADER_SIZE + header.compressed_size
    if len(blob) != expected_total:
        raise SizeMismatchError(
            f"invalid container: size mismatch (file={len(blob)} bytes, "
            f"header+payload={expected_total} bytes)"
        )

    payload = blob[HEADER_SIZE:expected_total]
    if not payload:
        if header.original_size != 0:
            raise DecompressedSizeMismatchError(
                f"decompressed size mismatch: got=0 expected={header.original_size}"
            )
        return header, b""

    data = (codec or CodecDeflate()).decompress(payload, out_size=header.original_size)
    return header, data


# -------------------
# Reporting / naming policies
# -------------------
def compression_ratio(compressed_size: int, original_size: int) -> float | None:
    """compressed/original in percent, 1 decimal; None when original is empty."""
    if original_size == 0:
        return None
    # halves round up: 1/16 -> 6.3, not 6.2
    pct = Decimal(compressed_size * 100) / Decimal(original_size)
    return float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_ratio(ratio: float | None) -> str:
    return "undefined" if ratio is None else f"{ratio:.1f}%"


def default_compressed_path(input_path: Path, suffix: str = CONTAINER_SUFFIX) -> Path:
    p = Path(input_path)
    return p.with_name(p.name + suffix)


def decompressed_name_from_header(header: Header, fallback: str) -> str:
    """Output file name taken from the (untrusted) embedded name.

    Only the last path component is kept; empty, '.' and '..' fall back to
    ``fallback``.
    """
    name = basename(header.original_name.replace("\x00", ""))
    if name in ("", ".", ".."):
        return fallback
    return name


def resolve_output_path(desired: Path, exists: bool) -> Path:
    """Collision policy: ``name.ext`` -> ``name_decompressed.ext`` if taken.

    ``exists`` is the result of a single existence check done by the caller;
    nothing here touches the filesystem.
    """
    p = Path(desired)
    if not exists:
        return p
    return p.with_name(f"{p.stem}{COLLISION_INFIX}{p.suffix}")
