from __future__ import annotations

import random
import zlib

import pytest

from savethesize.core.codec_deflate import CodecDeflate
from savethesize.errors import CorruptStreamError, DecompressedSizeMismatchError


def _sample() -> bytes:
    return ("RIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n" * 40).encode("utf-8")


def test_deflate_roundtrip() -> None:
    c = CodecDeflate()
    data = _sample()
    comp = c.compress(data)
    assert len(comp) < len(data)
    assert c.decompress(comp, out_size=len(data)) == data


def test_payload_is_raw_deflate_without_zlib_wrapper() -> None:
    data = _sample()
    comp = CodecDeflate(level=9).compress(data)
    assert zlib.decompress(comp, -15) == data
    with pytest.raises(zlib.error):
        zlib.decompress(comp)


def test_decompresses_streams_from_other_encoders() -> None:
    rnd = random.Random(1234)
    data = bytes(rnd.randrange(256) for _ in range(5000))
    co = zlib.compressobj(1, zlib.DEFLATED, -15)
    comp = co.compress(data) + co.flush()
    assert CodecDeflate().decompress(comp, out_size=len(data)) == data


@pytest.mark.parametrize("level", [-2, 10, 100])
def test_level_out_of_range(level: int) -> None:
    with pytest.raises(ValueError):
        CodecDeflate(level=level)


def test_type_checks() -> None:
    c = CodecDeflate()
    with pytest.raises(TypeError):
        c.compress("text")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        c.decompress("text", out_size=1)  # type: ignore[arg-type]


def test_invalid_block_type_is_corrupt_stream() -> None:
    # 0xFF: BFINAL=1, BTYPE=11 (reserved)
    with pytest.raises(CorruptStreamError):
        CodecDeflate().decompress(b"\xff\xff\xff", out_size=3)


def test_truncated_stream_is_corrupt_stream() -> None:
    data = bytes(range(256)) * 20
    comp = CodecDeflate().compress(data)
    with pytest.raises(CorruptStreamError):
        CodecDeflate().decompress(comp[: len(comp) // 2], out_size=len(data))


def test_trailing_bytes_after_stream_are_corrupt() -> None:
    data = _sample()
    comp = CodecDeflate().compress(data)
    with pytest.raises(CorruptStreamError):
        CodecDeflate().decompress(comp + b"\x00garbage", out_size=len(data))


def test_size_mismatch_shorter_and_longer() -> None:
    data = _sample()
    comp = CodecDeflate().compress(data)
    with pytest.raises(DecompressedSizeMismatchError):
        CodecDeflate().decompress(comp, out_size=len(data) + 1)
    with pytest.raises(DecompressedSizeMismatchError):
        CodecDeflate().decompress(comp, out_size=len(data) - 1)
    with pytest.raises(DecompressedSizeMismatchError):
        CodecDeflate().decompress(comp, out_size=0)


def test_lying_huge_out_size_does_not_overflow() -> None:
    data = b"abc" * 10
    comp = CodecDeflate().compress(data)
    with pytest.raises(DecompressedSizeMismatchError):
        CodecDeflate().decompress(comp, out_size=2**64 - 1)
