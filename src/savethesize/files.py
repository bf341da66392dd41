"""File-level operations: read whole file -> transform in memory -> write.

Each call is independent and stateless apart from the paths it is given.
Files are opened and closed inside read_file()/write_file(), so descriptors
are released on every exit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from savethesize.config import CompressConfig
from savethesize.core.codec_deflate import CodecDeflate
from savethesize.engine import container
from savethesize.engine.header import HEADER_SIZE, Header
from savethesize.errors import FileIOError, FileNotFound


@dataclass(frozen=True)
class CompressResult:
    input_path: Path
    output_path: Path
    input_size: int
    output_size: int
    header: Header
    ratio: float | None


@dataclass(frozen=True)
class DecompressResult:
    input_path: Path
    output_path: Path
    input_size: int
    output_size: int
    header: Header


@dataclass(frozen=True)
class InfoResult:
    path: Path
    file_size: int
    header: Header
    ratio: float | None

    @property
    def payload_size(self) -> int:
        return max(0, self.file_size - HEADER_SIZE)


def read_file(path: Path) -> bytes:
    p = Path(path)
    if not p.is_file():
        raise FileNotFound(f"cannot open file: {p}")
    try:
        return p.read_bytes()
    except OSError as err:
        raise FileIOError(f"error reading file: {p}: {err}") from err


def write_file(path: Path, data: bytes) -> None:
    p = Path(path)
    try:
        p.write_bytes(data)
    except OSError as err:
        raise FileIOError(f"error writing file: {p}: {err}") from err


def compress_file(
    input_path: Path,
    output_path: Path | None = None,
    *,
    config: CompressConfig | None = None,
) -> CompressResult:
    cfg = config or CompressConfig()
    src = Path(input_path)
    data = read_file(src)

    header, payload = container.compress(
        data, src.name, codec=CodecDeflate(level=cfg.level)
    )
    blob = container.pack_container(header, payload)

    out = Path(output_path) if output_path else container.default_compressed_path(src, cfg.suffix)
    write_file(out, blob)

    return CompressResult(
        input_path=src,
        output_path=out,
        input_size=len(data),
        output_size=len(blob),
        header=header,
        ratio=container.compression_ratio(header.compressed_size, header.original_size),
    )


def _fallback_name(input_path: Path) -> str:
    # 'x.txt.savethesize' -> 'x.txt'; anything else -> '<name>.out'
    name = input_path.name
    if name.endswith(container.CONTAINER_SUFFIX) and len(name) > len(container.CONTAINER_SUFFIX):
        return name[: -len(container.CONTAINER_SUFFIX)]
    return name + ".out"


def decompress_file(input_path: Path, output_path: Path | None = None) -> DecompressResult:
    """Decompress a container file.

    Without ``output_path`` the embedded original name is used, relative to
    the current directory. If that file already exists the name gets the
    ``_decompressed`` infix. The existence check is a single, non-atomic
    query (time-of-check/time-of-use): another process may still create the
    file before it is written. If the ``_decompressed`` name is taken as
    well, that file is overwritten.
    """
    src = Path(input_path)
    blob = read_file(src)
    header, data = container.decompress(blob)

    if output_path:
        out = Path(output_path)
    else:
        desired = Path(container.decompressed_name_from_header(header, _fallback_name(src)))
        out = container.resolve_output_path(desired, desired.exists())

    write_file(out, data)

    return DecompressResult(
        input_path=src,
        output_path=out,
        input_size=len(blob),
        output_size=len(data),
        header=header,
    )


def file_info(input_path: Path) -> InfoResult:
    src = Path(input_path)
    blob = read_file(src)
    header = container.inspect(blob)
    return InfoResult(
        path=src,
        file_size=len(blob),
        header=header,
        ratio=container.compression_ratio(header.compressed_size, header.original_size),
    )
