"""Verify a container file without writing anything.

Runs the full decompress validation (magic, version, sizes, deflate stream,
decompressed length) and throws the output away.
"""

from __future__ import annotations

from pathlib import Path

from savethesize.engine import container
from savethesize.engine.header import Header
from savethesize.files import read_file


def verify_container_file(path: Path) -> Header:
    blob = read_file(Path(path))
    header, _ = container.decompress(blob)
    return header
