"""SaveTheSize CLI.

This is the stable CLI entrypoint (console-script: ``savethesize``).

UX policy:
  - Subcommands: compress / decompress / info / verify.
  - The single-letter modes of the original tool (-c/-d/-i) still work.
  - Every failure (usage, missing file, invalid container, I/O) exits with 1
    and a single ``[savethesize] ...`` line on stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from savethesize.config import DEFAULT_LEVEL, CompressConfig, check_level, load_config
from savethesize.engine.container import format_ratio
from savethesize.errors import EXIT_FAILURE, EXIT_OK, SaveTheSizeError

PROG = "savethesize"

LEGACY_MODES: dict[str, str] = {
    "-c": "compress",
    "-d": "decompress",
    "-i": "info",
}


def _pkg_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("savethesize")
    except PackageNotFoundError:
        # running from a source checkout without metadata
        return "0+unknown"


class _Parser(argparse.ArgumentParser):
    """argparse, but usage errors exit with 1 like every other failure."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"[{PROG}] {message}\n")


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _print_json_error(cmd: str, target: Path, err: Exception) -> None:
    obj = {
        "schema": f"{PROG}.{cmd}.v1",
        "ok": False,
        "target": str(target),
        "version": _pkg_version(),
        "error": {
            "type": getattr(err, "kind", "error"),
            "message": str(err),
        },
    }
    print(json.dumps(obj, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _cmd_compress(
    input_path: Path,
    output_path: Path | None,
    *,
    level: int | None,
    config_arg: str | None,
    quiet: bool,
) -> int:
    from savethesize.files import compress_file

    cfg = load_config(config_arg) if config_arg else CompressConfig()
    # precedence: CLI --level > config.level > default
    if level is not None:
        cfg = CompressConfig(level=check_level(level), suffix=cfg.suffix)

    res = compress_file(input_path, output_path, config=cfg)
    if not quiet:
        print("=== SaveTheSize: compress ===")
        print(f"input          : {res.input_path} ({res.input_size} bytes)")
        print(f"output         : {res.output_path} ({res.output_size} bytes)")
        print(f"ratio          : {format_ratio(res.ratio)}")
        print("=============================")
    return EXIT_OK


def _cmd_decompress(input_path: Path, output_path: Path | None, *, quiet: bool) -> int:
    from savethesize.files import decompress_file

    res = decompress_file(input_path, output_path)
    if not quiet:
        print("=== SaveTheSize: decompress ===")
        print(f"input          : {res.input_path} ({res.input_size} bytes)")
        print(f"output         : {res.output_path} ({res.output_size} bytes)")
        print(f"original name  : {res.header.original_name}")
        print("===============================")
    return EXIT_OK


def _cmd_info(input_path: Path, *, as_json: bool) -> int:
    from savethesize.files import file_info

    res = file_info(input_path)
    h = res.header
    if as_json:
        print(
            json.dumps(
                {
                    "schema": f"{PROG}.info.v1",
                    "ok": True,
                    "target": str(res.path),
                    "original_name": h.original_name,
                    "original_size": h.original_size,
                    "compressed_size": h.compressed_size,
                    "payload_size": res.payload_size,
                    "file_size": res.file_size,
                    "format_version": h.version,
                    "ratio_percent": res.ratio,
                    "version": _pkg_version(),
                },
                ensure_ascii=False,
                separators=(",", ":"),
            )
        )
        return EXIT_OK

    print("=== SaveTheSize: container info ===")
    print(f"file           : {res.path}")
    print(f"original name  : {h.original_name}")
    print(f"original size  : {h.original_size} bytes")
    print(f"compressed size: {h.compressed_size} bytes")
    print(f"file size      : {res.file_size} bytes")
    print(f"version        : {h.version}")
    print(f"ratio          : {format_ratio(res.ratio)}")
    print("===================================")
    return EXIT_OK


def _cmd_verify(input_path: Path, *, as_json: bool) -> int:
    from savethesize.verify import verify_container_file

    header = verify_container_file(input_path)
    if as_json:
        print(
            json.dumps(
                {
                    "schema": f"{PROG}.verify.v1",
                    "ok": True,
                    "target": str(input_path),
                    "original_size": header.original_size,
                    "version": _pkg_version(),
                },
                ensure_ascii=False,
                separators=(",", ":"),
            )
        )
    else:
        print("OK")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog=PROG, description="save the size: single-file DEFLATE container")
    p.add_argument("--version", action="version", version=f"%(prog)s {_pkg_version()}")
    sub = p.add_subparsers(dest="cmd", required=True, parser_class=_Parser)

    p_c = sub.add_parser("compress", help="Compress a file into a container")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path, nargs="?", default=None)
    p_c.add_argument(
        "--level",
        type=int,
        default=None,
        help=f"DEFLATE level -1..9 (default: config.level or {DEFAULT_LEVEL})",
    )
    p_c.add_argument(
        "--config",
        default=None,
        help="Compress settings JSON. Use '@file.json' to load from file, or pass JSON inline.",
    )
    p_c.add_argument("--quiet", action="store_true", help="Do not print the summary")
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Restore the original file from a container")
    p_d.add_argument("input", type=Path)
    p_d.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Output path (default: embedded original name, '_decompressed' if it exists)",
    )
    p_d.add_argument("--quiet", action="store_true", help="Do not print the summary")
    _add_common_args(p_d)

    p_i = sub.add_parser("info", help="Show container header fields (writes nothing)")
    p_i.add_argument("input", type=Path)
    p_i.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_i)

    p_v = sub.add_parser("verify", help="Fully validate a container (writes nothing)")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_v)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in LEGACY_MODES:
        argv = [LEGACY_MODES[argv[0]], *argv[1:]]

    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "compress":
            return _cmd_compress(
                ns.input,
                ns.output,
                level=ns.level,
                config_arg=ns.config,
                quiet=bool(ns.quiet),
            )
        if ns.cmd == "decompress":
            return _cmd_decompress(ns.input, ns.output, quiet=bool(ns.quiet))
        if ns.cmd == "info":
            return _cmd_info(ns.input, as_json=bool(ns.json))
        if ns.cmd == "verify":
            return _cmd_verify(ns.input, as_json=bool(ns.json))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except SaveTheSizeError as e:
        if getattr(ns, "debug", False):
            raise
        if getattr(ns, "json", False):
            _print_json_error(ns.cmd, ns.input, e)
        else:
            print(f"[{PROG}] {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[{PROG}] error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
