"""Typed errors for SaveTheSize.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Every error carries a stable ``kind`` so callers other than the CLI can
  branch on the failure cause without parsing messages.
- The CLI reports failures uniformly: one line on stderr, exit code 1.
- docs/exit_codes.md is rendered from this module (tests keep it current).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(
        EXIT_FAILURE,
        "FAILURE",
        "Usage error or operational failure (missing file, invalid container, I/O error)",
    ),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE, do not edit manually.\n")
    lines.append("> Source of truth: `src/savethesize/errors.py` (EXIT_CODES, ERROR_KINDS).\n")
    lines.append("> Regenerate with `savethesize.errors.render_exit_codes_markdown()`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Error kinds\n\n")
    lines.append("All failures exit with 1. The `kind` below is reported by `--json`.\n\n")
    lines.append("| Kind | Exception |\n")
    lines.append("|---|---|\n")
    for cls in ERROR_KINDS:
        lines.append(f"| `{cls.kind}` | `{cls.__name__}` |\n")
    lines.append("\n## Notes\n")
    lines.append("- Library errors extend `SaveTheSizeError` and carry `kind` + `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- `--json` on `info`/`verify` prints a JSON object to stdout (ok) or stderr (error).\n"
    )
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class SaveTheSizeError(Exception):
    """Base error for SaveTheSize."""

    kind: str = "error"
    exit_code: int = EXIT_FAILURE


class UsageError(SaveTheSizeError):
    kind = "usage"


class FileNotFound(SaveTheSizeError):
    """Input path does not exist at invocation time."""

    kind = "file_not_found"


class FileIOError(SaveTheSizeError):
    """Read/write failure; the underlying OSError is chained as ``__cause__``."""

    kind = "io_error"


class FormatError(SaveTheSizeError):
    """Bytes are not a well-formed container."""

    kind = "format"


class TooSmallError(FormatError):
    kind = "too_small"


class BadMagicError(FormatError):
    kind = "bad_magic"


class UnsupportedVersionError(FormatError):
    kind = "unsupported_version"


class SizeMismatchError(FormatError):
    kind = "size_mismatch"


class DecompressedSizeMismatchError(FormatError):
    kind = "decompressed_size_mismatch"


class CorruptStreamError(FormatError):
    kind = "corrupt_stream"


ERROR_KINDS: tuple[type[SaveTheSizeError], ...] = (
    UsageError,
    FileNotFound,
    FileIOError,
    FormatError,
    TooSmallError,
    BadMagicError,
    UnsupportedVersionError,
    SizeMismatchError,
    DecompressedSizeMismatchError,
    CorruptStreamError,
)
