from __future__ import annotations

import ast
from pathlib import Path

PKG_DIR = Path(__file__).resolve().parents[1] / "src" / "savethesize"

# Which savethesize modules each module may import.
# Bytes flow up: errors <- core/engine <- config <- files/verify <- cli.
ALLOWED_IMPORTS: dict[str, set[str]] = {
    "savethesize.errors": set(),
    "savethesize.core.codec_deflate": {"savethesize.errors"},
    "savethesize.engine.header": {"savethesize.errors"},
    "savethesize.engine.container": {
        "savethesize.errors",
        "savethesize.core.codec_deflate",
        "savethesize.engine.header",
    },
    "savethesize.config": {"savethesize.errors", "savethesize.engine.container"},
    "savethesize.files": {
        "savethesize.errors",
        "savethesize.config",
        "savethesize.core.codec_deflate",
        "savethesize.engine.container",
        "savethesize.engine.header",
    },
    "savethesize.verify": {
        "savethesize.files",
        "savethesize.engine.container",
        "savethesize.engine.header",
    },
    "savethesize.cli": {
        "savethesize.errors",
        "savethesize.config",
        "savethesize.engine.container",
        "savethesize.files",
        "savethesize.verify",
    },
    "savethesize.__main__": {"savethesize.cli"},
}


def _modules() -> dict[str, Path]:
    out: dict[str, Path] = {}
    for py in PKG_DIR.rglob("*.py"):
        rel = py.relative_to(PKG_DIR.parent).with_suffix("")
        out[".".join(rel.parts)] = py
    return out


def _savethesize_imports(py: Path, known: set[str]) -> set[str]:
    """Absolute savethesize modules imported by ``py``.

    ``from savethesize.engine import container`` counts as an import of
    ``savethesize.engine.container``.
    """
    found: set[str] = set()
    for node in ast.walk(ast.parse(py.read_text(encoding="utf-8"), filename=str(py))):
        if isinstance(node, ast.Import):
            found.update(a.name for a in node.names if a.name.split(".")[0] == "savethesize")
        elif isinstance(node, ast.ImportFrom):
            # relative imports are not used in this package
            assert node.level == 0, f"{py}:{node.lineno} relative import"
            mod = node.module or ""
            if mod.split(".")[0] != "savethesize":
                continue
            for a in node.names:
                sub = f"{mod}.{a.name}"
                found.add(sub if sub in known else mod)
    return found


def test_every_module_has_a_declared_layer() -> None:
    assert set(_modules()) == set(ALLOWED_IMPORTS)


def test_modules_only_import_their_allowed_layers() -> None:
    modules = _modules()
    known = set(modules)

    violations: list[str] = []
    for mod, py in sorted(modules.items()):
        extra = _savethesize_imports(py, known) - ALLOWED_IMPORTS.get(mod, set())
        for dst in sorted(extra):
            violations.append(f"  {mod} -> {dst}")

    assert not violations, "Forbidden savethesize imports:\n" + "\n".join(violations)


def test_engine_does_not_touch_the_filesystem_or_console() -> None:
    """engine/ and core/ are pure byte transforms: no open(), no print()."""
    offenders: list[str] = []
    for d in (PKG_DIR / "engine", PKG_DIR / "core"):
        for py in d.rglob("*.py"):
            tree = ast.parse(py.read_text(encoding="utf-8"), filename=str(py))
            for node in ast.walk(tree):
                if not isinstance(node, ast.Call):
                    continue
                if isinstance(node.func, ast.Name) and node.func.id in {"open", "print"}:
                    offenders.append(f"{py}:{node.lineno} {node.func.id}()")
                if isinstance(node.func, ast.Attribute) and node.func.attr in {
                    "read_bytes",
                    "write_bytes",
                    "exists",
                    "is_file",
                }:
                    offenders.append(f"{py}:{node.lineno} .{node.func.attr}()")

    assert not offenders, "LOW modules must stay pure:\n" + "\n".join(offenders)
