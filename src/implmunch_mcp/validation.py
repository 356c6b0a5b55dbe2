"""Identifier and path validation for untrusted input.

Symbol names end up inside search patterns and file paths end up in file
reads and search commands, so both are checked before use. The validators
never raise; the ensure_* wrappers turn a rejection into ValidationError for
callers that want to abort a request.
"""

import os
import re
from pathlib import Path
from typing import Iterable, Optional

from .errors import ValidationError
from .parser.languages import RUST_SPEC

# Bare or generic/path-qualified identifier: "Point", "Vec<T, U>", "geo::Point"
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_<>:, ]*")

# Characters never accepted in a path
_UNSAFE_PATH_CHARS = set(";|&`$\"'<>\n\r\t\0*?")


def validate_identifier(name) -> bool:
    """Check that name is a (possibly generic or path-qualified) identifier."""
    if not isinstance(name, str):
        return False
    return _IDENTIFIER.fullmatch(name) is not None


def default_known_roots(workspace_root: Optional[str] = None, environ=None) -> list[str]:
    """Directories source files may be read from.

    The workspace, the toolchain documentation directory, and the dependency
    caches (registry and git checkouts).
    """
    environ = os.environ if environ is None else environ
    home = Path.home()
    cargo_home = Path(environ.get("CARGO_HOME") or home / ".cargo")
    rustup_home = Path(environ.get("RUSTUP_HOME") or home / ".rustup")

    roots = []
    if workspace_root:
        roots.append(str(workspace_root))
    roots.append(str(rustup_home))
    roots.append(str(cargo_home / "registry"))
    roots.append(str(cargo_home / "git"))
    return roots


def is_within(path: str, root: str) -> bool:
    """Check containment by path components (no string-prefix matching)."""
    try:
        Path(os.path.normpath(path)).relative_to(os.path.normpath(root))
        return True
    except ValueError:
        return False


def validate_path(path, known_roots: Iterable[str], extension: str = RUST_SPEC.extension) -> bool:
    """Check that path is an absolute source file under one of known_roots."""
    if not isinstance(path, str) or not path:
        return False

    if any(ch in _UNSAFE_PATH_CHARS for ch in path) or "$(" in path:
        return False

    if not os.path.isabs(path) or not path.endswith(extension):
        return False

    normalized = os.path.normpath(path)
    for root in known_roots:
        if not root or not os.path.isabs(root):
            continue
        if is_within(normalized, root):
            return True

    return False


def ensure_identifier(name, what: str = "identifier") -> str:
    """Return name unchanged, or raise ValidationError."""
    if not validate_identifier(name):
        raise ValidationError(f"Invalid {what}: {name!r}")
    return name


def ensure_path(path, known_roots: Iterable[str]) -> str:
    """Return the normalized path, or raise ValidationError."""
    if not validate_path(path, known_roots):
        raise ValidationError(f"Unsafe file path: {path!r}")
    return os.path.normpath(path)
