"""Path algebra for workspace discovery and path repositories.

All functions are pure except :func:`canonicalize`, which consults the
filesystem to resolve symlinks.  Relative paths are always returned in POSIX
form (forward slashes, no trailing slash, ``.`` for the same directory) so they
can be written to manifests verbatim on every platform.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path, PurePosixPath


def canonicalize(path: str | os.PathLike[str]) -> Path:
    """Return the absolute, symlink-resolved form of ``path``."""
    return Path(path).expanduser().resolve()


def normalize(path: str | os.PathLike[str]) -> str:
    """Normalize a relative or absolute path to POSIX form.

    Collapses ``.`` / ``..`` segments and duplicate separators and strips any
    trailing slash::

        >>> normalize("packages\\\\a/../b/")
        'packages/b'
    """
    raw = os.fspath(path).replace("\\", "/")
    if not raw:
        return "."
    return posixpath.normpath(raw)


def relative_path(target: str | os.PathLike[str], start: str | os.PathLike[str]) -> str:
    """Path of ``target`` relative to the directory ``start``.

    Both paths are canonicalized first, so the result is stable no matter how
    the caller spelled them.
    """
    rel = os.path.relpath(canonicalize(target), canonicalize(start))
    return normalize(rel)


def join(base: str | os.PathLike[str], relative: str) -> Path:
    """Resolve a POSIX ``relative`` path against ``base``."""
    return canonicalize(Path(base) / PurePosixPath(normalize(relative)))


def is_descendant(path: str | os.PathLike[str], ancestor: str | os.PathLike[str]) -> bool:
    """True when ``path`` lies strictly below ``ancestor``."""
    child, parent = canonicalize(path), canonicalize(ancestor)
    return child != parent and child.is_relative_to(parent)
