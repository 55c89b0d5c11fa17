"""Neutral manifest document model.

A manifest is an ordered key-value document (``composer.json``).  It is kept
as plain dicts and lists so that keys this package never touches round-trip in
their original order; typed accessors validate only the sections the core
reads.

Conversions are explicit: :meth:`Manifest.loads` / :meth:`Manifest.load` from
text or disk, :meth:`Manifest.from_document` from an in-memory mapping, and
:meth:`Manifest.dumps` / :meth:`Manifest.to_document` back out.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from composer_workspaces.errors import ManifestError

EXTRA_WORKSPACES = "workspaces"
EXTRA_WORKSPACE_ROOT = "workspace-root"


class Manifest:
    """Ordered manifest document.

    ``path`` is the file the document was read from, if any; it is only used
    to name the offending file in error messages.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, *, path: Path | None = None) -> None:
        self._data: dict[str, Any] = dict(data) if data is not None else {}
        self.path = path

    # -- Conversions -----------------------------------------------------------

    @classmethod
    def loads(cls, text: str, *, path: Path | None = None) -> Manifest:
        """Parse JSON text.  Raises ``ManifestError`` unless it is a JSON object."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(path, f"invalid JSON ({exc})") from None
        if not isinstance(data, dict):
            raise ManifestError(path, "top-level value must be an object")
        return cls(data, path=path)

    @classmethod
    def load(cls, path: Path) -> Manifest:
        """Read and parse a manifest file.  Raises ``ManifestError`` on any failure."""
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(path, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ManifestError(path, f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
        return cls.loads(text, path=path)

    @classmethod
    def from_document(cls, data: Mapping[str, Any], *, path: Path | None = None) -> Manifest:
        """Build a manifest from a mapping (deep-copied)."""
        if not isinstance(data, Mapping):
            raise ManifestError(path, "top-level value must be an object")
        return cls(copy.deepcopy(dict(data)), path=path)

    def to_document(self) -> dict[str, Any]:
        """Deep copy of the underlying document."""
        return copy.deepcopy(self._data)

    def dumps(self, indent: int = 4) -> str:
        """Serialize in document order with a trailing newline.

        Forward slashes are never escaped; non-ASCII characters are escaped
        the way ``composer.json`` files written by PHP tooling are.
        """
        return json.dumps(self._data, indent=indent) + "\n"

    # -- Mapping access --------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Manifest):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Manifest(name={self.name!r}, path={self.path!r})"

    def pop(self, key: str, default: Any = None) -> Any:
        return self._data.pop(key, default)

    # -- Typed sections --------------------------------------------------------

    @property
    def name(self) -> str | None:
        value = self._data.get("name")
        return value if isinstance(value, str) and value else None

    @property
    def extra(self) -> dict[str, Any]:
        return self.section("extra")

    @property
    def is_workspace_root(self) -> bool:
        """Declares ``extra.workspaces`` (a glob list)."""
        return EXTRA_WORKSPACES in self.extra

    @property
    def is_workspace(self) -> bool:
        """Declares ``extra.workspace-root`` (a pointer to its root)."""
        return EXTRA_WORKSPACE_ROOT in self.extra

    @property
    def workspace_globs(self) -> list[str]:
        """The ``extra.workspaces`` glob list.  Raises ``ManifestError`` if malformed."""
        globs = self.extra.get(EXTRA_WORKSPACES)
        if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
            raise ManifestError(self.path, "extra.workspaces must be a list of glob strings")
        return list(globs)

    def section(self, key: str) -> dict[str, Any]:
        """Return a mapping section (``require``, ``autoload``...), empty if absent.

        PHP serializes an empty map as ``[]``, so an empty list is accepted as
        an empty section.
        """
        value = self._data.get(key)
        if value is None or value == []:
            return {}
        if not isinstance(value, dict):
            raise ManifestError(self.path, f'"{key}" must be an object')
        return value

    def repositories(self) -> list[dict[str, Any]]:
        """The ``repositories`` entries in declaration order.

        Both the list form and the legacy keyed-object form are accepted; in
        the keyed form a scalar entry such as ``"packagist.org": false``
        becomes ``{"packagist.org": false}``.
        """
        value = self._data.get("repositories")
        if value is None:
            return []
        if isinstance(value, dict):
            value = [v if isinstance(v, dict) else {k: v} for k, v in value.items()]
        if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
            raise ManifestError(self.path, '"repositories" must be a list of objects')
        return value
