"""Workspace root: discovery and lookup of member packages.

A root is the monorepo's top-level directory.  Its manifest declares
``extra.workspaces``, a list of directory globs relative to the root; every
glob match holding a manifest file directly inside it (no recursion below the
match) is a workspace, indexed by its declared package name.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from loguru import logger

from composer_workspaces import paths
from composer_workspaces.errors import DuplicateWorkspaceError, ManifestError
from composer_workspaces.models.manifest import Manifest
from composer_workspaces.models.workspace import Workspace

if TYPE_CHECKING:
    from composer_workspaces.io import IOInterface


class WorkspaceRoot:
    """The set of workspaces discovered under one root directory.

    Populated by a single :meth:`scan_workspaces` pass and read-only
    afterwards.  Workspaces keep scan order; when two directories declare the
    same name the later one wins (or ``DuplicateWorkspaceError`` is raised
    when ``fail_on_duplicate_names`` is set).
    """

    def __init__(
        self,
        io: IOInterface,
        path: Path | str,
        *,
        manifest_filename: str = "composer.json",
        vendor_dirname: str = "vendor",
        fail_on_duplicate_names: bool = False,
    ) -> None:
        self.io = io
        self.path = paths.canonicalize(path)
        self.manifest_filename = manifest_filename
        self.vendor_dirname = vendor_dirname
        self.fail_on_duplicate_names = fail_on_duplicate_names
        self._globs: list[str] = []
        self._workspaces: dict[str, Workspace] = {}

    def __repr__(self) -> str:
        return f"WorkspaceRoot(path={str(self.path)!r}, workspaces={list(self._workspaces)!r})"

    # -- Configuration ---------------------------------------------------------

    def set_globs(self, globs: list[str]) -> WorkspaceRoot:
        """Store the workspace globs, relative to the root.

        Raises ``ManifestError`` (naming the root manifest) for an absolute
        pattern or one that denotes the root itself.
        """
        normalized: list[str] = []
        for glob in globs:
            pattern = paths.normalize(glob)
            if PurePosixPath(pattern).is_absolute() or Path(glob).is_absolute():
                raise ManifestError(self.manifest_path, f"workspace glob {glob!r} must be relative to the root")
            if pattern == ".":
                raise ManifestError(self.manifest_path, f"workspace glob {glob!r} matches the root itself")
            normalized.append(pattern)

        self._globs = normalized
        return self

    @property
    def globs(self) -> list[Path]:
        """Glob patterns joined to the root path."""
        return [self.path / g for g in self._globs]

    # -- Discovery -------------------------------------------------------------

    def scan_workspaces(self) -> None:
        """Discover workspaces matching the configured globs.

        A manifest that cannot be loaded or has no ``name`` is skipped with a
        warning; the scan always continues.
        """
        for manifest_path in self._candidate_manifests():
            try:
                workspace = Workspace.from_file(manifest_path, self.path, vendor_dirname=self.vendor_dirname)
            except ManifestError as exc:
                logger.warning("Skipping {}: {}", manifest_path.parent, exc.reason)
                self.io.write_error(f"Skipped {manifest_path.parent}: could not load package. {exc.reason}")
                continue

            self._add(workspace)

        logger.debug("Discovered {} workspace(s) under {}", len(self._workspaces), self.path)

    def _candidate_manifests(self) -> list[Path]:
        found: list[Path] = []
        seen: set[Path] = set()
        for pattern in self._globs:
            matches = sorted(d for d in self.path.glob(pattern) if d.is_dir())
            if not matches:
                logger.debug("Glob {!r} matched no directories under {}", pattern, self.path)
            for directory in matches:
                if not paths.is_descendant(directory, self.path):
                    logger.warning("Skipping {}: outside of workspace root {}", directory, self.path)
                    self.io.write_error(f"Skipped {directory}: not inside the workspace root {self.path}")
                    continue
                manifest_path = directory / self.manifest_filename
                if manifest_path in seen or not manifest_path.is_file():
                    continue
                seen.add(manifest_path)
                found.append(manifest_path)
        return found

    def _add(self, workspace: Workspace) -> None:
        existing = self._workspaces.get(workspace.name)
        if existing is not None and existing.absolute_path != workspace.absolute_path:
            if self.fail_on_duplicate_names:
                raise DuplicateWorkspaceError(workspace.name, existing.absolute_path, workspace.absolute_path)
            logger.warning(
                "Duplicate workspace name {!r}: {} replaces {}",
                workspace.name,
                workspace.relative_path,
                existing.relative_path,
            )
            self.io.write_error(
                f'Workspace name "{workspace.name}" is declared by both '
                f"{existing.relative_path} and {workspace.relative_path}; using {workspace.relative_path}"
            )
        self._workspaces[workspace.name] = workspace

    # -- Query -----------------------------------------------------------------

    @property
    def workspaces(self) -> list[Workspace]:
        """Workspaces in discovery order."""
        return list(self._workspaces.values())

    @property
    def workspace_names(self) -> set[str]:
        return set(self._workspaces)

    def get_workspace_by_name(self, name: str) -> Workspace | None:
        return self._workspaces.get(name)

    def has_workspace(self, name: str) -> bool:
        return name in self._workspaces

    def resolve_workspace(self, path: Path | str) -> Workspace | None:
        """Return the workspace whose directory is exactly ``path``.

        Subdirectories of a workspace do not match.
        """
        target = paths.canonicalize(path)
        for workspace in self._workspaces.values():
            if workspace.absolute_path == target:
                return workspace
        return None

    def get_path_relative_to(self, path: Path | str) -> str:
        """Relative path from the root directory to ``path``."""
        return paths.relative_path(path, self.path)

    # -- Root files ------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        return self.path / self.manifest_filename

    @property
    def vendor_directory(self) -> Path:
        return self.path / self.vendor_dirname

    def read_manifest(self) -> Manifest:
        """Load the root manifest as it currently is on disk."""
        return Manifest.load(self.manifest_path)

    def write_manifest(self, manifest: Manifest, *, indent: int = 4) -> None:
        """Atomically replace the root manifest with ``manifest``."""
        _atomic_write(self.manifest_path, manifest.dumps(indent=indent))
        logger.debug("Wrote {}", self.manifest_path)


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    Ensures readers never see a partially-written manifest.  The temp file is
    created in the same directory so ``os.replace`` is atomic on POSIX.
    """
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
