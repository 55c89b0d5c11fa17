"""Workspace root registry.

Maps canonical root directories to their ``WorkspaceRoot`` so that every
lookup within one invocation reuses a single discovery scan.  Ephemeral --
a registry lives on the ``InvocationContext`` and is never invalidated; a new
invocation starts with an empty one.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from composer_workspaces import paths
from composer_workspaces.models.manifest import Manifest
from composer_workspaces.root import WorkspaceRoot
from composer_workspaces.settings import WorkspacesSettings

if TYPE_CHECKING:
    from composer_workspaces.io import IOInterface


class WorkspaceRootRegistry:
    """Per-invocation cache of discovered workspace roots.

    A cache hit returns the existing instance and ignores any manifest passed
    in: one scan per root per invocation is the contract, even if the caller
    holds a newer manifest.
    """

    def __init__(self, io: IOInterface, settings: WorkspacesSettings | None = None) -> None:
        self.io = io
        self.settings = settings or WorkspacesSettings()
        self._roots: dict[Path, WorkspaceRoot] = {}

    # -- Mutation --------------------------------------------------------------

    def create_workspace_root(self, path: Path | str, manifest: Manifest | None = None) -> WorkspaceRoot:
        """Return the root at ``path``, discovering it on first request.

        When ``manifest`` is omitted (deriving the root from a member), the
        glob list is read from the root's own manifest on disk.  Raises
        ``ManifestError`` if that manifest is unreadable or has no glob list.
        """
        key = paths.canonicalize(path)
        cached = self._roots.get(key)
        if cached is not None:
            return cached

        root = WorkspaceRoot(
            self.io,
            key,
            manifest_filename=self.settings.manifest_filename,
            vendor_dirname=self.settings.vendor_dirname,
            fail_on_duplicate_names=self.settings.fail_on_duplicate_names,
        )
        if manifest is None:
            manifest = root.read_manifest()

        root.set_globs(manifest.workspace_globs)
        root.scan_workspaces()

        logger.debug("Registry: cached workspace root {} ({} workspaces)", key, len(root.workspaces))
        self._roots[key] = root
        return root

    # -- Query -----------------------------------------------------------------

    @property
    def roots(self) -> list[WorkspaceRoot]:
        """Snapshot of all discovered roots."""
        return list(self._roots.values())
