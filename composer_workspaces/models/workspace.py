"""Workspace value objects.

A :class:`Workspace` is one discovered member package; a
:class:`WorkspaceConfig` is what a member declares about its root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from composer_workspaces import paths
from composer_workspaces.errors import ManifestError, MissingWorkspaceRootError
from composer_workspaces.models.manifest import EXTRA_WORKSPACE_ROOT, Manifest


@dataclass(frozen=True)
class Workspace:
    """A package discovered under a workspace root.

    Immutable after construction and owned by its ``WorkspaceRoot``.
    """

    name: str
    absolute_path: Path
    relative_path: str
    """POSIX path relative to the owning root, e.g. ``packages/a``."""

    manifest: Manifest = field(compare=False, repr=False)
    vendor_dirname: str = field(default="vendor", compare=False, repr=False)

    @classmethod
    def from_file(cls, manifest_path: Path, root_path: Path, *, vendor_dirname: str = "vendor") -> Workspace:
        """Load a workspace from its manifest file.

        Raises ``ManifestError`` if the manifest is unreadable, unparsable or
        has no ``name``.
        """
        manifest = Manifest.load(manifest_path)
        name = manifest.name
        if name is None:
            raise ManifestError(manifest_path, "no 'name' field found")

        absolute_path = paths.canonicalize(manifest_path.parent)
        return cls(
            name=name,
            absolute_path=absolute_path,
            relative_path=paths.relative_path(absolute_path, root_path),
            manifest=manifest,
            vendor_dirname=vendor_dirname,
        )

    @property
    def vendor_directory(self) -> Path:
        return self.absolute_path / self.vendor_dirname

    def get_path_relative_to(self, path: Path | str) -> str:
        """How a package at ``path`` reaches this workspace on disk."""
        return paths.relative_path(self.absolute_path, path)


class WorkspaceConfig(BaseModel):
    """Workspace settings a member package declares in its ``extra`` block."""

    model_config = ConfigDict(frozen=True)

    workspace_root_directory: Path
    """Absolute path of the owning root, resolved against the member directory."""

    @classmethod
    def from_package(cls, manifest: Manifest, package_dir: Path | str) -> WorkspaceConfig:
        """Read ``extra.workspace-root`` from ``manifest``.

        Raises ``MissingWorkspaceRootError`` if the pointer is absent or not a
        string.
        """
        pointer = manifest.extra.get(EXTRA_WORKSPACE_ROOT)
        if not isinstance(pointer, str) or not pointer:
            raise MissingWorkspaceRootError(package_dir)
        return cls(workspace_root_directory=paths.join(package_dir, pointer))
