"""Domain exceptions.

Core modules raise these, never ``click`` exceptions -- translating them into
a process exit is the CLI's responsibility.
"""

from __future__ import annotations

from pathlib import Path


class WorkspacesError(RuntimeError):
    """Base class for all workspace errors."""


class ManifestError(WorkspacesError, ValueError):
    """A manifest could not be read, parsed, or has an invalid shape."""

    def __init__(self, path: Path | str | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        if path is None:
            super().__init__(f"Invalid manifest: {reason}")
        else:
            super().__init__(f'Invalid manifest "{path}": {reason}')


class MissingWorkspaceRootError(WorkspacesError, ValueError):
    """The package does not declare ``extra.workspace-root``."""

    def __init__(self, package_dir: Path | str) -> None:
        self.package_dir = package_dir
        super().__init__(f'Package at "{package_dir}" does not declare extra.workspace-root')


class WorkspaceResolutionError(WorkspacesError, LookupError):
    """A path does not correspond to any discovered workspace."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f'Could not resolve workspace for path "{path}"')


class DuplicateWorkspaceError(WorkspacesError, ValueError):
    """Two discovered directories declare the same package name."""

    def __init__(self, name: str, first: Path, second: Path) -> None:
        self.name = name
        super().__init__(f'Workspace name "{name}" is declared by both "{first}" and "{second}"')


class LinkError(WorkspacesError):
    """Replacing a vendor directory with a link failed."""

    def __init__(self, link: Path, target: Path, reason: str) -> None:
        self.link = link
        self.target = target
        super().__init__(f'Could not link "{link}" to "{target}": {reason}')
