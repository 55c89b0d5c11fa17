"""Invocation context.

Everything one host invocation shares -- settings, the I/O collaborator and
the workspace root registry -- is held here and passed explicitly to the
plugin, so no discovery state outlives the invocation that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from composer_workspaces.io import ConsoleIO, IOInterface
from composer_workspaces.registry import WorkspaceRootRegistry
from composer_workspaces.settings import WorkspacesSettings, get_settings


@dataclass
class InvocationContext:
    """State for a single CLI invocation or host lifecycle run.

    Created once at process start and threaded through every discovery and
    resolution call; discarded when the invocation ends.
    """

    settings: WorkspacesSettings = field(default_factory=get_settings)
    io: IOInterface = field(default_factory=ConsoleIO)
    working_dir: Path = field(default_factory=Path.cwd)

    registry: WorkspaceRootRegistry = field(init=False)
    """Cache of roots discovered during this invocation."""

    def __post_init__(self) -> None:
        self.registry = WorkspaceRootRegistry(self.io, self.settings)
