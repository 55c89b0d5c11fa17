"""Data models for workspace discovery and reconciliation."""

from composer_workspaces.models.enums import LifecycleEvent, RepositoryType
from composer_workspaces.models.manifest import Manifest
from composer_workspaces.models.repository import RepositoryConfig
from composer_workspaces.models.workspace import Workspace, WorkspaceConfig

__all__ = [
    # Enums
    "LifecycleEvent",
    # Documents
    "Manifest",
    "RepositoryConfig",
    "RepositoryType",
    # Workspaces
    "Workspace",
    "WorkspaceConfig",
]
