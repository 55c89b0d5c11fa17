"""Local path-repository graph.

For the package being installed, every sibling workspace becomes a ``path``
repository whose URL is the sibling's directory relative to the package.
Those repositories are put at the front of the resolver's list so that a
local sibling always shadows a same-named published version.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from composer_workspaces.models.enums import RepositoryType
from composer_workspaces.models.repository import RepositoryConfig

if TYPE_CHECKING:
    from composer_workspaces.models.workspace import Workspace
    from composer_workspaces.repositories.base import RepositoryManager
    from composer_workspaces.root import WorkspaceRoot


def build_path_repositories(
    root: WorkspaceRoot,
    from_path: Path,
    *,
    exclude_relative_path: str | None = None,
) -> list[RepositoryConfig]:
    """Path repositories reaching every workspace of ``root`` from ``from_path``.

    The workspace whose relative path equals ``exclude_relative_path`` is
    skipped.  Exclusion is by location, not by name, so two workspaces that
    declare the same name in different directories stay distinct.
    Descriptors follow discovery order.
    """
    return [
        RepositoryConfig.path(other.get_path_relative_to(from_path))
        for other in root.workspaces
        if other.relative_path != exclude_relative_path
    ]


def configure_workspace(root: WorkspaceRoot, workspace: Workspace, repository_manager: RepositoryManager) -> None:
    """Prepend a path repository for every sibling of ``workspace``.

    Must run before the resolver starts: the mutated list is what resolution
    reads.
    """
    configs = build_path_repositories(
        root,
        workspace.absolute_path,
        exclude_relative_path=workspace.relative_path,
    )
    for config in configs:
        repository = repository_manager.create_repository(RepositoryType.PATH.value, config.to_document())
        repository_manager.prepend_repository(repository)

    logger.debug("Registered {} path repositories for {}", len(configs), workspace.name)
