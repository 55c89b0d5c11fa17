"""In-memory repository manager.

Keeps the repository list in process memory.  Used as the default resolver
handle when the package is driven from its own CLI, and as the resolver in
tests.
"""

from __future__ import annotations

from typing import Any

from composer_workspaces.models.repository import RepositoryConfig
from composer_workspaces.repositories.base import Repository


class InMemoryRepositoryManager:
    """In-memory implementation of the RepositoryManager protocol."""

    def __init__(self, repositories: list[Repository] | None = None) -> None:
        self._repositories: list[Repository] = list(repositories or [])

    @classmethod
    def from_configs(cls, configs: list[dict[str, Any]]) -> InMemoryRepositoryManager:
        """Build a manager holding ``configs`` in declaration order."""
        manager = cls()
        for config in configs:
            # Toggles such as {"packagist.org": false} are not repositories.
            if "type" not in config:
                continue
            manager.add_repository(Repository(RepositoryConfig.model_validate(config)))
        return manager

    def create_repository(self, type: str, config: dict[str, Any]) -> Repository:
        return Repository(RepositoryConfig.model_validate({**config, "type": type}))

    def prepend_repository(self, repository: Repository) -> None:
        self._repositories.insert(0, repository)

    def add_repository(self, repository: Repository) -> None:
        self._repositories.append(repository)

    @property
    def repositories(self) -> list[Repository]:
        return list(self._repositories)

    def to_document(self) -> list[dict[str, Any]]:
        """Repositories in lookup order, as manifest entries."""
        return [r.config.to_document() for r in self._repositories]
