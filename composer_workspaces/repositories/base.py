"""Repository manager interface.

The host dependency resolver owns an ordered list of repositories and
consults them front to back.  The core only ever creates path repositories
and puts them at the front, so that a local sibling always wins over a
same-named published version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from composer_workspaces.models.repository import RepositoryConfig


@dataclass(frozen=True)
class Repository:
    """A repository registered with the resolver."""

    config: RepositoryConfig

    @property
    def type(self) -> str:
        return self.config.type

    @property
    def url(self) -> str | None:
        return self.config.url


@runtime_checkable
class RepositoryManager(Protocol):
    """Protocol for the resolver's mutable, ordered repository list."""

    def create_repository(self, type: str, config: dict[str, Any]) -> Repository:
        """Build a repository of ``type`` from its manifest ``config``."""
        ...

    def prepend_repository(self, repository: Repository) -> None:
        """Insert ``repository`` ahead of all others."""
        ...

    def add_repository(self, repository: Repository) -> None:
        """Append ``repository`` after all others."""
        ...

    @property
    def repositories(self) -> list[Repository]:
        """Repositories in lookup order."""
        ...
