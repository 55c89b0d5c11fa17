"""Repository manager protocol and implementations."""

from composer_workspaces.repositories.base import Repository, RepositoryManager
from composer_workspaces.repositories.memory import InMemoryRepositoryManager

__all__ = ["InMemoryRepositoryManager", "Repository", "RepositoryManager"]
