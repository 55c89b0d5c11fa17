"""Repository descriptors as they appear in a manifest's ``repositories`` list."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from composer_workspaces.models.enums import RepositoryType


class RepositoryConfig(BaseModel):
    """A single ``{type, url, ...}`` entry.

    Unknown keys (``options``, ``canonical``, ``only``...) are kept so registry
    entries round-trip through reconciliation unchanged.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    url: str | None = None

    @classmethod
    def path(cls, url: str) -> RepositoryConfig:
        return cls(type=RepositoryType.PATH.value, url=url)

    @property
    def is_path(self) -> bool:
        return self.type == RepositoryType.PATH

    def to_document(self) -> dict[str, Any]:
        """Dump in manifest order: ``type``, ``url``, then any extra keys."""
        return self.model_dump(exclude_none=True)
