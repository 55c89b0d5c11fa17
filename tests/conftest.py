"""Shared test fixtures: throwaway monorepos on disk.

The standard layout used across the suite::

    repo/
        composer.json          extra.workspaces = ["packages/*"]
        vendor/
        packages/a/composer.json   name = pkg-a
        packages/b/composer.json   name = pkg-b, requires pkg-a

No network, no host resolver -- path repositories are registered into an
``InMemoryRepositoryManager``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from composer_workspaces.context import InvocationContext
from composer_workspaces.io import BufferedIO
from composer_workspaces.settings import WorkspacesSettings, get_settings
from tests.helpers import ROOT_MANIFEST, write_manifest


# ---------------------------------------------------------------------------
# Settings isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop COMPOSER_WORKSPACES_* env vars and the cached settings instance."""
    for key in list(os.environ):
        if key.startswith("COMPOSER_WORKSPACES_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Monorepo layout
# ---------------------------------------------------------------------------


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """The standard two-workspace monorepo; returns the canonical root path."""
    root = tmp_path / "repo"
    write_manifest(root, ROOT_MANIFEST)
    (root / "vendor").mkdir()
    (root / "vendor" / "autoload.php").write_text("<?php\n", encoding="utf-8")

    write_manifest(
        root / "packages" / "a",
        {"name": "pkg-a", "extra": {"workspace-root": "../.."}},
    )
    write_manifest(
        root / "packages" / "b",
        {"name": "pkg-b", "require": {"pkg-a": "*"}, "extra": {"workspace-root": "../.."}},
    )
    return root.resolve()


@pytest.fixture
def io() -> BufferedIO:
    return BufferedIO()


@pytest.fixture
def settings() -> WorkspacesSettings:
    return WorkspacesSettings()


@pytest.fixture
def make_context(io: BufferedIO, settings: WorkspacesSettings) -> Callable[[Path], InvocationContext]:
    """Factory for an invocation context rooted at a given working directory."""

    def _make(working_dir: Path) -> InvocationContext:
        return InvocationContext(settings=settings, io=io, working_dir=working_dir)

    return _make
