"""Helpers for building monorepo trees in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

REGISTRY_REPOSITORY = {"type": "composer", "url": "https://repo.example.org"}

ROOT_MANIFEST: dict[str, Any] = {
    "name": "acme/monorepo",
    "description": "Root package",
    "require": {"lib/x": "^1.0"},
    "autoload": {"psr-4": {"Acme\\": "src/"}},
    "repositories": [REGISTRY_REPOSITORY],
    "extra": {"workspaces": ["packages/*"]},
    "config": {"sort-packages": True},
}


def write_manifest(directory: Path, data: dict[str, Any]) -> Path:
    """Write ``data`` as ``directory/composer.json``, creating the directory."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "composer.json"
    path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
    return path


def read_manifest(directory: Path) -> dict[str, Any]:
    return json.loads((directory / "composer.json").read_text(encoding="utf-8"))
