"""Lifecycle tests: activation and post-install, driven through WorkspacesPlugin.

The host's resolver is an ``InMemoryRepositoryManager``; everything else is
real files under ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from composer_workspaces.context import InvocationContext
from composer_workspaces.errors import ManifestError, WorkspaceResolutionError
from composer_workspaces.execution.linker import is_linked
from composer_workspaces.io import BufferedIO
from composer_workspaces.models.enums import LifecycleEvent
from composer_workspaces.models.manifest import Manifest
from composer_workspaces.plugin import Host, WorkspacesPlugin
from composer_workspaces.repositories.memory import InMemoryRepositoryManager
from tests.helpers import REGISTRY_REPOSITORY, ROOT_MANIFEST, read_manifest, write_manifest

ContextFactory = Callable[[Path], InvocationContext]


def _plugin(context: InvocationContext, package: Manifest | None = None) -> WorkspacesPlugin:
    manifest = package or Manifest.load(context.working_dir / "composer.json")
    host = Host(package=manifest, repository_manager=InMemoryRepositoryManager.from_configs([REGISTRY_REPOSITORY]))
    return WorkspacesPlugin(host, context)


def _merged_manifest() -> Manifest:
    """What the external merge step leaves in memory at the root."""
    merged = Manifest.from_document(ROOT_MANIFEST)
    merged["require"] = {"lib/x": "^1.0", "pkg-a": "*", "lib/y": "^2.0"}
    merged["autoload"] = {"psr-4": {"Acme\\": "src/", "PkgA\\": "packages/a/src/"}}
    return merged


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def test_classification(repo: Path, make_context: ContextFactory) -> None:
    root_plugin = _plugin(make_context(repo))
    member_plugin = _plugin(make_context(repo / "packages" / "a"))

    assert root_plugin.is_workspace_root()
    assert not root_plugin.is_workspace()
    assert member_plugin.is_workspace()
    assert not member_plugin.is_workspace_root()


def test_plain_package_has_no_root(tmp_path: Path, make_context: ContextFactory) -> None:
    write_manifest(tmp_path / "solo", {"name": "solo/pkg"})
    plugin = _plugin(make_context(tmp_path / "solo"))

    assert plugin.get_workspace_root() is None

    plugin.activate()
    plugin.on_post_install_or_update()

    assert [r.type for r in plugin.host.repository_manager.repositories] == ["composer"]


def test_lookups_share_one_scan(repo: Path, make_context: ContextFactory) -> None:
    context = make_context(repo / "packages" / "b")
    plugin = _plugin(context)

    root = plugin.get_workspace_root()

    assert plugin.get_workspace_root() is root
    assert context.registry.create_workspace_root(repo, Manifest.load(repo / "composer.json")) is root
    assert context.registry.roots == [root]


# ---------------------------------------------------------------------------
# Activation
# ---------------------------------------------------------------------------


def test_activate_member_registers_siblings(repo: Path, make_context: ContextFactory) -> None:
    """Installing inside packages/b gives one path repository, to ../a, ahead of the registry."""
    plugin = _plugin(make_context(repo / "packages" / "b"))

    plugin.activate()

    assert plugin.host.repository_manager.to_document() == [
        {"type": "path", "url": "../a"},
        REGISTRY_REPOSITORY,
    ]


def test_activate_root_leaves_resolver_alone(repo: Path, make_context: ContextFactory) -> None:
    plugin = _plugin(make_context(repo))

    plugin.activate()

    assert plugin.host.repository_manager.to_document() == [REGISTRY_REPOSITORY]


def test_activate_root_after_post_install_has_no_duplicates(repo: Path, make_context: ContextFactory) -> None:
    """The next install at the root reads its path repositories from the reconciled manifest only once."""
    _plugin(make_context(repo), _merged_manifest()).on_post_install_or_update()

    reconciled = Manifest.load(repo / "composer.json")
    manager = InMemoryRepositoryManager.from_configs(reconciled.repositories())
    host = Host(package=reconciled, repository_manager=manager)
    plugin = WorkspacesPlugin(host, make_context(repo))

    plugin.activate()

    assert [r.url for r in manager.repositories] == [
        "packages/a",
        "packages/b",
        REGISTRY_REPOSITORY["url"],
    ]


def test_activate_unlisted_member_fails(repo: Path, make_context: ContextFactory) -> None:
    """A package pointing at the root from a directory no glob matches cannot be resolved."""
    write_manifest(repo / "tools" / "lint", {"name": "tool-lint", "extra": {"workspace-root": "../.."}})
    plugin = _plugin(make_context(repo / "tools" / "lint"))

    with pytest.raises(WorkspaceResolutionError, match="tools/lint"):
        plugin.activate()

    assert plugin.host.repository_manager.to_document() == [REGISTRY_REPOSITORY]


def test_activate_member_with_missing_root_manifest(tmp_path: Path, make_context: ContextFactory) -> None:
    write_manifest(tmp_path / "orphan" / "pkg", {"name": "orphan", "extra": {"workspace-root": ".."}})
    plugin = _plugin(make_context(tmp_path / "orphan" / "pkg"))

    with pytest.raises(ManifestError):
        plugin.activate()


# ---------------------------------------------------------------------------
# Post install / update
# ---------------------------------------------------------------------------


def test_post_install_at_root(repo: Path, make_context: ContextFactory, io: BufferedIO) -> None:
    (repo / "packages" / "a" / "vendor").mkdir()
    plugin = _plugin(make_context(repo), _merged_manifest())

    plugin.on_post_install_or_update(LifecycleEvent.POST_UPDATE_CMD)

    on_disk = read_manifest(repo)
    assert on_disk["require"] == {"lib/x": "^1.0", "lib/y": "^2.0"}
    assert on_disk["autoload"] == {"psr-4": {"Acme\\": "src/", "PkgA\\": "packages/a/src/"}}
    assert on_disk["repositories"][-1] == REGISTRY_REPOSITORY

    for name in ("a", "b"):
        assert is_linked(repo / "packages" / name / "vendor", repo / "vendor")

    assert [r.url for r in plugin.host.repository_manager.repositories] == [
        "packages/a",
        "packages/b",
        REGISTRY_REPOSITORY["url"],
    ]
    assert io.lines.index("Cleaning up after merge plugin..") < io.lines.index("Symlinking vendor for workspaces..")


def test_post_install_at_member_is_a_no_op(repo: Path, make_context: ContextFactory, io: BufferedIO) -> None:
    before = (repo / "composer.json").read_text(encoding="utf-8")
    plugin = _plugin(make_context(repo / "packages" / "b"))

    plugin.on_post_install_or_update(LifecycleEvent.POST_INSTALL_CMD)

    assert (repo / "composer.json").read_text(encoding="utf-8") == before
    assert not (repo / "packages" / "a" / "vendor").exists()
    assert io.lines == []
    assert plugin.symlink_vendor() == []


def test_post_install_repeated(repo: Path, make_context: ContextFactory) -> None:
    """A second install produces the same manifest and leaves the links alone."""
    _plugin(make_context(repo), _merged_manifest()).on_post_install_or_update()
    first = (repo / "composer.json").read_text(encoding="utf-8")

    plugin = _plugin(make_context(repo), _merged_manifest())
    plugin.on_post_install_or_update()

    assert (repo / "composer.json").read_text(encoding="utf-8") == first
    assert plugin.symlink_vendor() == []


def test_clean_up_returns_reconciled(repo: Path, make_context: ContextFactory) -> None:
    plugin = _plugin(make_context(repo), _merged_manifest())

    reconciled = plugin.clean_up_after_merge()

    assert reconciled.to_document() == read_manifest(repo)
    assert "pkg-a" not in reconciled.section("require")
