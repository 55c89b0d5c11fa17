"""Lifecycle entry points.

The hosting CLI calls into two fixed extension points:

- :meth:`WorkspacesPlugin.activate` -- before dependency resolution.  A member
  workspace gets a path repository for each of its siblings.
- :meth:`WorkspacesPlugin.on_post_install_or_update` -- after install/update
  at the root.  Reconciles the root manifest, then links every workspace's
  vendor directory to the shared one, in that order.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from composer_workspaces import __version__
from composer_workspaces.context import InvocationContext
from composer_workspaces.errors import MissingWorkspaceRootError, WorkspaceResolutionError
from composer_workspaces.execution.graph import configure_workspace
from composer_workspaces.execution.linker import link_vendor_directories
from composer_workspaces.execution.reconciler import reconcile_root_manifest
from composer_workspaces.io import IOInterface
from composer_workspaces.models.enums import LifecycleEvent
from composer_workspaces.models.manifest import Manifest
from composer_workspaces.models.workspace import WorkspaceConfig
from composer_workspaces.repositories.base import RepositoryManager
from composer_workspaces.repositories.memory import InMemoryRepositoryManager
from composer_workspaces.root import WorkspaceRoot


@dataclass
class Host:
    """What the plugin needs from the hosting dependency manager.

    ``package`` is the manifest of the package being installed.  After the
    external merge step has run at the root, it is the merged document.
    """

    package: Manifest
    repository_manager: RepositoryManager = field(default_factory=InMemoryRepositoryManager)
    repository_manager_factory: Callable[[list[dict[str, Any]]], RepositoryManager] = (
        InMemoryRepositoryManager.from_configs
    )


class WorkspacesPlugin:
    """Drives discovery, path-repository registration and post-install steps."""

    VERSION = __version__

    def __init__(self, host: Host, context: InvocationContext) -> None:
        self.host = host
        self.context = context

    @property
    def io(self) -> IOInterface:
        return self.context.io

    # -- Classification --------------------------------------------------------

    def is_workspace(self) -> bool:
        """The current package declares ``extra.workspace-root``."""
        return self.host.package.is_workspace

    def is_workspace_root(self) -> bool:
        """The current package declares ``extra.workspaces``."""
        return self.host.package.is_workspace_root

    def get_workspace_root(self) -> WorkspaceRoot | None:
        """The root owning the current package, or ``None`` outside a monorepo."""
        registry = self.context.registry
        working_dir = self.context.working_dir

        if self.is_workspace_root():
            return registry.create_workspace_root(working_dir, self.host.package)

        if self.is_workspace():
            config = WorkspaceConfig.from_package(self.host.package, working_dir)
            return registry.create_workspace_root(config.workspace_root_directory)

        return None

    def _require_root(self) -> WorkspaceRoot:
        root = self.get_workspace_root()
        if root is None:
            raise MissingWorkspaceRootError(self.context.working_dir)
        return root

    # -- Activation ------------------------------------------------------------

    def activate(self) -> None:
        """Register path repositories for a member's siblings before the resolver runs.

        Only members are configured.  The root gets its path repositories from
        its own manifest, which post-install keeps up to date.  Raises
        ``WorkspaceResolutionError`` if the working directory of a member is
        not one of the root's discovered workspaces.
        """
        if not self.is_workspace():
            logger.debug("Nothing to activate: {} is not a workspace", self.context.working_dir)
            return

        root = self._require_root()
        workspace = root.resolve_workspace(self.context.working_dir)
        if workspace is None:
            raise WorkspaceResolutionError(self.context.working_dir)
        configure_workspace(root, workspace, self.host.repository_manager)
        logger.info("Activated workspace {} ({})", workspace.name, workspace.relative_path)

    # -- Post install / update -------------------------------------------------

    def on_post_install_or_update(self, event: LifecycleEvent = LifecycleEvent.POST_INSTALL_CMD) -> None:
        """Reconcile the root manifest, then link vendor directories.

        Only the root runs these steps; members return immediately.
        """
        if not self.is_workspace_root():
            logger.debug("Skipping {}: {} is not a workspace root", event, self.context.working_dir)
            return

        logger.debug("Handling {}", event)
        self.clean_up_after_merge()
        self.symlink_vendor()

    def clean_up_after_merge(self) -> Manifest:
        """Reconcile the merged root manifest and rebuild the resolver from it."""
        self.io.write("Cleaning up after merge plugin..")

        root = self._require_root()
        reconciled = reconcile_root_manifest(root, self.host.package, indent=self.context.settings.json_indent)
        self.fix_repositories(reconciled)
        return reconciled

    def fix_repositories(self, manifest: Manifest) -> None:
        """Replace the host's repository manager with one built from ``manifest``."""
        self.host.repository_manager = self.host.repository_manager_factory(manifest.repositories())

    def symlink_vendor(self) -> list[Path]:
        """Link every workspace's vendor directory to the root's shared one."""
        if not self.is_workspace_root():
            return []

        self.io.write("Symlinking vendor for workspaces..")

        root = self._require_root()
        return link_vendor_directories(root)
