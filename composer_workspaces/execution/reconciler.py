"""Root manifest reconciliation.

Runs after the external merge step has unioned every workspace's
dependencies into the in-memory root manifest.  The on-disk manifest is then
rewritten from its own baseline:

1. ``require`` / ``require-dev`` come from the merged manifest minus every
   workspace name -- siblings resolve through path repositories and must not
   be persisted as registry dependencies.
2. ``autoload`` / ``autoload-dev`` come from the merged manifest verbatim.
3. ``repositories`` is rebuilt: a fresh path repository per workspace first,
   then the baseline's own entries (stale path entries for workspaces
   dropped so repeated installs do not accumulate them).

Every other key keeps its baseline value and position.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from loguru import logger

from composer_workspaces import paths
from composer_workspaces.execution.graph import build_path_repositories
from composer_workspaces.models.enums import RepositoryType

if TYPE_CHECKING:
    from composer_workspaces.models.manifest import Manifest
    from composer_workspaces.root import WorkspaceRoot

DEPENDENCY_SECTIONS = ("require", "require-dev")
AUTOLOAD_SECTIONS = ("autoload", "autoload-dev")


def reconcile_root_manifest(root: WorkspaceRoot, merged: Manifest, *, indent: int = 4) -> Manifest:
    """Rewrite the root manifest on disk and return the reconciled document.

    Raises ``ManifestError`` if either the baseline or the merged manifest is
    malformed; in that case nothing is written.
    """
    baseline = root.read_manifest()
    names = root.workspace_names

    for key in DEPENDENCY_SECTIONS:
        if key in merged:
            baseline[key] = {pkg: constraint for pkg, constraint in merged.section(key).items() if pkg not in names}
        else:
            baseline.pop(key)

    for key in AUTOLOAD_SECTIONS:
        if key in merged:
            baseline[key] = copy.deepcopy(merged.section(key))
        else:
            baseline.pop(key)

    repositories = _rebuild_repositories(root, baseline)
    if repositories or "repositories" in baseline:
        baseline["repositories"] = repositories

    root.write_manifest(baseline, indent=indent)
    logger.info("Reconciled {} ({} workspace names removed)", root.manifest_path, len(names))
    return baseline


def _rebuild_repositories(root: WorkspaceRoot, baseline: Manifest) -> list[dict[str, Any]]:
    fresh = [config.to_document() for config in build_path_repositories(root, root.path)]
    kept = [entry for entry in baseline.repositories() if not _points_at_workspace(root, entry)]
    return fresh + kept


def _points_at_workspace(root: WorkspaceRoot, entry: dict[str, Any]) -> bool:
    """True for a ``path`` entry whose URL is one of the root's workspaces."""
    url = entry.get("url")
    if entry.get("type") != RepositoryType.PATH or not isinstance(url, str):
        return False
    target = paths.join(root.path, url)
    return root.resolve_workspace(target) is not None
