"""Shared enumerations."""

from __future__ import annotations

from enum import StrEnum

# -- Repositories ------------------------------------------------------------


class RepositoryType(StrEnum):
    """Repository types understood by the host resolver.

    Only ``path`` repositories are created here; the others appear in root
    manifests and must survive reconciliation untouched.
    """

    PATH = "path"
    COMPOSER = "composer"
    VCS = "vcs"
    PACKAGE = "package"
    ARTIFACT = "artifact"


# -- Lifecycle ---------------------------------------------------------------


class LifecycleEvent(StrEnum):
    """Host events after which the post-install hook runs."""

    POST_PACKAGE_INSTALL = "post-package-install"
    POST_INSTALL_CMD = "post-install-cmd"
    POST_UPDATE_CMD = "post-update-cmd"
