"""Shared vendor directory linking.

After an install at the workspace root, each workspace's own vendor directory
is replaced by a symlink to the root's shared one.

The replacement never leaves a workspace without a vendor directory: the
link is created under a temporary alias next to the target, verified, and
renamed into place; the previous directory is moved aside first and only
deleted once the link is in place.  Any failure restores it.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from composer_workspaces.errors import LinkError

if TYPE_CHECKING:
    from composer_workspaces.root import WorkspaceRoot


def link_vendor_directories(root: WorkspaceRoot) -> list[Path]:
    """Link every workspace's vendor directory to the root's.

    Returns the links created.  Workspaces already linked to the shared
    directory are left alone.  Raises ``LinkError`` on the first failure.
    """
    target = root.vendor_directory
    created: list[Path] = []

    for workspace in root.workspaces:
        link = workspace.vendor_directory
        if is_linked(link, target):
            logger.debug("{} already links to {}", link, target)
            continue

        replace_with_link(link, target)
        created.append(link)
        logger.debug("Linked {} -> {}", link, target)

    return created


def is_linked(link: Path, target: Path) -> bool:
    return link.is_symlink() and link.readlink() == target


def replace_with_link(link: Path, target: Path) -> None:
    """Atomically make ``link`` a symlink to ``target``.

    Whatever was at ``link`` (directory, file, stale link or nothing) is
    replaced.  Raises ``LinkError``; on failure ``link`` is as it was.
    """
    try:
        staging = Path(tempfile.mkdtemp(dir=link.parent, prefix=f".{link.name}."))
    except OSError as exc:
        raise LinkError(link, target, exc.strerror or str(exc)) from exc

    alias = staging / "link"
    previous = staging / "previous"
    moved = False
    try:
        alias.symlink_to(target, target_is_directory=True)
        if alias.readlink() != target:
            raise LinkError(link, target, f"temporary link {alias} does not point at the shared directory")

        if link.is_dir() and not link.is_symlink():
            link.rename(previous)
            moved = True
        os.replace(alias, link)
    except OSError as exc:
        _rollback(staging, previous, link, moved)
        raise LinkError(link, target, exc.strerror or str(exc)) from exc
    except BaseException:
        _rollback(staging, previous, link, moved)
        raise

    # The link is in place; only now is the old directory discarded.
    try:
        shutil.rmtree(staging)
    except OSError as exc:
        logger.warning("Linked {} but could not remove {}: {}", link, staging, exc.strerror or exc)


def _rollback(staging: Path, previous: Path, link: Path, moved: bool) -> None:
    if moved:
        previous.rename(link)
    with contextlib.suppress(OSError):
        shutil.rmtree(staging)
