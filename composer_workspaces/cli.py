import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from composer_workspaces import __version__
from composer_workspaces.errors import WorkspacesError


@click.group()
@click.version_option(__version__, prog_name="composer-workspaces")
@click.option("--log-level", default=None, help="Log level (default: from COMPOSER_WORKSPACES_LOG_LEVEL or INFO).")
def main(log_level: str | None) -> None:
    """Composer workspaces - link sibling packages of a monorepo."""
    from composer_workspaces.log import setup_logging
    from composer_workspaces.settings import get_settings

    setup_logging(log_level or get_settings().log_level)


_path_option = click.option(
    "--path",
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Package directory (a workspace or the workspace root).",
)


@contextmanager
def _domain_errors() -> Iterator[None]:
    """Turn domain exceptions into a clean non-zero exit."""
    try:
        yield
    except WorkspacesError as exc:
        raise click.ClickException(str(exc)) from exc


def _plugin(path: Path, package: Path | None = None):
    """Build the plugin for the package at ``path``.

    ``package`` overrides the manifest handed to the plugin (a merged root
    manifest produced by an external merge step).
    """
    from composer_workspaces.context import InvocationContext
    from composer_workspaces.models.manifest import Manifest
    from composer_workspaces.plugin import Host, WorkspacesPlugin

    context = InvocationContext(working_dir=path.resolve())
    manifest_path = package or context.working_dir / context.settings.manifest_filename
    host = Host(package=Manifest.load(manifest_path))
    return WorkspacesPlugin(host, context)


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@main.command("list")
@_path_option
def list_workspaces(path: Path) -> None:
    """List the workspaces of the monorepo owning PATH."""
    with _domain_errors():
        root = _plugin(path).get_workspace_root()
        if root is None:
            raise click.ClickException(f'"{path.resolve()}" is neither a workspace nor a workspace root')

        for workspace in root.workspaces:
            click.echo(f"{workspace.name}\t{workspace.relative_path}")


@main.command()
@_path_option
def repositories(path: Path) -> None:
    """Print the path repositories activation registers for PATH, as JSON."""
    with _domain_errors():
        plugin = _plugin(path)
        plugin.activate()
        click.echo(json.dumps([r.config.to_document() for r in plugin.host.repository_manager.repositories], indent=4))


# ---------------------------------------------------------------------------
# Post install / update
# ---------------------------------------------------------------------------


@main.command("post-install")
@_path_option
@click.option(
    "--merged",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Merged root manifest (default: the root manifest on disk).",
)
@click.option(
    "--event",
    type=click.Choice(["post-package-install", "post-install-cmd", "post-update-cmd"]),
    default="post-install-cmd",
    show_default=True,
    help="Host lifecycle event being handled.",
)
def post_install(path: Path, merged: Path | None, event: str) -> None:
    """Reconcile the root manifest and link workspace vendor directories."""
    from composer_workspaces.models.enums import LifecycleEvent

    with _domain_errors():
        plugin = _plugin(path, merged)
        if not plugin.is_workspace_root():
            raise click.ClickException(f'"{path.resolve()}" is not a workspace root')
        plugin.on_post_install_or_update(LifecycleEvent(event))


@main.command("link-vendor")
@_path_option
def link_vendor(path: Path) -> None:
    """Link every workspace's vendor directory to the root's."""
    with _domain_errors():
        plugin = _plugin(path)
        if not plugin.is_workspace_root():
            raise click.ClickException(f'"{path.resolve()}" is not a workspace root')
        for link in plugin.symlink_vendor():
            click.echo(f"Linked {link}")
