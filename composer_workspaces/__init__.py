"""composer-workspaces - monorepo workspaces for Composer-style packages."""

__version__ = "2.0.0"
