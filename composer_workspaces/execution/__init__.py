"""Lifecycle steps run around the host's dependency resolution.

- **graph**: path repositories for sibling workspaces (before resolution)
- **reconciler**: root manifest rewrite (after install/update)
- **linker**: shared vendor directory links (after install/update)
"""
