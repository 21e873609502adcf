"""CLI command implementations."""

from . import current, projects, serve, tables

__all__ = ["current", "projects", "serve", "tables"]
