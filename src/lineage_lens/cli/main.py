"""
lineage-lens CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import current, projects, serve, tables


@click.group()
@click.version_option(package_name="lineage-lens")
def main():
    """lineage-lens: table-level lineage for dbt projects.

    \b
    Quick Start:
      lineage-lens projects .
      lineage-lens current models/marts/orders.sql
      lineage-lens tables model.jaffle_shop.orders --downstream
    """
    pass


# Register commands
main.add_command(tables.tables)
main.add_command(current.current)
main.add_command(projects.projects)
main.add_command(serve.serve)

if __name__ == "__main__":
    main()
