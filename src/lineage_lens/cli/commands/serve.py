"""
Serve Command - Run the language server over stdio.
"""

import click


@click.command()
def serve() -> None:
    """
    Start the lineage language server on stdin/stdout.

    Editors launch this command; it is not meant to be run by hand.
    """
    from ...lsp.server import main as run_server

    run_server()
