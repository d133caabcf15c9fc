"""devrefresh CLI — Typer-based command-line interface.

Provides the ``devrefresh`` command with subcommands for refreshing local
and preview databases, toggling front-end development mode, and resolving
site URIs and login links.

All output uses Rich for formatted terminal display.
"""
