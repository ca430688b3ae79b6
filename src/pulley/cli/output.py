"""Output utilities for CLI commands.

Everything pulley prints is meant for a person, so it goes to stderr.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)
