"""CLI command for minting a signed token, e.g. for curl tests.

Usage:
    flask issue-token admin
    flask issue-token admin --minutes 5
"""

from __future__ import annotations

from datetime import timedelta

import click
from flask.cli import with_appcontext

from jwtsession.extensions import get_auth


@click.command("issue-token")
@click.argument("username")
@click.option("--minutes", "-m", type=click.IntRange(min=1), default=None, help="Token lifetime in minutes")
@with_appcontext
def issue_token_command(username: str, minutes: int | None):
    """Print a token for USERNAME without checking credentials."""
    codec = get_auth().codec
    lifetime = timedelta(minutes=minutes) if minutes else None
    click.echo(codec.encode(username, lifetime))


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(issue_token_command)
