import datetime

import gradepad.lib.cli as click
from gradepad.auth import jwt as jwt_auth
from gradepad.model import PersonID


@click.group("token")
def token():
    """Issue API tokens."""


@token.command("issue")
@click.argument("caller_id", type=int)
@click.option(
    "--minutes", "-m", type=click.IntRange(min=1), default=None, help="Lifetime, defaults to the configured one"
)
def token_issue(caller_id: int, minutes: int | None) -> None:
    """Print a bearer token identifying CALLER_ID."""
    expires = datetime.timedelta(minutes=minutes) if minutes else None
    click.echo(jwt_auth.create_access_token(PersonID(caller_id), expires))
