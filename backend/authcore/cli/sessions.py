"""Flask CLI commands to inspect and revoke refresh-token sessions."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authcore.models.base import as_utc
from authcore.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Inspect and revoke refresh-token sessions."""


@sessions_cli.command("list")
@click.argument("user_id")
@click.option("--all", "include_revoked", is_flag=True, help="Include revoked tokens.")
@with_appcontext
def list_sessions(user_id: str, include_revoked: bool) -> None:
    """Print the ledger rows of USER_ID."""
    with SQLAlchemyUnitOfWork() as uow:
        rows = uow.refresh_tokens.list_for_user(user_id, include_revoked=include_revoked)
        if not rows:
            click.echo("(no sessions)")
            return
        for row in rows:
            state = "revoked" if row.is_revoked else "live"
            successor = f" -> {row.replaced_by}" if row.replaced_by else ""
            click.echo(
                f"{row.jti}  {state:<7}  expires={as_utc(row.expires_at).isoformat()}"
                f"  ip={row.ip_addr or '-'}{successor}"
            )


@sessions_cli.command("revoke-all")
@click.argument("user_id")
@with_appcontext
def revoke_all(user_id: str) -> None:
    """Revoke every live refresh token of USER_ID."""
    with SQLAlchemyUnitOfWork() as uow:
        revoked = uow.refresh_tokens.revoke_all_for_user(user_id)
    LOGGER.warning("refresh.revoked_all", extra={"user_id": user_id, "revoked": revoked})
    click.echo(f"Revoked {revoked} session(s) for {user_id}.")
