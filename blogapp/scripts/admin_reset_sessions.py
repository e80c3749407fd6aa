"""Operator session reset CLI.

Usage examples:
    flask admin-reset-sessions --user-id=123 --reason="lost laptop"
    flask admin-reset-sessions --email=user@example.com --reason="ops reset"
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from blogapp.core.auth.session_services import SessionLifecycleService


@click.command("admin-reset-sessions")
@click.option("--user-id", type=int, help="Target user id for session reset")
@click.option("--email", type=str, help="Target user email (case-insensitive)")
@click.option("--session-id", type=str, help="Only revoke this session (refresh token jti)")
@click.option("--reason", required=True, help="Reason for reset (required)")
@with_appcontext
def admin_reset_sessions_command(user_id: int | None, email: str | None, session_id: str | None, reason: str):
    """Sign a user out everywhere by revoking their session records."""
    reason_clean = (reason or "").strip()
    if not reason_clean:
        click.echo("--reason is required", err=True)
        raise click.Abort()
    if not user_id and not email:
        click.echo("Provide --user-id or --email", err=True)
        raise click.Abort()

    from blogapp.core.users.services import find_user_by_email

    target_user_id = user_id
    if email and not target_user_id:
        user = find_user_by_email(email)
        if not user:
            click.echo(f"User with email {email.strip().lower()} not found", err=True)
            raise click.Abort()
        target_user_id = user.id

    try:
        result = SessionLifecycleService().admin_reset(
            target_user_id,
            session_id=session_id,
            reason=reason_clean,
        )
    except ValueError as exc:
        if str(exc) == "not_found":
            click.echo(f"User {target_user_id} not found", err=True)
            raise click.Abort()
        raise

    click.echo(
        f"admin_reset ok: user_id={target_user_id} reset_count={result['reset_count']} "
        f"scope={'single' if session_id else 'all'} reason=\"{reason_clean}\""
    )
    click.echo(f"live_sessions={SessionLifecycleService().live_session_count(target_user_id)}")
