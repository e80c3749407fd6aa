"""Operator CLI commands."""

from __future__ import annotations


def register_commands(app):
    """Register CLI commands with the app."""
    from blogapp.scripts.admin_reset_sessions import admin_reset_sessions_command
    from blogapp.scripts.seed_demo import seed_demo_command

    app.cli.add_command(admin_reset_sessions_command)
    app.cli.add_command(seed_demo_command)
