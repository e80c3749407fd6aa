"""Seed a demo account with a few posts."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from blogapp.backend import MemoryStorage, create_client
from blogapp.core.auth.session_provider import SessionProvider
from blogapp.core.users.services import create_user, find_user_by_email
from blogapp.domains.posts.services.post_manager import PostManager

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo12345"

DEMO_POSTS = [
    ("Hello world", "First post on the new blog."),
    ("Reading list", "Books I want to finish this year."),
    ("Weekend notes", "Hiking, coffee and a long nap."),
]


def seed_demo_posts(email: str = DEMO_EMAIL, password: str = DEMO_PASSWORD) -> int:
    """Create the demo user if needed and add any missing demo posts; returns posts added."""
    if not find_user_by_email(email):
        create_user(email, password)

    client = create_client(MemoryStorage())
    provider = SessionProvider(client.auth).initialize()
    result = provider.sign_in(email, password)
    if not result.success:
        raise click.ClickException(f"could not sign in as {email}: {result.error}")

    manager = PostManager(provider, client)
    existing = {post["title"] for post in manager.posts}
    added = 0
    for title, content in DEMO_POSTS:
        if title in existing:
            continue
        if manager.create(title, content).success:
            added += 1
    manager.close()
    provider.sign_out()
    provider.close()
    return added


@click.command("seed-demo")
@click.option("--email", default=DEMO_EMAIL, show_default=True)
@click.option("--password", default=DEMO_PASSWORD, show_default=True)
@with_appcontext
def seed_demo_command(email: str, password: str):
    """Create a demo user and sample posts."""
    added = seed_demo_posts(email, password)
    click.echo(f"seeded {added} posts for {email}")
