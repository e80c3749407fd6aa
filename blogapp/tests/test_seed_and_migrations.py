"""Demo seeding and the initial schema migration."""

from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config as AlembicConfig

from blogapp.core.users.services import find_user_by_email
from blogapp.domains.posts.models import Post
from blogapp.scripts.seed_demo import DEMO_EMAIL, DEMO_POSTS, seed_demo_posts

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


@pytest.mark.integration
def test_seed_demo_is_repeatable(app):
    assert seed_demo_posts() == len(DEMO_POSTS)
    assert seed_demo_posts() == 0

    user = find_user_by_email(DEMO_EMAIL)
    assert Post.query.filter_by(user_id=user.id).count() == len(DEMO_POSTS)


@pytest.mark.integration
def test_seed_demo_cli(app):
    result = app.test_cli_runner().invoke(args=["seed-demo"])

    assert result.exit_code == 0, result.output
    assert f"seeded {len(DEMO_POSTS)} posts for {DEMO_EMAIL}" in result.output


@pytest.mark.slow
def test_initial_migration_creates_schema(tmp_path):
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg.set_main_option("sqlalchemy.url", url)

    command.upgrade(cfg, "head")
    inspector = sa.inspect(sa.create_engine(url))
    assert {"user", "session_token", "jwt_blocklist", "blog_post"} <= set(inspector.get_table_names())
    assert "ix_blog_post_user_created_at" in {ix["name"] for ix in inspector.get_indexes("blog_post")}

    command.downgrade(cfg, "base")
    assert "blog_post" not in sa.inspect(sa.create_engine(url)).get_table_names()
