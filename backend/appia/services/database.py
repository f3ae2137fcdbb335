# appia/services/database.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

metadata = MetaData()

projects_table = Table(
    "projects",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, index=True, nullable=False),
    Column("name", String(200), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("language", String, nullable=False, default="react"),
    Column("prompt", Text, nullable=False, default=""),
    Column("code", Text, nullable=False, default=""),
    Column("files", JSON, nullable=True),
    Column("chat_history", JSON, nullable=False, default=list),
    Column("is_public", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

subscriptions_table = Table(
    "subscriptions",
    metadata,
    Column("user_id", String, primary_key=True),
    Column("tier", String, nullable=False, default="free"),
    Column("tokens_limit", Integer, nullable=False),
    Column("tokens_used", Integer, nullable=False, default=0),
    Column("reset_date", DateTime, nullable=False),
    Column("status", String, nullable=False, default="active"),
    Column("created_at", DateTime, nullable=False),
)

usage_table = Table(
    "usage",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String, index=True, nullable=False),
    Column("action_type", String, nullable=False),
    Column("tokens_used", Integer, nullable=False, default=0),
    Column("metadata", JSON, nullable=True),
    Column("created_at", DateTime, index=True, nullable=False),
)

deployments_table = Table(
    "deployments",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, index=True, nullable=False),
    Column("project_id", String, nullable=True),
    Column("project_name", String, nullable=False),
    Column("deployment_url", String, nullable=False),
    Column("created_at", DateTime, nullable=False),
)

github_connections_table = Table(
    "github_connections",
    metadata,
    Column("user_id", String, primary_key=True),
    Column("github_id", Integer, nullable=False),
    Column("github_username", String, nullable=False),
    Column("access_token", String, nullable=True),
    Column("connected_at", DateTime, nullable=False),
)


def utcnow() -> datetime:
    """Naive UTC, so values compare the same on SQLite and Postgres."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    metadata.create_all(engine)
