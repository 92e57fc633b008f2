import logging
from contextlib import contextmanager
from typing import Iterator

from flask import current_app
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from storefront.core.config import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database: DatabaseConfig) -> Engine:
    """Build the engine; SQLite (tests, local tooling) gets a single shared connection."""
    if database.url.startswith("sqlite"):
        return create_engine(
            database.url,
            echo=database.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database.url,
        echo=database.echo,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
        pool_recycle=database.pool_recycle,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    return current_app.extensions["db_engine"]


@contextmanager
def get_connection(engine: Engine = None) -> Iterator[Connection]:
    """Connection from the app's pool; callers commit, anything uncommitted rolls back."""
    engine = engine or get_engine()
    with engine.connect() as conn:
        yield conn


def test_simple_query(engine: Engine = None) -> bool:
    with get_connection(engine) as conn:
        return conn.execute(text("SELECT 1")).scalar() == 1


def init_db(engine: Engine) -> None:
    # Register models on Base.metadata before create_all
    from storefront import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")
