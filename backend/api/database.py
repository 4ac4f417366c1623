"""
Database setup for Island Empire.
Uses SQLite locally; use DATABASE_URL (e.g. Heroku Postgres) for production.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

DB_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_DATABASE_URL = f"sqlite:///{os.path.join(DB_DIR, 'game.db')}"

Base = declarative_base()


def resolve_database_url(raw_url: str | None) -> str:
    """Heroku sets DATABASE_URL to postgres://; SQLAlchemy 2.x expects postgresql://"""
    if not raw_url:
        return DEFAULT_DATABASE_URL
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    return raw_url


def create_session_factory(url: str) -> sessionmaker:
    """
    Session factory bound to a new engine for `url`.
    In-memory SQLite ("sqlite://") shares one connection so every session sees the same tables.
    """
    kwargs = {}
    if url.startswith("sqlite"):
        # SQLite needs check_same_thread=False; Postgres does not use that arg
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


DATABASE_URL = resolve_database_url(os.environ.get("DATABASE_URL"))
SessionLocal = create_session_factory(DATABASE_URL)


def init_db(session_factory: sessionmaker = SessionLocal):
    """Create all tables on the factory's engine."""
    Base.metadata.create_all(bind=session_factory.kw["bind"])
