"""
Database connection and session management.
"""
from __future__ import annotations

from typing import Any, Generator

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings

# Export .env into the process environment for scripts and libraries that read os.environ.
load_dotenv()


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in {"sqlite:", "sqlite+pysqlite:"}:
            # One shared connection, otherwise every session sees an empty database.
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }


engine: Engine = create_engine(
    settings.database_url,
    echo=False,
    **_engine_options(settings.database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting a database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Initialize database by registering models, creating tables and seeding the admin.
    """
    from app.models import Base
    from app.seeds import seed_admin

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()


def check_database_connection() -> bool:
    """
    Return True when the database connection is healthy.
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


def database_health() -> dict[str, Any]:
    """
    Return structured database health details.
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {
            "ok": True,
            "dialect": engine.dialect.name,
        }
    except SQLAlchemyError as exc:
        return {
            "ok": False,
            "error": str(exc),
        }
