# parking_registry/database.py
"""
Database engine and session factory construction.
Uses SQLAlchemy; SQLite by default, any SQLAlchemy URL works.
There is no module-level engine: RecordStore (store.py) owns one per instance.
"""

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # Sessions are opened from FastAPI's worker threads
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,                  # Set True to log all SQL queries (debug only)
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    # Records outlive their session: the service hands them to the routers
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_store(request: Request):
    """FastAPI dependency — the RecordStore opened by the app lifespan."""
    return request.app.state.store


def get_registry(request: Request):
    """FastAPI dependency — the RegistryService wired to that store."""
    return request.app.state.registry
