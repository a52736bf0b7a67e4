"""Database connection and session management.

This module handles the database connection using SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config import DATA_DIR, DATABASE_URL
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401


def create_db_engine(url: str, **kwargs):
    """Create an engine whose error messages never carry bound parameters.

    Statement parameters include password hashes, and SQLAlchemy copies them
    into exception text and echo logs unless ``hide_parameters`` is set.

    Args:
        url: SQLAlchemy database URL.
        **kwargs: Extra ``create_engine`` arguments.

    Returns:
        Engine instance.
    """
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    return create_engine(
        url, connect_args=connect_args, hide_parameters=True, **kwargs
    )


engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create tables if they do not exist."""
    if DATABASE_URL.startswith("sqlite:///"):
        # Ensure data directory exists
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
