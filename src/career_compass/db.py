"""SQLite database connection and schema management.

Data is stored in ~/.career-compass/data.db by default; set DATA_DIR to move
it. Every write runs in its own short transaction, so a value is either fully
replaced or left as it was.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.expanduser("~/.career-compass")
DEFAULT_ROOT_NAMESPACE = "roadmap"


def get_data_dir() -> Path:
    """Get the data directory, creating it if needed."""
    data_dir = Path(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_url(db_path: Optional[Path] = None) -> str:
    """Get the SQLite database URL."""
    if db_path is None:
        db_path = get_data_dir() / "data.db"
    return f"sqlite:///{db_path}"


def get_root_namespace() -> str:
    return os.environ.get("STORE_ROOT_NAMESPACE", DEFAULT_ROOT_NAMESPACE)


def _set_wal_mode(dbapi_connection, connection_record):
    """Enable WAL mode so readers never block on the single writer."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def create_db_engine(url: Optional[str] = None) -> Engine:
    engine = create_engine(url or get_db_url(), echo=False)
    event.listen(engine, "connect", _set_wal_mode)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables if they don't exist."""
    from .sqlmodels import Base

    Base.metadata.create_all(engine)
    logger.info("Database initialized at %s", engine.url.database)


def close_db(engine: Engine) -> None:
    """Dispose of the engine's connection pool."""
    engine.dispose()
