"""Namespaced key-value store.

Every tool reads and writes through a ``Store``; none of them touch the
substrate directly. Keys are composed as ``root:namespace:key`` and values are
JSON text. The store never raises on bad data or a failing substrate: reads
fall back to the caller's default and failed writes are logged and dropped.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional, Protocol

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from .db import close_db, create_db_engine, create_session_factory, get_root_namespace, init_db
from .sqlmodels import KeyValueEntry

logger = logging.getLogger(__name__)

SEPARATOR = ":"
STRINGIFY_FAILED = {"error": "stringify_failed"}


class StorageError(Exception):
    """A substrate could not complete a read or write."""


class KeyValueSubstrate(Protocol):
    """Flat string-to-string storage, e.g. browser localStorage or a SQLite table."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class MemorySubstrate:
    """In-process substrate; contents live as long as the object."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)


class SqliteSubstrate:
    """Substrate backed by the ``kv_entries`` table."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        init_db(engine)

    @classmethod
    def open(cls, url: Optional[str] = None) -> "SqliteSubstrate":
        return cls(create_db_engine(url))

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise StorageError(f"read failed for {key}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntry, key)
                if entry:
                    entry.value = value
                    entry.updated_at = datetime.utcnow()
                else:
                    session.add(KeyValueEntry(key=key, value=value, updated_at=datetime.utcnow()))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"write failed for {key}") from exc

    def remove_item(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"delete failed for {key}") from exc

    def keys(self, prefix: str = "") -> list[str]:
        try:
            with self._session_factory() as session:
                query = select(KeyValueEntry.key).order_by(KeyValueEntry.key.asc())
                if prefix:
                    query = query.where(KeyValueEntry.key.startswith(prefix, autoescape=True))
                return list(session.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            raise StorageError("key scan failed") from exc

    def close(self) -> None:
        close_db(self._engine)


def _parse(raw: Optional[str], fallback: Any = None) -> Any:
    if raw is None:
        return fallback
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return fallback


def _stringify(value: Any) -> str:
    try:
        return json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        logger.warning("Could not serialize value (%s); storing error sentinel", exc)
        return json.dumps(STRINGIFY_FAILED)


def _check_namespace(namespace: str) -> str:
    if not namespace or SEPARATOR in namespace:
        raise ValueError(f"Invalid namespace {namespace!r}: must be non-empty and contain no '{SEPARATOR}'")
    return namespace


class Store:
    """Namespaced facade over a ``KeyValueSubstrate``."""

    def __init__(self, substrate: KeyValueSubstrate, root: Optional[str] = None):
        self.substrate = substrate
        self.root = _check_namespace(root or get_root_namespace())

    def _prefix(self, namespace: Optional[str] = None) -> str:
        if namespace is None:
            return f"{self.root}{SEPARATOR}"
        return f"{self.root}{SEPARATOR}{_check_namespace(namespace)}{SEPARATOR}"

    def key_for(self, namespace: str, key: str) -> str:
        return f"{self._prefix(namespace)}{key}"

    def _scan(self, prefix: str) -> list[str]:
        try:
            return [k for k in self.substrate.keys(prefix) if k.startswith(prefix)]
        except (StorageError, OSError) as exc:
            logger.warning("Key scan for %s failed: %s", prefix, exc)
            return []

    def get(self, namespace: str, key: str, fallback: Any = None) -> Any:
        full_key = self.key_for(namespace, key)
        try:
            raw = self.substrate.get_item(full_key)
        except (StorageError, OSError) as exc:
            logger.warning("Read of %s failed: %s", full_key, exc)
            return fallback
        return _parse(raw, fallback)

    def set(self, namespace: str, key: str, value: Any) -> bool:
        """Write through immediately. Returns False if the substrate rejected the write."""
        full_key = self.key_for(namespace, key)
        payload = _stringify(value)
        try:
            self.substrate.set_item(full_key, payload)
        except (StorageError, OSError) as exc:
            logger.warning("Write of %s dropped: %s", full_key, exc)
            return False
        return True

    def remove(self, namespace: str, key: str) -> None:
        full_key = self.key_for(namespace, key)
        try:
            self.substrate.remove_item(full_key)
        except (StorageError, OSError) as exc:
            logger.warning("Remove of %s failed: %s", full_key, exc)

    def clear_namespace(self, namespace: str) -> None:
        for full_key in self._scan(self._prefix(namespace)):
            try:
                self.substrate.remove_item(full_key)
            except (StorageError, OSError) as exc:
                logger.warning("Remove of %s failed: %s", full_key, exc)

    def export_namespace(self, namespace: str) -> dict[str, Any]:
        prefix = self._prefix(namespace)
        out = {}
        for full_key in self._scan(prefix):
            out[full_key[len(prefix):]] = self._read_raw(full_key)
        return out

    def export_all(self) -> dict[str, dict[str, Any]]:
        prefix = self._prefix()
        out: dict[str, dict[str, Any]] = {}
        for full_key in self._scan(prefix):
            rest = full_key[len(prefix):]
            namespace, _, short_key = rest.partition(SEPARATOR)
            out.setdefault(namespace, {})[short_key] = self._read_raw(full_key)
        return out

    def _read_raw(self, full_key: str) -> Any:
        try:
            return _parse(self.substrate.get_item(full_key))
        except (StorageError, OSError) as exc:
            logger.warning("Read of %s failed: %s", full_key, exc)
            return None
