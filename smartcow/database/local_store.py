# ==============================================================================
# LOCAL RECORD STORE - Key-Namespaced JSON Persistence
# ==============================================================================
# Browser-storage style key/value medium with sibling change notifications
# Memory medium for a single process, SQLite medium for a shared file
# ==============================================================================

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic_core import to_jsonable_python
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    cast,
    create_engine,
    delete,
    select,
)
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from smartcow.core.exceptions import LocalStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StorageChange:
    """A key changed in the shared medium (``new_value`` None on removal)."""

    key: str
    old_value: Optional[str]
    new_value: Optional[str]


StorageListener = Callable[[StorageChange], None]


# ==============================================================================
# STORAGE MEDIA
# ==============================================================================

class KeyValueMedium(ABC):
    """
    Abstract string key/value medium shared by one or more record stores.

    Mirrors browser storage semantics: every store attached to the medium
    is told about writes made through the OTHER attached stores, never
    about its own writes.
    """

    def __init__(self) -> None:
        self._listeners: Dict[int, StorageListener] = {}
        self._tokens = count(1)
        self._listener_lock = threading.Lock()

    # --------------------------------------------------------------------------
    # Primitive operations
    # --------------------------------------------------------------------------

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the raw string stored under ``key``."""

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with ``prefix``."""

    @abstractmethod
    def _set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def _remove(self, key: str) -> None:
        pass

    @abstractmethod
    def _increment(self, key: str, amount: int) -> int:
        """Atomically add ``amount`` to an integer value and return it."""

    def close(self) -> None:
        """Release medium resources."""

    # --------------------------------------------------------------------------
    # Notifying operations
    # --------------------------------------------------------------------------

    def set_item(self, key: str, value: str, origin: Optional[int] = None) -> None:
        old = self.get_item(key)
        self._set(key, value)
        self._broadcast(StorageChange(key, old, value), origin)

    def remove_item(self, key: str, origin: Optional[int] = None) -> None:
        old = self.get_item(key)
        if old is None:
            return
        self._remove(key)
        self._broadcast(StorageChange(key, old, None), origin)

    def increment(self, key: str, amount: int, origin: Optional[int] = None) -> int:
        old = self.get_item(key)
        total = self._increment(key, amount)
        self._broadcast(StorageChange(key, old, json.dumps(total)), origin)
        return total

    # --------------------------------------------------------------------------
    # Listener management
    # --------------------------------------------------------------------------

    def attach(self, listener: StorageListener) -> int:
        """Register a store's listener and return its origin token."""
        with self._listener_lock:
            token = next(self._tokens)
            self._listeners[token] = listener
        return token

    def detach(self, token: int) -> None:
        with self._listener_lock:
            self._listeners.pop(token, None)

    def _broadcast(self, change: StorageChange, origin: Optional[int]) -> None:
        with self._listener_lock:
            targets = [
                listener for token, listener in self._listeners.items()
                if token != origin
            ]
        for listener in targets:
            try:
                listener(change)
            except Exception:
                logger.exception(f"Storage listener failed for key '{change.key}'")


class MemoryMedium(KeyValueMedium):
    """In-process medium; each attached store behaves like one browser tab."""

    def __init__(self) -> None:
        super().__init__()
        self._data: Dict[str, str] = {}
        self._lock = threading.RLock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [k for k in self._data if k.startswith(prefix)]

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def _remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def _increment(self, key: str, amount: int) -> int:
        with self._lock:
            try:
                current = json.loads(self._data.get(key) or "0")
            except ValueError:
                current = 0
            if not isinstance(current, int) or isinstance(current, bool):
                current = 0
            total = current + amount
            self._data[key] = json.dumps(total)
            return total


class SQLiteMedium(KeyValueMedium):
    """
    File-backed medium on a single SQLite ``kv_store`` table.

    Several processes may open the same file; values stay consistent but
    change callbacks only reach stores attached in the same process.
    """

    def __init__(self, url: str) -> None:
        super().__init__()
        self._metadata = MetaData()
        self._table = Table(
            "kv_store",
            self._metadata,
            Column("key", String(255), primary_key=True),
            Column("value", Text, nullable=False),
        )
        try:
            self._engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
            )
            self._metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise LocalStoreError(f"Cannot open local store at {url}: {e}")
        logger.info(f"SQLite local store opened: {url}")

    def get_item(self, key: str) -> Optional[str]:
        with self._engine.connect() as conn:
            return conn.execute(
                select(self._table.c.value).where(self._table.c.key == key)
            ).scalar()

    def keys(self, prefix: str = "") -> List[str]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(self._table.c.key)).scalars().all()
        return [k for k in rows if k.startswith(prefix)]

    def _set(self, key: str, value: str) -> None:
        stmt = sqlite_insert(self._table).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._table.c.key],
            set_={"value": value},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def _remove(self, key: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(self._table).where(self._table.c.key == key))

    def _increment(self, key: str, amount: int) -> int:
        # Single UPSERT statement so concurrent writers cannot lose updates
        stmt = sqlite_insert(self._table).values(key=key, value=str(amount))
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._table.c.key],
            set_={
                "value": cast(
                    cast(self._table.c.value, Integer) + amount,
                    String,
                )
            },
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
            total = conn.execute(
                select(self._table.c.value).where(self._table.c.key == key)
            ).scalar()
        return int(total)

    def close(self) -> None:
        self._engine.dispose()


def create_medium(url: str) -> KeyValueMedium:
    """Create a medium from ``memory://`` or a SQLite URL."""
    if url.startswith("memory://"):
        return MemoryMedium()
    if url.startswith("sqlite"):
        return SQLiteMedium(url)
    raise ValueError(f"Unsupported local store URL: {url}")


# ==============================================================================
# RECORD STORE
# ==============================================================================

class LocalRecordStore:
    """
    Typed JSON persistence over a key/value medium.

    ``read`` never raises: absent keys and unparseable values return the
    caller-supplied default. Values are serialized with pydantic so domain
    records are stored in their camelCase alias form.

    Example:
        >>> store = LocalRecordStore(MemoryMedium())
        >>> store.write("smartcow_revenue:seller:alice", 5)
        True
        >>> store.read("smartcow_revenue:seller:alice", 0)
        5
    """

    def __init__(self, medium: KeyValueMedium) -> None:
        self._medium = medium
        self._external: List[StorageListener] = []
        self._token = medium.attach(self._on_medium_change)

    @property
    def medium(self) -> KeyValueMedium:
        return self._medium

    def read(self, key: str, default: T) -> T:
        try:
            raw = self._medium.get_item(key)
            if raw is None:
                return default
            return json.loads(raw)
        except Exception as e:
            logger.warning(f"Unreadable local value for '{key}': {e}")
            return default

    def write(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(to_jsonable_python(value, by_alias=True))
            self._medium.set_item(key, payload, origin=self._token)
            return True
        except Exception as e:
            logger.error(f"Failed to write local value for '{key}': {e}")
            return False

    def remove(self, key: str) -> None:
        try:
            self._medium.remove_item(key, origin=self._token)
        except Exception as e:
            logger.error(f"Failed to remove local value for '{key}': {e}")

    def keys(self, prefix: str = "") -> List[str]:
        try:
            return self._medium.keys(prefix)
        except Exception as e:
            logger.error(f"Failed to list local keys for '{prefix}': {e}")
            return []

    def increment(self, key: str, amount: int) -> int:
        """Atomic add on an integer value; returns the new total."""
        return self._medium.increment(key, amount, origin=self._token)

    # --------------------------------------------------------------------------
    # Sibling change notifications
    # --------------------------------------------------------------------------

    def on_external_change(self, listener: StorageListener) -> None:
        """Call ``listener`` when another store writes to the shared medium."""
        self._external.append(listener)

    def _on_medium_change(self, change: StorageChange) -> None:
        for listener in list(self._external):
            listener(change)

    def close(self) -> None:
        self._medium.detach(self._token)
