# ==============================================================================
# LOCAL REPOSITORY - Entity Lists in the Local Record Store
# ==============================================================================
# Records are persisted as camelCase JSON lists under deterministic keys
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from smartcow.database.local_store import LocalRecordStore
from smartcow.database.repositories.base_repository import (
    EntitySpec,
    ModelType,
    Repository,
)

logger = logging.getLogger(__name__)


class LocalRepository(Repository[ModelType]):
    """
    Repository over the Local Record Store.

    Storage layout follows the entity spec: one list under a fixed key
    (chat log, pending queue), one list per scope under ``prefix + scope``
    (per-owner catalogs), or one record per key (settings, robot status).
    Records that no longer validate are dropped on read.

    Example:
        >>> repo = LocalRepository(store, PRODUCTS)
        >>> await repo.add(product)          # smartcow_cp_products:seller:alice
        >>> await repo.list("seller:alice")
    """

    def __init__(self, store: LocalRecordStore, spec: EntitySpec[ModelType]) -> None:
        super().__init__(spec)
        self._store = store

    @property
    def source(self) -> str:
        return "local"

    # ==========================================================================
    # KEY LAYOUT
    # ==========================================================================

    def _key(self, scope: Optional[str]) -> str:
        if self.spec.partitioned:
            if scope is None:
                raise ValueError(f"{self.spec.name}: partitioned key needs a scope")
            return f"{self.spec.local_key}{scope}"
        return self.spec.local_key

    def _keys(self) -> List[str]:
        if self.spec.partitioned:
            return self._store.keys(self.spec.local_key)
        return [self.spec.local_key]

    def _load(self, key: str) -> List[ModelType]:
        raw = self._store.read(key, None)
        if raw is None:
            return []
        items = [raw] if self.spec.single else raw
        if not isinstance(items, list):
            logger.warning(f"Ignoring malformed local value under '{key}'")
            return []

        records: List[ModelType] = []
        for item in items:
            try:
                records.append(self.spec.model.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(f"Dropping unreadable {self.spec.name} under '{key}': {e.error_count()} error(s)")
        return records

    def _save(self, key: str, records: List[ModelType]) -> bool:
        if self.spec.single:
            if not records:
                self._store.remove(key)
                return True
            return self._store.write(key, records[0].to_local())
        return self._store.write(key, [record.to_local() for record in records])

    def _all(self) -> List[ModelType]:
        records: List[ModelType] = []
        for key in self._keys():
            records.extend(self._load(key))
        if self.spec.partitioned:
            return self.spec.sort(records)
        return records

    def _locate(self, record_id: str) -> Optional[tuple[str, List[ModelType], int]]:
        for key in self._keys():
            records = self._load(key)
            for index, record in enumerate(records):
                if record.id == record_id:
                    return key, records, index
        return None

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    async def list(
        self,
        scope: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[ModelType]]:
        if scope is None:
            records = self._all()
        elif self.spec.partitioned:
            records = self._load(self._key(scope))
        else:
            records = [r for r in self._all() if self.spec.scope_of(r) == scope]
        return records[:limit] if limit is not None else records

    async def find(self, **criteria: Any) -> Optional[List[ModelType]]:
        return [
            record for record in self._all()
            if all(getattr(record, k, None) == v for k, v in criteria.items())
        ]

    async def get(self, record_id: str) -> Optional[ModelType]:
        located = self._locate(record_id)
        if located is None:
            return None
        _, records, index = located
        return records[index]

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    def put(self, record: ModelType) -> Optional[ModelType]:
        """Insert ``record`` or replace the stored record with its identity."""
        key = self._key(self.spec.scope_of(record) if self.spec.partitioned else None)
        if self.spec.single:
            return record if self._save(key, [record]) else None

        records = self._load(key)
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                break
        else:
            if self.spec.newest_first:
                records.insert(0, record)
            else:
                records.append(record)
        return record if self._save(key, records) else None

    def replace(self, scope: Optional[str], records: List[ModelType]) -> bool:
        """
        Make the local copy of ``scope`` (or of everything) equal ``records``.

        Used to mirror an authoritative remote read.
        """
        if self.spec.single:
            key = self._key(scope if self.spec.partitioned else None)
            return self._save(key, records[:1])

        if self.spec.partitioned:
            grouped: Dict[str, List[ModelType]] = {}
            for record in records:
                grouped.setdefault(self.spec.scope_of(record), []).append(record)
            if scope is not None:
                return self._save(self._key(scope), grouped.get(scope, []))
            ok = True
            stale = set(self._keys()) - {self._key(s) for s in grouped}
            for key in stale:
                self._store.remove(key)
            for group_scope, group in grouped.items():
                ok = self._save(self._key(group_scope), group) and ok
            return ok

        if scope is None:
            return self._save(self.spec.local_key, list(records))
        others = [r for r in self._all() if self.spec.scope_of(r) != scope]
        return self._save(self.spec.local_key, self.spec.sort(others + list(records)))

    async def add(self, record: ModelType) -> Optional[ModelType]:
        return self.put(record)

    async def upsert(
        self,
        record: ModelType,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Optional[ModelType]:
        matches = await self.find(**{c: getattr(record, c) for c in conflict_columns})
        for existing in matches or []:
            if existing.id != record.id:
                await self.remove(existing.id)
        return self.put(record)

    async def update(
        self,
        record_id: str,
        changes: Dict[str, Any],
    ) -> Optional[ModelType]:
        located = self._locate(record_id)
        if located is None:
            return None
        key, records, index = located
        current = records[index]
        try:
            updated = self.spec.model.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as e:
            logger.warning(f"Rejected {self.spec.name} update for '{record_id}': {e.error_count()} error(s)")
            return None
        records[index] = updated
        return updated if self._save(key, records) else None

    async def remove(self, record_id: str) -> bool:
        located = self._locate(record_id)
        if located is None:
            return False
        key, records, index = located
        del records[index]
        return self._save(key, records)
