# ==============================================================================
# WRITE-THROUGH REPOSITORY - Remote First, Local Fallback and Mirror
# ==============================================================================
# Decorator over a remote and a local repository of the same entity
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from smartcow.database.repositories.base_repository import ModelType, Repository
from smartcow.database.repositories.local_repository import LocalRepository
from smartcow.database.repositories.remote_repository import RemoteRepository

logger = logging.getLogger(__name__)


class WriteThroughRepository(Repository[ModelType]):
    """
    Remote-first repository with local fallback.

    Every operation is tried remotely first. On success the result is
    mirrored into the local repository (when ``mirror`` is on) so that
    later local reads stay warm; on failure the same operation runs
    against the local repository instead. Remote and local copies are
    never reconciled beyond that: records that only reached the local
    store stay there and keep showing up in complete reads.

    Attributes the remote table has no column for (view counters, cover
    images) only live locally; remote results are overlaid with the
    local values before they are mirrored or returned.

    Example:
        >>> repo = WriteThroughRepository(remote, local)
        >>> await repo.add(order)        # remote insert, then local put
    """

    def __init__(
        self,
        remote: RemoteRepository[ModelType],
        local: LocalRepository[ModelType],
        mirror: bool = True,
    ) -> None:
        super().__init__(remote.spec)
        self.remote = remote
        self.local = local
        self._mirror = mirror
        self._local_only = [
            name for name in self.spec.model.model_fields
            if name not in remote.columns and name not in self.spec.remote_defaults
        ]

    @property
    def source(self) -> str:
        return "write-through"

    def _fallback(self, operation: str) -> None:
        logger.warning(f"{self.spec.name}: remote {operation} failed, using local store")

    def _overlay(self, records: List[ModelType], sources: List[ModelType]) -> List[ModelType]:
        """Copy local-only attributes from ``sources`` onto remote ``records``."""
        if not self._local_only:
            return records
        by_id = {source.id: source for source in sources}
        merged: List[ModelType] = []
        for record in records:
            source = by_id.get(record.id)
            if source is None:
                merged.append(record)
            else:
                merged.append(record.model_copy(
                    update={name: getattr(source, name) for name in self._local_only}
                ))
        return merged

    def _keep_local_only(self, records: List[ModelType], local: List[ModelType]) -> List[ModelType]:
        """Add local records the remote does not know about to a complete read."""
        if self.spec.single:
            return records
        known = {record.id for record in records}
        extra = [record for record in local if record.id not in known]
        if not extra:
            return records
        logger.debug(f"{self.spec.name}: keeping {len(extra)} local-only record(s)")
        return self.spec.sort(records + extra)

    def _mirror_all(self, scope: Optional[str], records: List[ModelType], complete: bool) -> None:
        if not self._mirror:
            return
        if complete:
            self.local.replace(scope, records)
        else:
            for record in records:
                self.local.put(record)
        logger.debug(f"{self.spec.name}: mirrored {len(records)} record(s) locally")

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    async def list(
        self,
        scope: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[ModelType]]:
        records = await self.remote.list(scope, limit)
        if records is None:
            self._fallback("list")
            return await self.local.list(scope, limit)
        local = await self.local.list(scope) or []
        records = self._overlay(records, local)
        complete = limit is None or self.spec.single
        if complete:
            records = self._keep_local_only(records, local)
        self._mirror_all(scope, records, complete=complete)
        return records

    async def find(self, **criteria: Any) -> Optional[List[ModelType]]:
        records = await self.remote.find(**criteria)
        if records is None:
            self._fallback("find")
            return await self.local.find(**criteria)
        records = self._overlay(records, await self.local.find(**criteria) or [])
        self._mirror_all(None, records, complete=False)
        return records

    async def get(self, record_id: str) -> Optional[ModelType]:
        record = await self.remote.get(record_id)
        local = await self.local.get(record_id)
        if record is None:
            return local
        record = self._overlay([record], [local] if local else [])[0]
        self._mirror_all(None, [record], complete=False)
        return record

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    async def add(self, record: ModelType) -> Optional[ModelType]:
        stored = await self.remote.add(record)
        if stored is None:
            self._fallback("insert")
            return await self.local.add(record)
        stored = self._overlay([stored], [record])[0]
        self._mirror_all(None, [stored], complete=False)
        return stored

    async def upsert(
        self,
        record: ModelType,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Optional[ModelType]:
        stored = await self.remote.upsert(record, conflict_columns)
        if stored is None:
            self._fallback("upsert")
            return await self.local.upsert(record, conflict_columns)
        stored = self._overlay([stored], [record.model_copy(update={"id": stored.id})])[0]
        if self._mirror:
            await self.local.upsert(stored, conflict_columns)
        return stored

    async def update(
        self,
        record_id: str,
        changes: Dict[str, Any],
    ) -> Optional[ModelType]:
        updated = await self.remote.update(record_id, changes)
        if updated is None:
            self._fallback("update")
            return await self.local.update(record_id, changes)
        local = await self.local.update(record_id, changes) if self._mirror else None
        if local is None:
            local = await self.local.get(record_id)
        updated = self._overlay([updated], [local] if local else [])[0]
        if self._mirror:
            self.local.put(updated)
        return updated

    async def remove(self, record_id: str) -> bool:
        removed = await self.remote.remove(record_id)
        if not removed:
            self._fallback("delete")
            return await self.local.remove(record_id)
        if self._mirror:
            await self.local.remove(record_id)
        return True
