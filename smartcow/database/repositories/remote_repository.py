# ==============================================================================
# REMOTE REPOSITORY - Remote Record Store Adapter per Entity
# ==============================================================================
# Maps domain records to snake_case rows and back; swallows remote failures
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from smartcow.core.exceptions import RemoteStoreError
from smartcow.database.adapters.base_adapter import BaseRemoteAdapter, Row
from smartcow.database.repositories.base_repository import (
    EntitySpec,
    ModelType,
    Repository,
)
from smartcow.domain_models import table_columns

logger = logging.getLogger(__name__)


class RemoteRepository(Repository[ModelType]):
    """
    Repository over a remote table.

    This is the only place where camelCase domain records and snake_case
    rows meet. Every adapter failure is logged and reported as the
    failure indicator (``None`` / ``False``); nothing is raised to the
    caller, which decides whether to fall back.

    Example:
        >>> repo = RemoteRepository(adapter, ORDERS)
        >>> await repo.find(buyer_id="buyer:bob")
    """

    def __init__(self, adapter: BaseRemoteAdapter, spec: EntitySpec[ModelType]) -> None:
        if spec.table is None:
            raise ValueError(f"{spec.name} has no remote table")
        super().__init__(spec)
        self._adapter = adapter
        self._table: str = spec.table
        self._columns = set(table_columns(spec.table))

    @property
    def source(self) -> str:
        return "remote"

    @property
    def columns(self) -> set[str]:
        return set(self._columns)

    # ==========================================================================
    # ROW MAPPING
    # ==========================================================================

    def to_row(self, record: ModelType) -> Row:
        """snake_case row with only the columns the table has."""
        data = record.model_dump(mode="json")
        return {k: v for k, v in data.items() if k in self._columns}

    def to_values(self, changes: Dict[str, Any]) -> Row:
        values = to_jsonable_python(changes)
        return {k: v for k, v in values.items() if k in self._columns}

    def from_row(self, row: Row, operation: str) -> ModelType:
        try:
            return self.spec.model.model_validate({**self.spec.remote_defaults, **row})
        except PydanticValidationError as e:
            raise RemoteStoreError(
                f"Unexpected {self._table} row shape",
                operation=operation,
                details={"errors": e.error_count()},
            )

    def _failed(self, operation: str, error: RemoteStoreError) -> None:
        logger.error(f"Remote {operation} failed: {error.message}")

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    async def _select(
        self,
        operation: str,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
    ) -> Optional[List[ModelType]]:
        try:
            rows = await self._adapter.select(
                self._table,
                filters=filters,
                order_by=self.spec.order_by if self.spec.order_by in self._columns else None,
                descending=self.spec.newest_first,
                limit=limit,
            )
            return [self.from_row(row, operation) for row in rows]
        except RemoteStoreError as e:
            self._failed(operation, e)
            return None

    async def list(
        self,
        scope: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[ModelType]]:
        filters: Dict[str, Any] = {}
        if scope is not None and self.spec.scope_field:
            filters[self.spec.scope_field] = scope
        return await self._select(f"list {self._table}", filters, limit)

    async def find(self, **criteria: Any) -> Optional[List[ModelType]]:
        return await self._select(f"find {self._table}", to_jsonable_python(criteria))

    async def get(self, record_id: str) -> Optional[ModelType]:
        found = await self._select(f"get {self._table}", {"id": record_id}, limit=1)
        return found[0] if found else None

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    async def add(self, record: ModelType) -> Optional[ModelType]:
        operation = f"insert {self._table}"
        try:
            row = await self._adapter.insert(self._table, self.to_row(record))
            return self.from_row(row, operation)
        except RemoteStoreError as e:
            self._failed(operation, e)
            return None

    async def upsert(
        self,
        record: ModelType,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Optional[ModelType]:
        operation = f"upsert {self._table}"
        try:
            row = await self._adapter.upsert(
                self._table,
                self.to_row(record),
                conflict_columns=conflict_columns,
            )
            return self.from_row(row, operation)
        except RemoteStoreError as e:
            self._failed(operation, e)
            return None

    async def update(
        self,
        record_id: str,
        changes: Dict[str, Any],
    ) -> Optional[ModelType]:
        operation = f"update {self._table}"
        try:
            rows = await self._adapter.update(
                self._table,
                {"id": record_id},
                self.to_values(changes),
            )
            return self.from_row(rows[0], operation) if rows else None
        except RemoteStoreError as e:
            self._failed(operation, e)
            return None

    async def remove(self, record_id: str) -> bool:
        operation = f"delete {self._table}"
        try:
            return await self._adapter.delete(self._table, {"id": record_id}) > 0
        except RemoteStoreError as e:
            self._failed(operation, e)
            return False
