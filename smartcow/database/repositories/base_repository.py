# ==============================================================================
# BASE REPOSITORY - Per-Entity Data Access Abstraction
# ==============================================================================
# One interface per entity, implemented by a local store repository, a remote
# repository and a write-through decorator combining the two
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import (
    Any,
    Dict,
    Generic,
    List,
    Optional,
    Sequence,
    Type,
    TypeVar,
)

from smartcow.schemas.base import BaseSchema

# Type variable for domain records
ModelType = TypeVar("ModelType", bound=BaseSchema)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class EntitySpec(Generic[ModelType]):
    """
    Where and how one entity type is stored.

    Attributes:
        name: Entity label used in logs
        model: Domain record class
        local_key: Fixed local key, or key prefix when ``partitioned``
        table: Remote table name (None for local-only entities)
        scope_field: Record attribute that ``list(scope)`` filters on
        partitioned: Local records live under ``local_key + scope``
        single: Each local key holds one record instead of a list
        newest_first: New records go to the front; remote reads sort descending
        order_by: Attribute used for remote ordering and merged local lists
        remote_defaults: Values filled in for attributes the table lacks
    """

    name: str
    model: Type[ModelType]
    local_key: str
    table: Optional[str] = None
    scope_field: Optional[str] = None
    partitioned: bool = False
    single: bool = False
    newest_first: bool = True
    order_by: str = "created_at"
    remote_defaults: Dict[str, Any] = field(default_factory=dict)

    def scope_of(self, record: ModelType) -> Optional[str]:
        if self.scope_field is None:
            return None
        return getattr(record, self.scope_field)

    def sort(self, records: List[ModelType]) -> List[ModelType]:
        """Order records by ``order_by`` (stable; missing values sort oldest)."""
        return sorted(
            records,
            key=lambda record: getattr(record, self.order_by, None) or _EPOCH,
            reverse=self.newest_first,
        )


class Repository(ABC, Generic[ModelType]):
    """
    Abstract per-entity repository.

    Implementations differ in where records live, never in what the
    operations mean. A ``None`` list/record result is a failure indicator;
    an empty list is a successful read of nothing.

    Generic Parameters:
        ModelType: Domain record type

    Example:
        >>> repo = factory.repository(ENTITIES.products)
        >>> await repo.add(product)
        >>> mine = await repo.list("seller:alice")
    """

    def __init__(self, spec: EntitySpec[ModelType]) -> None:
        self.spec = spec

    @property
    @abstractmethod
    def source(self) -> str:
        """Storage label (``local``, ``remote`` or ``write-through``)."""
        pass

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def list(
        self,
        scope: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[ModelType]]:
        """
        List records, optionally limited to one scope value.

        Args:
            scope: Value of ``spec.scope_field`` (exact match); None for all
            limit: Maximum number of records

        Returns:
            Records in storage order, or None on failure
        """
        pass

    @abstractmethod
    async def find(self, **criteria: Any) -> Optional[List[ModelType]]:
        """Records whose attributes equal every criterion, or None on failure."""
        pass

    @abstractmethod
    async def get(self, record_id: str) -> Optional[ModelType]:
        """Record by identity, or None when absent or on failure."""
        pass

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def add(self, record: ModelType) -> Optional[ModelType]:
        """Store a new record; returns the stored record or None on failure."""
        pass

    @abstractmethod
    async def upsert(
        self,
        record: ModelType,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Optional[ModelType]:
        """Insert ``record`` or overwrite the record colliding on ``conflict_columns``."""
        pass

    @abstractmethod
    async def update(
        self,
        record_id: str,
        changes: Dict[str, Any],
    ) -> Optional[ModelType]:
        """
        Apply attribute changes to a stored record.

        Args:
            record_id: Record identity
            changes: snake_case attribute -> new value

        Returns:
            Updated record, or None when absent or on failure
        """
        pass

    @abstractmethod
    async def remove(self, record_id: str) -> bool:
        """Delete a record; False when nothing was removed or on failure."""
        pass
