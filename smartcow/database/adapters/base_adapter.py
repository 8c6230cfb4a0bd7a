# ==============================================================================
# BASE REMOTE ADAPTER - Abstract Interface
# ==============================================================================
# Defines the contract for remote relational store adapters
# Ensures consistent table-level API across REST and SQL backends
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

# A remote row: snake_case column name -> JSON-compatible value
Row = Dict[str, Any]


class BaseRemoteAdapter(ABC):
    """
    Abstract Base Class for Remote Store Adapters.

    Operates on plain rows keyed by snake_case column names. Filters are
    equality-only (``{"seller_id": "seller:alice"}``), which is all the
    hosted backend is ever asked for.

    Every failure (network, validation, constraint violation, missing
    table) is raised as ``RemoteStoreError``; repositories decide what a
    failure means for the caller.

    Example:
        >>> adapter = RestRemoteAdapter(config)
        >>> await adapter.connect()
        >>> rows = await adapter.select("products", {"seller_id": "seller:alice"})
        >>> await adapter.disconnect()
    """

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the remote connection.

        Raises:
            RemoteStoreError: If the backend cannot be reached or prepared
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the client or connection pool."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check remote connectivity.

        Returns:
            True if the backend answers, False otherwise
        """
        pass

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short backend label for health output."""
        pass

    # ==========================================================================
    # TABLE OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """
        Fetch rows matching all equality filters.

        Args:
            table: Remote table name
            filters: Column -> value equality conditions
            order_by: Column to sort on
            descending: Sort direction
            limit: Maximum number of rows

        Returns:
            Matching rows (possibly empty)
        """
        pass

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """
        Insert one row.

        Returns:
            The stored row as the backend reports it
        """
        pass

    @abstractmethod
    async def update(
        self,
        table: str,
        filters: Dict[str, Any],
        values: Row,
    ) -> List[Row]:
        """
        Update rows matching ``filters``.

        Returns:
            Updated rows (empty if nothing matched)
        """
        pass

    @abstractmethod
    async def delete(self, table: str, filters: Dict[str, Any]) -> int:
        """
        Delete rows matching ``filters``.

        Returns:
            Number of deleted rows
        """
        pass

    @abstractmethod
    async def upsert(
        self,
        table: str,
        row: Row,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Row:
        """
        Insert a row, or update the row that collides on ``conflict_columns``.

        Returns:
            The stored row
        """
        pass
