# ==============================================================================
# SQL ADAPTER - SQLAlchemy Async Relational Backend
# ==============================================================================
# Direct connection to the remote relational schema (PostgreSQL, SQLite, ...)
# Full async support; SQLite URLs are switched to the aiosqlite driver
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Type

from sqlalchemy import and_, delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from smartcow.core.exceptions import RemoteStoreError
from smartcow.core.settings import RemoteConfig
from smartcow.database.adapters.base_adapter import BaseRemoteAdapter, Row
from smartcow.domain_models import TABLE_MODELS, SQLBase

logger = logging.getLogger(__name__)


class SQLRemoteAdapter(BaseRemoteAdapter):
    """
    Remote adapter over a SQLAlchemy async engine.

    Tables are resolved through a model registry pre-filled with every
    remote table model; tables are created on connect if missing.

    Attributes:
        _database_url: Async SQLAlchemy URL
        _engine: SQLAlchemy async engine
        _session_factory: Session factory for creating sessions
        _model_registry: Mapping of table names to model classes

    Example:
        >>> adapter = SQLRemoteAdapter(RemoteConfig(url="u", anon_key="k",
        ...     backend=RemoteBackend.SQL, database_url="sqlite:///./remote.db"))
        >>> await adapter.connect()
        >>> await adapter.insert("products", {...})
    """

    def __init__(self, config: RemoteConfig, echo: bool = False) -> None:
        url = config.database_url or ""
        if not url:
            raise RemoteStoreError("REMOTE_DATABASE_URL is required for the sql backend")
        # Ensure async driver is used
        if url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

        self._database_url = url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._model_registry: Dict[str, Type[SQLBase]] = dict(TABLE_MODELS)

    @property
    def backend_name(self) -> str:
        return "sql"

    # ==========================================================================
    # MODEL REGISTRY
    # ==========================================================================

    def _get_model(self, table: str, operation: str) -> Type[SQLBase]:
        if table not in self._model_registry:
            raise RemoteStoreError(
                f"Table '{table}' not registered",
                operation=operation,
            )
        return self._model_registry[table]

    @staticmethod
    def _conditions(model: Type[SQLBase], filters: Optional[Dict[str, Any]], operation: str) -> list:
        conditions = []
        for column, value in (filters or {}).items():
            if column not in model.__table__.columns:
                raise RemoteStoreError(f"Unknown column '{column}'", operation=operation)
            conditions.append(getattr(model, column) == value)
        return conditions

    @staticmethod
    def _known_columns(model: Type[SQLBase], row: Row) -> Row:
        return {k: v for k, v in row.items() if k in model.__table__.columns}

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize the engine and create tables.

        Raises:
            RemoteStoreError: If the database cannot be reached
        """
        try:
            connect_args = (
                {"check_same_thread": False}
                if self._database_url.startswith("sqlite")
                else {}
            )
            self._engine = create_async_engine(
                self._database_url,
                echo=self._echo,
                connect_args=connect_args,
            )
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            async with self._engine.begin() as conn:
                await conn.run_sync(SQLBase.metadata.create_all)

            logger.info("SQL remote adapter connected successfully")

        except Exception as e:
            logger.error(f"Failed to connect SQL remote store: {e}")
            raise RemoteStoreError(f"SQL connection failed: {e}", operation="connect")

    async def disconnect(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("SQL remote adapter disconnected")

    async def health_check(self) -> bool:
        try:
            async with self.session("health") as session:
                await session.execute(text("SELECT 1"))
            return True
        except RemoteStoreError as e:
            logger.warning(f"SQL health check failed: {e.message}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional session scope.

        Commits on successful exit, rolls back on exception. Driver errors
        surface as ``RemoteStoreError``.
        """
        if not self._session_factory:
            raise RemoteStoreError("SQL adapter not connected", operation=operation)

        session: AsyncSession = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise RemoteStoreError(f"SQL {operation} failed: {e}", operation=operation)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ==========================================================================
    # TABLE OPERATIONS
    # ==========================================================================

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        operation = f"select {table}"
        model = self._get_model(table, operation)
        query = select(model)

        conditions = self._conditions(model, filters, operation)
        if conditions:
            query = query.where(and_(*conditions))

        if order_by and order_by in model.__table__.columns:
            order_column = getattr(model, order_by)
            query = query.order_by(order_column.desc() if descending else order_column)

        if limit is not None:
            query = query.limit(limit)

        async with self.session(operation) as session:
            result = await session.execute(query)
            return [instance.to_dict() for instance in result.scalars().all()]

    async def insert(self, table: str, row: Row) -> Row:
        operation = f"insert {table}"
        model = self._get_model(table, operation)

        async with self.session(operation) as session:
            instance = model(**self._known_columns(model, row))
            session.add(instance)
            await session.flush()
            await session.refresh(instance)
            return instance.to_dict()

    async def update(
        self,
        table: str,
        filters: Dict[str, Any],
        values: Row,
    ) -> List[Row]:
        operation = f"update {table}"
        model = self._get_model(table, operation)
        conditions = self._conditions(model, filters, operation)
        changes = self._known_columns(model, values)

        async with self.session(operation) as session:
            result = await session.execute(select(model).where(and_(*conditions)))
            instances = list(result.scalars().all())
            for instance in instances:
                for key, value in changes.items():
                    setattr(instance, key, value)
            await session.flush()
            return [instance.to_dict() for instance in instances]

    async def delete(self, table: str, filters: Dict[str, Any]) -> int:
        operation = f"delete {table}"
        model = self._get_model(table, operation)
        conditions = self._conditions(model, filters, operation)

        async with self.session(operation) as session:
            result = await session.execute(delete(model).where(and_(*conditions)))
            return result.rowcount or 0

    async def upsert(
        self,
        table: str,
        row: Row,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Row:
        operation = f"upsert {table}"
        model = self._get_model(table, operation)
        values = self._known_columns(model, row)
        conditions = self._conditions(
            model,
            {column: values.get(column) for column in conflict_columns},
            operation,
        )

        async with self.session(operation) as session:
            result = await session.execute(select(model).where(and_(*conditions)))
            instance = result.scalars().first()
            if instance is None:
                instance = model(**values)
                session.add(instance)
            else:
                for key, value in values.items():
                    # Keep the stored primary key of the colliding row
                    if key != "id":
                        setattr(instance, key, value)
            await session.flush()
            await session.refresh(instance)
            return instance.to_dict()
