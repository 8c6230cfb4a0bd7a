# ==============================================================================
# STORE FACTORY - Storage Strategy Selection & Lifecycle Management
# ==============================================================================
# Builds the local store, change bus, remote adapter and repositories ONCE
# from an explicit RemoteConfig; keeps the application's facade cached
# ==============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

import httpx

from smartcow.core.exceptions import RemoteStoreError
from smartcow.core.settings import RemoteBackend, RemoteConfig, settings
from smartcow.database.adapters.base_adapter import BaseRemoteAdapter
from smartcow.database.adapters.rest_adapter import RestRemoteAdapter
from smartcow.database.adapters.sql_adapter import SQLRemoteAdapter
from smartcow.database.local_store import KeyValueMedium, LocalRecordStore, create_medium
from smartcow.database.repositories.base_repository import EntitySpec, ModelType, Repository
from smartcow.database.repositories.local_repository import LocalRepository
from smartcow.database.repositories.remote_repository import RemoteRepository
from smartcow.database.repositories.write_through import WriteThroughRepository
from smartcow.events.bus import ChangeBus

if TYPE_CHECKING:
    from smartcow.services.facade import SyncFacade

logger = logging.getLogger(__name__)


@dataclass
class StorageContext:
    """
    Everything a service needs to reach storage.

    Repositories are created on first request and cached, so each entity
    gets exactly one implementation for the lifetime of the context.

    Attributes:
        config: Remote connection parameters, fixed at start-up
        store: Local Record Store of this context ("tab")
        bus: Change Notification Bus of this context
        adapter: Connected remote adapter, or None in local-only mode
        write_through: Mirror successful remote results locally
        owns_medium: The medium was opened for this context and closes with it
    """

    config: RemoteConfig
    store: LocalRecordStore
    bus: ChangeBus
    adapter: Optional[BaseRemoteAdapter] = None
    write_through: bool = True
    owns_medium: bool = False
    _repositories: Dict[str, Repository] = field(default_factory=dict)
    _locals: Dict[str, LocalRepository] = field(default_factory=dict)

    @property
    def remote_enabled(self) -> bool:
        return self.adapter is not None

    @property
    def mode(self) -> str:
        if self.adapter is None:
            return "local"
        return f"remote:{self.adapter.backend_name}"

    def local_repository(self, spec: EntitySpec[ModelType]) -> LocalRepository[ModelType]:
        """Local repository of an entity, whatever the remote mode."""
        if spec.name not in self._locals:
            self._locals[spec.name] = LocalRepository(self.store, spec)
        return self._locals[spec.name]

    def repository(self, spec: EntitySpec[ModelType]) -> Repository[ModelType]:
        """
        Repository of an entity, selected by the remote mode.

        Returns:
            WriteThroughRepository when a remote adapter is available and
            the entity has a table, LocalRepository otherwise
        """
        if spec.name in self._repositories:
            return self._repositories[spec.name]

        local = self.local_repository(spec)
        repository: Repository[ModelType]
        if self.adapter is not None and spec.table is not None:
            repository = WriteThroughRepository(
                RemoteRepository(self.adapter, spec),
                local,
                mirror=self.write_through,
            )
        else:
            repository = local
        logger.debug(f"Repository for {spec.name}: {repository.source}")
        self._repositories[spec.name] = repository
        return repository


class StoreFactory:
    """
    Factory class for building and managing storage contexts.

    Implements the Factory Pattern with a cached application facade. The
    remote-vs-local decision is taken here, once, from ``RemoteConfig``.

    Class Attributes:
        _facade: Facade built by ``initialize``

    Example:
        >>> # Initialize at application startup
        >>> await StoreFactory.initialize()
        >>>
        >>> facade = StoreFactory.get_facade()
        >>> await facade.products.get_marketplace_products()
        >>>
        >>> # Shutdown at application exit
        >>> await StoreFactory.shutdown()
    """

    _facade: Optional["SyncFacade"] = None

    @classmethod
    def create_adapter(
        cls,
        config: RemoteConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Optional[BaseRemoteAdapter]:
        """
        Create the remote adapter selected by ``config``.

        Returns:
            Adapter instance, or None when remote is not configured

        Raises:
            ValueError: If the backend is not supported
        """
        if not config.is_configured:
            logger.info("Remote store not configured; running local-only")
            return None

        if config.backend == RemoteBackend.REST:
            logger.info("Created REST remote adapter")
            return RestRemoteAdapter(config, transport=transport)

        if config.backend == RemoteBackend.SQL:
            logger.info("Created SQL remote adapter")
            return SQLRemoteAdapter(config, echo=settings.DEBUG)

        raise ValueError(f"Unsupported remote backend: {config.backend}")

    @classmethod
    async def build(
        cls,
        config: Optional[RemoteConfig] = None,
        medium: Optional[KeyValueMedium] = None,
        write_through: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SyncFacade":
        """
        Build a facade over a (possibly shared) storage medium.

        Several facades built on the same medium behave like browser tabs
        sharing one storage: writes through one surface as external
        notifications on the others' buses.

        Args:
            config: Remote parameters (defaults to settings)
            medium: Storage medium shared with other facades; when omitted one
                is opened from LOCAL_STORE_URL and closed with the facade
            write_through: Mirror remote results locally (defaults to settings)
            transport: httpx transport override for the REST adapter

        Returns:
            Ready-to-use facade
        """
        from smartcow.services.facade import SyncFacade

        config = config or RemoteConfig.from_settings(settings)
        owns_medium = medium is None
        if medium is None:
            medium = create_medium(settings.LOCAL_STORE_URL)
        store = LocalRecordStore(medium)
        bus = ChangeBus()
        bus.bridge(store)

        adapter = cls.create_adapter(config, transport=transport)
        if adapter is not None:
            try:
                await adapter.connect()
            except RemoteStoreError as e:
                # Calls will keep failing and fall back per operation
                logger.error(f"Remote adapter unavailable at start-up: {e.message}")

        context = StorageContext(
            config=config,
            store=store,
            bus=bus,
            adapter=adapter,
            write_through=settings.WRITE_THROUGH if write_through is None else write_through,
            owns_medium=owns_medium,
        )
        logger.info(f"Storage context ready ({context.mode})")
        return SyncFacade(context)

    @classmethod
    async def initialize(
        cls,
        config: Optional[RemoteConfig] = None,
    ) -> "SyncFacade":
        """
        Build and cache the application facade.

        Should be called at application startup.
        """
        if cls._facade is not None:
            return cls._facade
        cls._facade = await cls.build(config)
        return cls._facade

    @classmethod
    async def shutdown(cls) -> None:
        """
        Close the remote adapter and the local medium.

        Should be called at application shutdown.
        """
        if cls._facade is not None:
            await cls._facade.close()
        cls._facade = None
        logger.info("Storage closed")

    @classmethod
    def get_facade(cls) -> "SyncFacade":
        """
        Get the application facade.

        Raises:
            RuntimeError: If the factory is not initialized
        """
        if cls._facade is None:
            raise RuntimeError(
                "Storage not initialized. Call StoreFactory.initialize() first."
            )
        return cls._facade

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._facade is not None

    @classmethod
    async def health_check(cls) -> bool:
        """
        Check storage health.

        Local-only mode is healthy by definition; in remote mode the
        adapter must answer.
        """
        try:
            facade = cls.get_facade()
        except RuntimeError:
            return False
        adapter = facade.context.adapter
        if adapter is None:
            return True
        return await adapter.health_check()

    @classmethod
    def reset(cls) -> None:
        """
        Reset factory state.

        Clears the cached facade without closing anything.
        Primarily for testing purposes.
        """
        cls._facade = None
