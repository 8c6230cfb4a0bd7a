# ==============================================================================
# BASE SERVICE - Shared Facade Plumbing
# ==============================================================================
# Common access to repositories, the local store and the change bus
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from smartcow.core.constants import Role, split_identity
from smartcow.core.exceptions import AuthorizationError, DatabaseError
from smartcow.database.factory import StorageContext
from smartcow.events.bus import Notification

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base class of the synchronization facade services.

    Each service owns one domain (products, orders, ...) and talks to
    storage only through the context it was built with.

    Attributes:
        _context: Storage context (config, store, bus, repositories)
    """

    def __init__(self, context: StorageContext) -> None:
        self._context = context
        self._store = context.store
        self._bus = context.bus

    def _notify(self, topic: str, payload: Optional[Dict[str, Any]] = None) -> Notification:
        """Emit a change notification after a mutation."""
        return self._bus.notify(topic, payload)

    @staticmethod
    def _require_stored(record: Any, what: str) -> Any:
        """
        Raise when neither the remote nor the local store accepted a write.

        Raises:
            DatabaseError: If ``record`` is None
        """
        if record is None:
            raise DatabaseError(f"Could not store {what}")
        return record

    @staticmethod
    def _require_admin(actor: str, message: str) -> None:
        """
        Raises:
            AuthorizationError: If ``actor`` is not an admin identity
        """
        role, _ = split_identity(actor)
        if role != Role.ADMIN.value:
            raise AuthorizationError(message, required_permission="admin")
