# ==============================================================================
# NOTIFICATION SERVICE - Per-User Notification Lists
# ==============================================================================

from __future__ import annotations

import logging
from typing import List

from pydantic import ValidationError as PydanticValidationError

from smartcow.core.constants import StorageKeys, Topics
from smartcow.schemas.accounts import NotificationCreate, NotificationItem
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """Notifications kept in the local store only, newest first."""

    @staticmethod
    def key(user: str) -> str:
        return f"{StorageKeys.NOTIFICATIONS_PREFIX}{user}"

    def list_notifications(self, user: str) -> List[NotificationItem]:
        raw = self._store.read(self.key(user), [])
        if not isinstance(raw, list):
            return []
        items: List[NotificationItem] = []
        for entry in raw:
            try:
                items.append(NotificationItem.model_validate(entry))
            except PydanticValidationError:
                logger.warning(f"Dropping unreadable notification of {user}")
        return items

    def unread_count(self, user: str) -> int:
        return sum(1 for item in self.list_notifications(user) if not item.read)

    def _save(self, user: str, items: List[NotificationItem]) -> None:
        self._store.write(self.key(user), [item.to_local() for item in items])
        self._notify(Topics.NOTIFICATIONS, {"userId": user})

    def push(self, user: str, data: NotificationCreate) -> NotificationItem:
        item = NotificationItem(
            id=generate_id("notif"),
            type=data.type,
            message=data.message,
            severity=data.severity,
            time=utc_now(),
            data=data.data,
        )
        self._save(user, [item, *self.list_notifications(user)])
        return item

    def mark_all_read(self, user: str) -> List[NotificationItem]:
        items = [item.model_copy(update={"read": True}) for item in self.list_notifications(user)]
        self._save(user, items)
        return items
