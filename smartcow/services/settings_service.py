# ==============================================================================
# SETTINGS SERVICE - Per-User Preferences & Activity Log
# ==============================================================================
# One settings record per (identity, role); remote upsert on that pair
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from smartcow.core.constants import Limits, Topics, split_identity
from smartcow.core.exceptions import ValidationError
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import USER_SETTINGS
from smartcow.schemas.accounts import (
    ActivityCreate,
    ActivityEntry,
    ProfileSettings,
    SettingsRecord,
    UserSettings,
)
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)

_CONFLICT_COLUMNS = ("user_id", "role")


class SettingsService(BaseService):
    """
    User settings.

    Reads always return a complete blob: sections missing from the stored
    record (or a missing record) take their defaults. Partial updates merge
    section by section.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._repo = context.repository(USER_SETTINGS)

    @staticmethod
    def defaults(user: str) -> UserSettings:
        """Settings of a user who never saved any."""
        _, username = split_identity(user)
        return UserSettings(profile=ProfileSettings(full_name=username, username=username))

    async def _record(self, user: str) -> Optional[SettingsRecord]:
        records = await self._repo.list(user, limit=1)
        return records[0] if records else None

    async def get_settings(self, user: str) -> UserSettings:
        record = await self._record(user)
        if record is None:
            return self.defaults(user)
        return record.settings

    async def save_settings(self, user: str, user_settings: UserSettings) -> UserSettings:
        """
        Replace the settings of ``user``.

        Raises:
            DatabaseError: If no store accepted the write
        """
        now = utc_now()
        role, _ = split_identity(user)
        existing = await self._record(user)
        record = SettingsRecord(
            id=existing.id if existing else generate_id("settings"),
            user_id=user,
            role=role or "",
            settings=user_settings.model_copy(update={"last_updated": now}),
            updated_at=now,
        )
        stored = self._require_stored(
            await self._repo.upsert(record, conflict_columns=_CONFLICT_COLUMNS),
            "settings",
        )
        self._notify(Topics.SETTINGS, {"userId": user})
        return stored.settings

    async def update_settings(self, user: str, changes: Dict[str, Any]) -> UserSettings:
        """
        Merge ``changes`` into the current settings, one section at a time.

        Keys use the camelCase form the settings are stored in
        (``darkMode``, ``profile.fullName``).

        Raises:
            ValidationError: If the merged settings do not validate
        """
        current = (await self.get_settings(user)).model_dump(by_alias=True)
        for section, value in changes.items():
            if isinstance(value, dict) and isinstance(current.get(section), dict):
                current[section] = {**current[section], **value}
            else:
                current[section] = value
        try:
            merged = UserSettings.model_validate(current)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid settings update",
                errors={".".join(map(str, err["loc"])): err["msg"] for err in e.errors()},
            )
        return await self.save_settings(user, merged)

    async def append_activity(self, user: str, data: ActivityCreate) -> UserSettings:
        """Record an activity, newest first; the log keeps the last 100 entries."""
        current = await self.get_settings(user)
        entry = ActivityEntry(
            id=generate_id("act"),
            type=data.type,
            description=data.description,
            time=utc_now(),
        )
        log = [entry, *current.activity_log][: Limits.ACTIVITY_LOG_MAX]
        return await self.save_settings(user, current.model_copy(update={"activity_log": log}))
