# ==============================================================================
# SETTINGS & NOTIFICATION TESTS
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import Limits, Topics
from smartcow.core.exceptions import ValidationError
from smartcow.schemas.accounts import ActivityCreate, NotificationCreate


class TestSettings:
    """Per-identity preference blobs."""

    @pytest.mark.asyncio
    async def test_defaults_use_username(self, facade):
        current = await facade.settings.get_settings("seller:alice")
        assert current.profile.full_name == "alice"
        assert current.profile.username == "alice"
        assert current.dark_mode is False
        assert current.notifications.chat is True

    @pytest.mark.asyncio
    async def test_partial_update_merges_sections(self, facade):
        await facade.settings.update_settings("seller:alice", {"profile": {"phone": "0812"}})
        updated = await facade.settings.update_settings("seller:alice", {"darkMode": True, "profile": {"fullName": "Alice A."}})

        assert updated.dark_mode is True
        assert updated.profile.phone == "0812"
        assert updated.profile.full_name == "Alice A."
        assert updated.profile.username == "alice"
        assert updated.last_updated is not None

    @pytest.mark.asyncio
    async def test_invalid_update_rejected(self, facade):
        with pytest.raises(ValidationError) as exc:
            await facade.settings.update_settings("seller:alice", {"darkMode": {"not": "a bool"}})
        assert "darkMode" in exc.value.details["validation_errors"]
        assert (await facade.settings.get_settings("seller:alice")).dark_mode is False

    @pytest.mark.asyncio
    async def test_settings_are_per_identity(self, facade):
        await facade.settings.update_settings("seller:alice", {"darkMode": True})
        assert (await facade.settings.get_settings("buyer:alice")).dark_mode is False

    @pytest.mark.asyncio
    async def test_save_notifies(self, facade):
        seen = []
        facade.bus.subscribe(Topics.SETTINGS, seen.append)
        await facade.settings.update_settings("seller:alice", {"darkMode": True})
        assert seen[-1].payload == {"userId": "seller:alice"}

    @pytest.mark.asyncio
    async def test_activity_log_is_capped(self, facade):
        for index in range(Limits.ACTIVITY_LOG_MAX + 2):
            await facade.settings.append_activity(
                "seller:alice", ActivityCreate(type="login", description=f"login {index}")
            )
        log = (await facade.settings.get_settings("seller:alice")).activity_log
        assert len(log) == Limits.ACTIVITY_LOG_MAX
        assert log[0].description == f"login {Limits.ACTIVITY_LOG_MAX + 1}"

    @pytest.mark.asyncio
    async def test_settings_on_sql_remote(self, sql_facade):
        await sql_facade.settings.update_settings("seller:alice", {"darkMode": True})
        await sql_facade.settings.update_settings("seller:alice", {"privacy": {"publicProfile": False}})
        current = await sql_facade.settings.get_settings("seller:alice")
        assert current.dark_mode is True
        assert current.privacy.public_profile is False


class TestNotifications:
    """Local-only notification lists."""

    def test_push_newest_first(self, facade):
        facade.notifications.push("admin:admin", NotificationCreate(type="user", message="New user"))
        facade.notifications.push("admin:admin", NotificationCreate(type="content", message="Article queued", severity="warning"))

        items = facade.notifications.list_notifications("admin:admin")
        assert [i.message for i in items] == ["Article queued", "New user"]
        assert facade.notifications.unread_count("admin:admin") == 2

    def test_mark_all_read(self, facade):
        facade.notifications.push("admin:admin", NotificationCreate(type="user", message="New user"))
        facade.notifications.mark_all_read("admin:admin")
        assert facade.notifications.unread_count("admin:admin") == 0

    def test_unreadable_entries_dropped(self, facade):
        facade.store.write(facade.notifications.key("admin:admin"), [{"broken": True}])
        assert facade.notifications.list_notifications("admin:admin") == []
