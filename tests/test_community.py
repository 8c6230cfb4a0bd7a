# ==============================================================================
# COMMUNITY TESTS - Chat & Forum
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import Topics
from smartcow.schemas.community import (
    ChatMessageCreate,
    ForumCommentCreate,
    ForumDiscussionCreate,
)


class TestChat:
    """Append-only direct messages."""

    @pytest.mark.asyncio
    async def test_conversation_is_order_independent(self, facade):
        await facade.chat.send_message("buyer:bob", ChatMessageCreate(receiver_id="seller:alice", message="Is it dry?"))
        await facade.chat.send_message("seller:alice", ChatMessageCreate(receiver_id="buyer:bob", message="Yes."))

        forward = await facade.chat.get_conversation("buyer:bob", "seller:alice")
        backward = await facade.chat.get_conversation("seller:alice", "buyer:bob")
        assert [m.message for m in forward] == ["Is it dry?", "Yes."]
        assert [m.id for m in forward] == [m.id for m in backward]

    @pytest.mark.asyncio
    async def test_message_fields(self, facade):
        message = await facade.chat.send_message(
            "buyer:bob", ChatMessageCreate(receiver_id="seller:alice", message="Hello")
        )
        assert message.sender_role == "buyer"
        assert message.sender_name == "bob"
        assert message.receiver_role == "seller"
        assert message.receiver_name == "alice"

    @pytest.mark.asyncio
    async def test_user_messages_and_inquiries(self, facade):
        await facade.chat.send_message("buyer:bob", ChatMessageCreate(receiver_id="seller:alice", message="1"))
        await facade.chat.send_message("buyer:erin", ChatMessageCreate(receiver_id="seller:alice", message="2"))
        await facade.chat.send_message("seller:alice", ChatMessageCreate(receiver_id="buyer:bob", message="3"))

        assert [m.message for m in await facade.chat.get_user_messages("seller:alice")] == ["1", "2", "3"]
        assert await facade.chat.count_received("seller:alice") == 2
        assert await facade.chat.count_received("buyer:erin") == 0

    @pytest.mark.asyncio
    async def test_send_notifies_chat_topic(self, facade, sibling):
        local, external = [], []
        facade.bus.subscribe(Topics.CHAT, local.append)
        sibling.bus.subscribe(Topics.CHAT, external.append)
        await facade.chat.send_message("buyer:bob", ChatMessageCreate(receiver_id="seller:alice", message="Hi"))
        assert len(local) == 1 and local[0].payload["conversationId"] == "buyer:bob|seller:alice"
        assert len(external) == 1 and external[0].external is True


class TestForum:
    """Discussions, likes and comments."""

    @pytest.mark.asyncio
    async def test_discussions_newest_first(self, facade):
        first = await facade.forum.create_discussion("farmer:budi", ForumDiscussionCreate(title="One", content="a"))
        second = await facade.forum.create_discussion("farmer:budi", ForumDiscussionCreate(title="Two", content="b"))
        assert [d.id for d in await facade.forum.list_discussions()] == [second.id, first.id]
        assert first.author_role == "farmer"
        assert first.category == "general"

    @pytest.mark.asyncio
    async def test_toggle_like(self, facade):
        discussion = await facade.forum.create_discussion("farmer:budi", ForumDiscussionCreate(title="T", content="c"))

        liked = await facade.forum.toggle_like("buyer:bob", discussion.id)
        assert liked.likes == 1 and liked.liked_users == ["buyer:bob"]
        assert liked.updated_at is not None

        unliked = await facade.forum.toggle_like("buyer:bob", discussion.id)
        assert unliked.likes == 0 and unliked.liked_users == []

        assert await facade.forum.toggle_like("buyer:bob", "disc-missing") is None

    @pytest.mark.asyncio
    async def test_comments_oldest_first(self, facade):
        discussion = await facade.forum.create_discussion("farmer:budi", ForumDiscussionCreate(title="T", content="c"))
        await facade.forum.add_comment("buyer:bob", discussion.id, ForumCommentCreate(content="first"))
        await facade.forum.add_comment("seller:alice", discussion.id, ForumCommentCreate(content="second"))

        comments = await facade.forum.list_comments(discussion.id)
        assert [c.content for c in comments] == ["first", "second"]
        assert comments[1].author_role == "seller"

    @pytest.mark.asyncio
    async def test_comment_on_missing_discussion(self, facade):
        assert await facade.forum.add_comment("buyer:bob", "disc-missing", ForumCommentCreate(content="x")) is None

    @pytest.mark.asyncio
    async def test_likes_on_sql_remote(self, sql_facade):
        discussion = await sql_facade.forum.create_discussion(
            "farmer:budi", ForumDiscussionCreate(title="T", content="c")
        )
        await sql_facade.forum.toggle_like("buyer:bob", discussion.id)
        await sql_facade.forum.toggle_like("seller:alice", discussion.id)

        stored = await sql_facade.forum.get_discussion(discussion.id)
        assert stored.likes == 2
        assert stored.liked_users == ["buyer:bob", "seller:alice"]
