# ==============================================================================
# FORUM SERVICE - Discussions, Likes & Comments
# ==============================================================================

from __future__ import annotations

import logging
from typing import List, Optional

from smartcow.core.constants import Topics, split_identity
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import FORUM_COMMENTS, FORUM_DISCUSSIONS
from smartcow.schemas.community import (
    ForumComment,
    ForumCommentCreate,
    ForumDiscussion,
    ForumDiscussionCreate,
)
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)


class ForumService(BaseService):
    """
    Community forum.

    Discussions and comments are append-only; the like counter and the
    list of liking identities are the only fields that change.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._discussions = context.repository(FORUM_DISCUSSIONS)
        self._comments = context.repository(FORUM_COMMENTS)

    async def list_discussions(self) -> List[ForumDiscussion]:
        """All discussions, newest first."""
        return await self._discussions.list() or []

    async def get_discussion(self, discussion_id: str) -> Optional[ForumDiscussion]:
        return await self._discussions.get(discussion_id)

    async def create_discussion(self, author: str, data: ForumDiscussionCreate) -> ForumDiscussion:
        role, username = split_identity(author)
        discussion = ForumDiscussion(
            id=generate_id("disc"),
            author_id=author,
            author_name=data.author_name or username,
            author_role=role or "",
            title=data.title,
            content=data.content,
            category=data.category,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._discussions.add(discussion), "discussion")
        self._notify(Topics.FORUM, {"discussionId": stored.id})
        return stored

    async def toggle_like(self, user: str, discussion_id: str) -> Optional[ForumDiscussion]:
        """Like or unlike a discussion; None if it does not exist."""
        discussion = await self._discussions.get(discussion_id)
        if discussion is None:
            logger.warning(f"Discussion {discussion_id} not found")
            return None

        liked_users = list(discussion.liked_users)
        if user in liked_users:
            liked_users.remove(user)
        else:
            liked_users.append(user)

        updated = await self._discussions.update(
            discussion_id,
            {"liked_users": liked_users, "likes": len(liked_users), "updated_at": utc_now()},
        )
        if updated is not None:
            self._notify(Topics.FORUM, {"discussionId": discussion_id})
        return updated

    async def list_comments(self, discussion_id: str) -> List[ForumComment]:
        """Comments of one discussion, oldest first."""
        return await self._comments.list(discussion_id) or []

    async def add_comment(
        self,
        author: str,
        discussion_id: str,
        data: ForumCommentCreate,
    ) -> Optional[ForumComment]:
        """Comment on a discussion; None if it does not exist."""
        if await self._discussions.get(discussion_id) is None:
            logger.warning(f"Discussion {discussion_id} not found")
            return None
        role, username = split_identity(author)
        comment = ForumComment(
            id=generate_id("cmt"),
            discussion_id=discussion_id,
            author_id=author,
            author_name=data.author_name or username,
            author_role=role or "",
            content=data.content,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._comments.add(comment), "comment")
        self._notify(Topics.FORUM, {"discussionId": discussion_id})
        return stored
