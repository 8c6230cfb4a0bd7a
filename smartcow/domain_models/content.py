# ==============================================================================
# CONTENT MODELS - Articles, Forum & Chat
# ==============================================================================
# Remote rows for educational articles, discussions and messages
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smartcow.domain_models.base import CreatedAtMixin, SQLBase


class EducationalArticle(SQLBase, CreatedAtMixin):
    """Published article."""

    __tablename__ = "educational_articles"

    author_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    publish_date: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)


class PendingArticle(SQLBase, CreatedAtMixin):
    """Article awaiting moderation."""

    __tablename__ = "pending_articles"

    author_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)


class ForumDiscussion(SQLBase, CreatedAtMixin):
    """Forum thread with its like counter and liking identities."""

    __tablename__ = "forum_discussions"

    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_role: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    liked_users: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    updated_at: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)


class ForumComment(SQLBase, CreatedAtMixin):
    __tablename__ = "forum_comments"

    discussion_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_role: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class ChatMessage(SQLBase, CreatedAtMixin):
    """Chat message; ``conversation_id`` is the sorted identity pair."""

    __tablename__ = "chat_messages"

    conversation_id: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    sender_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sender_role: Mapped[str] = mapped_column(String(50), nullable=False)
    receiver_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    receiver_name: Mapped[str] = mapped_column(String(255), nullable=False)
    receiver_role: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
