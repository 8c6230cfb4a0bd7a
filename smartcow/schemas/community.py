# ==============================================================================
# COMMUNITY SCHEMAS - Chat & Forum
# ==============================================================================
# Append-only messages, discussions and comments
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from smartcow.schemas.base import BaseSchema


# ==============================================================================
# CHAT
# ==============================================================================

class ChatMessage(BaseSchema):
    """Message between two role-qualified identities."""

    id: str
    conversation_id: str
    sender_id: str
    sender_name: str
    sender_role: str
    receiver_id: str
    receiver_name: str
    receiver_role: str
    message: str
    created_at: datetime


class ChatMessageCreate(BaseSchema):
    """Schema for sending a message; the sender is the authenticated identity."""

    receiver_id: str = Field(..., min_length=1)
    receiver_name: str = ""
    sender_name: str = ""
    message: str = Field(..., min_length=1, max_length=5000)


# ==============================================================================
# FORUM
# ==============================================================================

class ForumDiscussion(BaseSchema):
    id: str
    author_id: str
    author_name: str
    author_role: str
    title: str
    content: str
    category: str
    likes: int = Field(0, ge=0)
    liked_users: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class ForumDiscussionCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category: str = Field("general", min_length=1, max_length=100)
    author_name: str = ""


class ForumComment(BaseSchema):
    id: str
    discussion_id: str
    author_id: str
    author_name: str
    author_role: str
    content: str
    created_at: datetime


class ForumCommentCreate(BaseSchema):
    content: str = Field(..., min_length=1, max_length=5000)
    author_name: str = ""
