# ==============================================================================
# ARTICLE SCHEMAS - Educational Content
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from smartcow.core.constants import ArticleStatus
from smartcow.schemas.base import BaseSchema


class Article(BaseSchema):
    """
    Educational article.

    The same record moves through the author's drafts, the moderation
    queue and the published list; ``status`` tells which stage it is in.
    """

    id: str
    author_id: str = Field(..., description="Author's role-qualified identity")
    author_name: str
    title: str
    category: str
    content: str
    status: ArticleStatus = ArticleStatus.DRAFT
    views: int = Field(0, ge=0)
    cover: Optional[str] = None
    publish_date: Optional[datetime] = None
    created_at: datetime


class ArticleCreate(BaseSchema):
    """Schema for writing a draft."""

    title: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)
    author_name: str = Field("", description="Display name; defaults to the username")
    cover: Optional[str] = None
