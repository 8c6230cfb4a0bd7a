# ==============================================================================
# ARTICLE SERVICE - Drafts, Moderation & Publication
# ==============================================================================
# draft (author only) -> pending (moderation queue) -> published | rejected
# ==============================================================================

from __future__ import annotations

import logging
from typing import List, Optional

from smartcow.core.constants import ArticleStatus, ErrorMessages, Topics, split_identity
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import (
    DRAFT_ARTICLES,
    PENDING_ARTICLES,
    PUBLISHED_ARTICLES,
)
from smartcow.schemas.articles import Article, ArticleCreate
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)

_SUBMITTABLE = (ArticleStatus.DRAFT.value, ArticleStatus.REJECTED.value)


class ArticleService(BaseService):
    """
    Educational articles.

    The author's copy lives in their local draft list and carries the
    current status. Submission puts a copy on the moderation queue;
    publication moves it from the queue to the public list. Only
    published articles are ever listed publicly.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._drafts = context.repository(DRAFT_ARTICLES)
        self._pending = context.repository(PENDING_ARTICLES)
        self._published = context.repository(PUBLISHED_ARTICLES)
        self._published_local = context.local_repository(PUBLISHED_ARTICLES)

    # ==========================================================================
    # AUTHOR OPERATIONS
    # ==========================================================================

    async def create_draft(self, author: str, data: ArticleCreate) -> Article:
        _, username = split_identity(author)
        article = Article(
            id=generate_id("art"),
            author_id=author,
            author_name=data.author_name or username,
            title=data.title,
            category=data.category,
            content=data.content,
            cover=data.cover,
            status=ArticleStatus.DRAFT,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._drafts.add(article), "article")
        self._notify(Topics.ARTICLES, {"cpId": author})
        return stored

    async def list_author_articles(self, author: str) -> List[Article]:
        """Every article of ``author`` whatever its stage."""
        return await self._drafts.list(author) or []

    async def update_draft(
        self,
        author: str,
        article_id: str,
        data: ArticleCreate,
    ) -> Optional[Article]:
        """Edit a draft or rejected article; published and queued ones are frozen."""
        article = await self._drafts.get(article_id)
        if article is None or article.author_id != author or article.status not in _SUBMITTABLE:
            logger.warning(f"Article {article_id} is not an editable draft of {author}")
            return None
        changes = data.model_dump(exclude_unset=True)
        if not changes.get("author_name"):
            changes.pop("author_name", None)
        updated = await self._drafts.update(article_id, changes)
        if updated is not None:
            self._notify(Topics.ARTICLES, {"cpId": author})
        return updated

    async def submit_for_review(self, author: str, article_id: str) -> Optional[Article]:
        """
        Move a draft (or a rejected article) onto the moderation queue.

        Returns:
            The queued article, or None if it is not the author's draft
        """
        article = await self._drafts.get(article_id)
        if article is None or article.author_id != author:
            logger.warning(f"Article {article_id} not found among drafts of {author}")
            return None
        if article.status not in _SUBMITTABLE:
            logger.warning(f"Article {article_id} is {article.status}; cannot submit")
            return None

        submitted = await self._drafts.update(article_id, {"status": ArticleStatus.PENDING.value})
        if submitted is None:
            return None
        queued = await self._pending.upsert(submitted)
        if queued is None:
            logger.warning(f"Article {article_id} could not be queued for review")
            return None

        logger.info(f"Article {article_id} submitted for review by {author}")
        self._notify(Topics.ARTICLES, {"cpId": author, "articleId": article_id})
        return submitted

    # ==========================================================================
    # MODERATION
    # ==========================================================================

    async def list_pending(self) -> List[Article]:
        return await self._pending.list() or []

    async def publish(self, moderator: str, article_id: str) -> Optional[Article]:
        """
        Approve a queued article.

        Raises:
            AuthorizationError: If ``moderator`` is not an admin
        """
        self._require_admin(moderator, ErrorMessages.ADMIN_ONLY)
        queued = await self._pending.get(article_id)
        if queued is None:
            logger.warning(f"Article {article_id} is not awaiting review")
            return None

        now = utc_now()
        published = queued.model_copy(
            update={"status": ArticleStatus.PUBLISHED.value, "publish_date": now}
        )
        if await self._published.add(published) is None:
            logger.warning(f"Article {article_id} could not be published")
            return None
        await self._pending.remove(article_id)
        await self._drafts.update(
            article_id,
            {"status": ArticleStatus.PUBLISHED.value, "publish_date": now},
        )

        logger.info(f"Article {article_id} published by {moderator}")
        self._notify(Topics.ARTICLES, {"cpId": queued.author_id, "articleId": article_id})
        return published

    async def reject(self, moderator: str, article_id: str) -> Optional[Article]:
        """
        Decline a queued article and return it to its author.

        Raises:
            AuthorizationError: If ``moderator`` is not an admin
        """
        self._require_admin(moderator, ErrorMessages.ADMIN_ONLY)
        queued = await self._pending.get(article_id)
        if queued is None:
            logger.warning(f"Article {article_id} is not awaiting review")
            return None

        await self._pending.remove(article_id)
        returned = await self._drafts.update(article_id, {"status": ArticleStatus.REJECTED.value})

        logger.info(f"Article {article_id} rejected by {moderator}")
        self._notify(Topics.ARTICLES, {"cpId": queued.author_id, "articleId": article_id})
        return returned or queued.model_copy(update={"status": ArticleStatus.REJECTED.value})

    # ==========================================================================
    # PUBLIC LISTING
    # ==========================================================================

    async def list_published(self) -> List[Article]:
        """Public article list (published only, newest first)."""
        articles = await self._published.list() or []
        return [a for a in articles if a.status == ArticleStatus.PUBLISHED.value]

    async def record_view(self, article_id: str) -> Optional[Article]:
        """Increment the local view counter of a published article."""
        article = await self._published_local.get(article_id)
        if article is None:
            logger.warning(f"Article {article_id} is not published")
            return None
        updated = await self._published_local.update(article_id, {"views": article.views + 1})
        if updated is not None:
            self._notify(Topics.ARTICLES, {"articleId": article_id, "views": updated.views})
        return updated
