# ==============================================================================
# ARTICLE TESTS
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import ArticleStatus
from smartcow.core.exceptions import AuthorizationError
from smartcow.schemas.articles import ArticleCreate

AUTHOR = "compost_processor:dana"
ADMIN = "admin:admin"


@pytest.fixture
def draft_data(sample_article_data) -> ArticleCreate:
    return ArticleCreate(**sample_article_data)


class TestArticleLifecycle:
    """draft -> pending -> published | rejected."""

    @pytest.mark.asyncio
    async def test_draft_is_private(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        assert draft.status == ArticleStatus.DRAFT.value
        assert draft.author_name == "dana"
        assert [a.id for a in await facade.articles.list_author_articles(AUTHOR)] == [draft.id]
        assert await facade.articles.list_pending() == []
        assert await facade.articles.list_published() == []

    @pytest.mark.asyncio
    async def test_submit_then_publish(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)

        submitted = await facade.articles.submit_for_review(AUTHOR, draft.id)
        assert submitted.status == ArticleStatus.PENDING.value
        assert [a.id for a in await facade.articles.list_pending()] == [draft.id]
        assert await facade.articles.list_published() == []

        published = await facade.articles.publish(ADMIN, draft.id)
        assert published.status == ArticleStatus.PUBLISHED.value
        assert published.publish_date is not None
        assert await facade.articles.list_pending() == []
        assert [a.id for a in await facade.articles.list_published()] == [draft.id]

        mine = await facade.articles.list_author_articles(AUTHOR)
        assert mine[0].status == ArticleStatus.PUBLISHED.value

    @pytest.mark.asyncio
    async def test_reject_returns_to_author(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        await facade.articles.submit_for_review(AUTHOR, draft.id)

        rejected = await facade.articles.reject(ADMIN, draft.id)
        assert rejected.status == ArticleStatus.REJECTED.value
        assert await facade.articles.list_pending() == []
        assert await facade.articles.list_published() == []

        again = await facade.articles.submit_for_review(AUTHOR, draft.id)
        assert again.status == ArticleStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_only_admin_moderates(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        await facade.articles.submit_for_review(AUTHOR, draft.id)
        with pytest.raises(AuthorizationError):
            await facade.articles.publish(AUTHOR, draft.id)
        with pytest.raises(AuthorizationError):
            await facade.articles.reject("seller:alice", draft.id)
        assert len(await facade.articles.list_pending()) == 1

    @pytest.mark.asyncio
    async def test_publish_requires_queued_article(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        assert await facade.articles.publish(ADMIN, draft.id) is None
        assert await facade.articles.list_published() == []

    @pytest.mark.asyncio
    async def test_cannot_submit_someone_elses_draft(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        assert await facade.articles.submit_for_review("seller:alice", draft.id) is None

    @pytest.mark.asyncio
    async def test_queued_article_is_frozen(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        await facade.articles.submit_for_review(AUTHOR, draft.id)
        assert await facade.articles.submit_for_review(AUTHOR, draft.id) is None
        edited = ArticleCreate(title="Changed", category="compost", content="x")
        assert await facade.articles.update_draft(AUTHOR, draft.id, edited) is None

    @pytest.mark.asyncio
    async def test_update_draft(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        edited = ArticleCreate(title="Better title", category="compost", content="More.")
        updated = await facade.articles.update_draft(AUTHOR, draft.id, edited)
        assert updated.title == "Better title"
        assert updated.author_name == "dana"


class TestArticleViews:
    """Local view counters of published articles."""

    @pytest.mark.asyncio
    async def test_record_view(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        await facade.articles.submit_for_review(AUTHOR, draft.id)
        await facade.articles.publish(ADMIN, draft.id)

        await facade.articles.record_view(draft.id)
        viewed = await facade.articles.record_view(draft.id)
        assert viewed.views == 2
        assert (await facade.articles.list_published())[0].views == 2

    @pytest.mark.asyncio
    async def test_unpublished_has_no_views(self, facade, draft_data):
        draft = await facade.articles.create_draft(AUTHOR, draft_data)
        assert await facade.articles.record_view(draft.id) is None


class TestArticlesOnSQLRemote:
    @pytest.mark.asyncio
    async def test_publish_through_remote_tables(self, sql_facade, draft_data):
        draft = await sql_facade.articles.create_draft(AUTHOR, draft_data)
        await sql_facade.articles.submit_for_review(AUTHOR, draft.id)
        assert [a.status for a in await sql_facade.articles.list_pending()] == [ArticleStatus.PENDING.value]

        await sql_facade.articles.publish(ADMIN, draft.id)
        published = await sql_facade.articles.list_published()
        assert [a.id for a in published] == [draft.id]
        assert await sql_facade.articles.list_pending() == []
