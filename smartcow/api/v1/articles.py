# ==============================================================================
# ARTICLE ENDPOINTS - Drafts, Moderation & Public Listing
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from smartcow.api.dependencies import AdminIdentity, CurrentIdentity, FacadeDep
from smartcow.core.exceptions import NotFoundError
from smartcow.schemas.articles import Article, ArticleCreate
from smartcow.schemas.base import APIResponse

router = APIRouter(prefix="/articles", tags=["Articles"])


def _missing(article_id: str) -> NotFoundError:
    return NotFoundError("Article not found", resource_type="article", resource_id=article_id)


# ==============================================================================
# PUBLIC
# ==============================================================================

@router.get(
    "",
    response_model=APIResponse[List[Article]],
    summary="Published articles",
)
async def published_articles(facade: FacadeDep) -> APIResponse[List[Article]]:
    return APIResponse.ok(data=await facade.articles.list_published())


@router.post(
    "/{article_id}/view",
    response_model=APIResponse[Article],
    summary="Count a view",
)
async def record_view(article_id: str, facade: FacadeDep) -> APIResponse[Article]:
    article = await facade.articles.record_view(article_id)
    if article is None:
        raise _missing(article_id)
    return APIResponse.ok(data=article)


# ==============================================================================
# AUTHOR
# ==============================================================================

@router.post(
    "",
    response_model=APIResponse[Article],
    status_code=status.HTTP_201_CREATED,
    summary="Create draft",
)
async def create_draft(
    identity: CurrentIdentity,
    schema: ArticleCreate,
    facade: FacadeDep,
) -> APIResponse[Article]:
    article = await facade.articles.create_draft(identity, schema)
    return APIResponse.ok(data=article, message="Draft saved")


@router.get(
    "/mine",
    response_model=APIResponse[List[Article]],
    summary="My articles",
)
async def my_articles(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Article]]:
    return APIResponse.ok(data=await facade.articles.list_author_articles(identity))


@router.put(
    "/{article_id}",
    response_model=APIResponse[Article],
    summary="Edit draft",
)
async def update_draft(
    article_id: str,
    identity: CurrentIdentity,
    schema: ArticleCreate,
    facade: FacadeDep,
) -> APIResponse[Article]:
    article = await facade.articles.update_draft(identity, article_id, schema)
    if article is None:
        raise _missing(article_id)
    return APIResponse.ok(data=article)


@router.post(
    "/{article_id}/submit",
    response_model=APIResponse[Article],
    summary="Submit for review",
)
async def submit(
    article_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[Article]:
    article = await facade.articles.submit_for_review(identity, article_id)
    if article is None:
        raise _missing(article_id)
    return APIResponse.ok(data=article, message="Submitted for review")


# ==============================================================================
# MODERATION
# ==============================================================================

@router.get(
    "/pending",
    response_model=APIResponse[List[Article]],
    summary="Moderation queue",
)
async def pending_articles(
    identity: AdminIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Article]]:
    return APIResponse.ok(data=await facade.articles.list_pending())


@router.post(
    "/{article_id}/publish",
    response_model=APIResponse[Article],
    summary="Publish article",
)
async def publish(
    article_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[Article]:
    article = await facade.articles.publish(identity, article_id)
    if article is None:
        raise _missing(article_id)
    return APIResponse.ok(data=article, message="Article published")


@router.post(
    "/{article_id}/reject",
    response_model=APIResponse[Article],
    summary="Reject article",
)
async def reject(
    article_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[Article]:
    article = await facade.articles.reject(identity, article_id)
    if article is None:
        raise _missing(article_id)
    return APIResponse.ok(data=article, message="Article rejected")
