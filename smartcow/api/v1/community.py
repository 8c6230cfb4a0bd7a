# ==============================================================================
# COMMUNITY ENDPOINTS - Chat & Forum
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from smartcow.api.dependencies import CurrentIdentity, FacadeDep
from smartcow.core.exceptions import NotFoundError
from smartcow.schemas.base import APIResponse
from smartcow.schemas.community import (
    ChatMessage,
    ChatMessageCreate,
    ForumComment,
    ForumCommentCreate,
    ForumDiscussion,
    ForumDiscussionCreate,
)

router = APIRouter(tags=["Community"])


def _missing_discussion(discussion_id: str) -> NotFoundError:
    return NotFoundError("Discussion not found", resource_type="discussion", resource_id=discussion_id)


# ==============================================================================
# CHAT
# ==============================================================================

@router.post(
    "/chat/messages",
    response_model=APIResponse[ChatMessage],
    status_code=status.HTTP_201_CREATED,
    summary="Send message",
)
async def send_message(
    identity: CurrentIdentity,
    schema: ChatMessageCreate,
    facade: FacadeDep,
) -> APIResponse[ChatMessage]:
    return APIResponse.ok(data=await facade.chat.send_message(identity, schema))


@router.get(
    "/chat/messages",
    response_model=APIResponse[List[ChatMessage]],
    summary="My messages",
)
async def my_messages(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[ChatMessage]]:
    return APIResponse.ok(data=await facade.chat.get_user_messages(identity))


@router.get(
    "/chat/conversations/{other}",
    response_model=APIResponse[List[ChatMessage]],
    summary="Conversation",
    description="Messages between the current identity and ``other``, oldest first.",
)
async def conversation(
    other: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[ChatMessage]]:
    return APIResponse.ok(data=await facade.chat.get_conversation(identity, other))


# ==============================================================================
# FORUM
# ==============================================================================

@router.get(
    "/forum/discussions",
    response_model=APIResponse[List[ForumDiscussion]],
    summary="Discussions",
)
async def list_discussions(facade: FacadeDep) -> APIResponse[List[ForumDiscussion]]:
    return APIResponse.ok(data=await facade.forum.list_discussions())


@router.post(
    "/forum/discussions",
    response_model=APIResponse[ForumDiscussion],
    status_code=status.HTTP_201_CREATED,
    summary="Start discussion",
)
async def create_discussion(
    identity: CurrentIdentity,
    schema: ForumDiscussionCreate,
    facade: FacadeDep,
) -> APIResponse[ForumDiscussion]:
    return APIResponse.ok(data=await facade.forum.create_discussion(identity, schema))


@router.get(
    "/forum/discussions/{discussion_id}",
    response_model=APIResponse[ForumDiscussion],
    summary="Get discussion",
)
async def get_discussion(discussion_id: str, facade: FacadeDep) -> APIResponse[ForumDiscussion]:
    discussion = await facade.forum.get_discussion(discussion_id)
    if discussion is None:
        raise _missing_discussion(discussion_id)
    return APIResponse.ok(data=discussion)


@router.post(
    "/forum/discussions/{discussion_id}/like",
    response_model=APIResponse[ForumDiscussion],
    summary="Toggle like",
)
async def toggle_like(
    discussion_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[ForumDiscussion]:
    discussion = await facade.forum.toggle_like(identity, discussion_id)
    if discussion is None:
        raise _missing_discussion(discussion_id)
    return APIResponse.ok(data=discussion)


@router.get(
    "/forum/discussions/{discussion_id}/comments",
    response_model=APIResponse[List[ForumComment]],
    summary="Comments",
)
async def list_comments(discussion_id: str, facade: FacadeDep) -> APIResponse[List[ForumComment]]:
    return APIResponse.ok(data=await facade.forum.list_comments(discussion_id))


@router.post(
    "/forum/discussions/{discussion_id}/comments",
    response_model=APIResponse[ForumComment],
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
)
async def add_comment(
    discussion_id: str,
    identity: CurrentIdentity,
    schema: ForumCommentCreate,
    facade: FacadeDep,
) -> APIResponse[ForumComment]:
    comment = await facade.forum.add_comment(identity, discussion_id, schema)
    if comment is None:
        raise _missing_discussion(discussion_id)
    return APIResponse.ok(data=comment)
