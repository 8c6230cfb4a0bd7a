# ==============================================================================
# ACCOUNT ENDPOINTS - User Administration, Settings & Notifications
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Query, status

from smartcow.api.dependencies import AdminIdentity, CurrentIdentity, FacadeDep
from smartcow.schemas.accounts import (
    ActivityCreate,
    NotificationCreate,
    NotificationItem,
    RoleUpdate,
    StatusUpdate,
    UserAccount,
    UserPublic,
    UserSettings,
)
from smartcow.schemas.base import APIResponse

router = APIRouter(tags=["Accounts"])


def _public(accounts: Iterable[UserAccount]) -> List[UserPublic]:
    return [UserPublic.model_validate(account.model_dump()) for account in accounts]


# ==============================================================================
# USER ADMINISTRATION
# ==============================================================================

@router.get(
    "/users",
    response_model=APIResponse[List[UserPublic]],
    summary="List users",
)
async def list_users(
    identity: AdminIdentity,
    facade: FacadeDep,
    role: Optional[str] = Query(None),
    include_deleted: bool = Query(False),
) -> APIResponse[List[UserPublic]]:
    users = await facade.accounts.list_users(role, include_deleted=include_deleted)
    return APIResponse.ok(data=_public(users))


@router.get(
    "/users/search",
    response_model=APIResponse[List[UserPublic]],
    summary="Search users",
)
async def search_users(
    identity: AdminIdentity,
    facade: FacadeDep,
    q: str = Query(..., min_length=1),
) -> APIResponse[List[UserPublic]]:
    return APIResponse.ok(data=_public(await facade.accounts.search(q)))


@router.patch(
    "/users/{user_id}/role",
    response_model=APIResponse[UserPublic],
    summary="Change role",
)
async def change_role(
    user_id: str,
    identity: CurrentIdentity,
    schema: RoleUpdate,
    facade: FacadeDep,
) -> APIResponse[UserPublic]:
    account = await facade.accounts.change_role(identity, user_id, schema.role)
    return APIResponse.ok(data=_public([account])[0])


@router.patch(
    "/users/{user_id}/status",
    response_model=APIResponse[UserPublic],
    summary="Change account status",
)
async def set_status(
    user_id: str,
    identity: CurrentIdentity,
    schema: StatusUpdate,
    facade: FacadeDep,
) -> APIResponse[UserPublic]:
    account = await facade.accounts.set_status(identity, user_id, schema.status)
    return APIResponse.ok(data=_public([account])[0])


@router.delete(
    "/users/{user_id}",
    response_model=APIResponse[UserPublic],
    summary="Soft delete user",
)
async def soft_delete(
    user_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[UserPublic]:
    account = await facade.accounts.soft_delete(identity, user_id)
    return APIResponse.ok(data=_public([account])[0], message="User deleted")


@router.post(
    "/users/{user_id}/restore",
    response_model=APIResponse[UserPublic],
    summary="Restore user",
)
async def restore(
    user_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[UserPublic]:
    account = await facade.accounts.restore(identity, user_id)
    return APIResponse.ok(data=_public([account])[0], message="User restored")


# ==============================================================================
# SETTINGS
# ==============================================================================

@router.get(
    "/settings",
    response_model=APIResponse[UserSettings],
    summary="My settings",
)
async def get_settings(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[UserSettings]:
    return APIResponse.ok(data=await facade.settings.get_settings(identity))


@router.put(
    "/settings",
    response_model=APIResponse[UserSettings],
    summary="Replace settings",
)
async def save_settings(
    identity: CurrentIdentity,
    schema: UserSettings,
    facade: FacadeDep,
) -> APIResponse[UserSettings]:
    return APIResponse.ok(data=await facade.settings.save_settings(identity, schema))


@router.patch(
    "/settings",
    response_model=APIResponse[UserSettings],
    summary="Update settings",
    description="Merge camelCase sections into the current settings.",
)
async def update_settings(
    identity: CurrentIdentity,
    changes: Dict[str, Any],
    facade: FacadeDep,
) -> APIResponse[UserSettings]:
    return APIResponse.ok(data=await facade.settings.update_settings(identity, changes))


@router.post(
    "/settings/activity",
    response_model=APIResponse[UserSettings],
    status_code=status.HTTP_201_CREATED,
    summary="Log activity",
)
async def append_activity(
    identity: CurrentIdentity,
    schema: ActivityCreate,
    facade: FacadeDep,
) -> APIResponse[UserSettings]:
    return APIResponse.ok(data=await facade.settings.append_activity(identity, schema))


# ==============================================================================
# NOTIFICATIONS
# ==============================================================================

@router.get(
    "/notifications",
    response_model=APIResponse[List[NotificationItem]],
    summary="My notifications",
)
async def list_notifications(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[NotificationItem]]:
    return APIResponse.ok(data=facade.notifications.list_notifications(identity))


@router.post(
    "/notifications",
    response_model=APIResponse[NotificationItem],
    status_code=status.HTTP_201_CREATED,
    summary="Push notification",
)
async def push_notification(
    identity: CurrentIdentity,
    schema: NotificationCreate,
    facade: FacadeDep,
) -> APIResponse[NotificationItem]:
    return APIResponse.ok(data=facade.notifications.push(identity, schema))


@router.post(
    "/notifications/read",
    response_model=APIResponse[List[NotificationItem]],
    summary="Mark all read",
)
async def mark_all_read(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[NotificationItem]]:
    return APIResponse.ok(data=facade.notifications.mark_all_read(identity))
