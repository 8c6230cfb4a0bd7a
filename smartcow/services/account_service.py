# ==============================================================================
# ACCOUNT SERVICE - Registration, Authentication & User Administration
# ==============================================================================
# Accounts live in the users table (remote) or the users list (local)
# ==============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from smartcow.core.constants import AccountStatus, ErrorMessages, Role, Topics
from smartcow.core.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from smartcow.core.security import create_access_token, hash_password, verify_password
from smartcow.core.settings import settings
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import USERS
from smartcow.schemas.accounts import (
    RegisterRequest,
    TokenResponse,
    UserAccount,
    UserPublic,
)
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)

_BLOCKED = (AccountStatus.BANNED.value, AccountStatus.SUSPENDED.value)

# Built-in administrator; never stored
ADMIN_ACCOUNT_ID = "admin"


class AccountService(BaseService):
    """
    User accounts.

    E-mails are unique case-insensitively and stored lowercase; usernames
    are unique per role, so ``seller:alice`` and ``buyer:alice`` are two
    different accounts. The administrator is a built-in account configured
    through settings and cannot be registered.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._repo = context.repository(USERS)

    # ==========================================================================
    # AUTHENTICATION
    # ==========================================================================

    async def register(self, data: RegisterRequest) -> UserAccount:
        """
        Create an account.

        Raises:
            AuthorizationError: If the requested role is admin
            AlreadyExistsError: If the e-mail or the username is taken
            DatabaseError: If no store accepted the write
        """
        if data.role == Role.ADMIN.value:
            raise AuthorizationError(ErrorMessages.ADMIN_REGISTRATION)

        email = data.email.lower()
        if email == settings.ADMIN_EMAIL.lower() or await self._repo.find(email=email):
            raise AlreadyExistsError(ErrorMessages.EMAIL_TAKEN, resource_type="user")
        if await self._repo.find(name=data.name, role=data.role):
            raise AlreadyExistsError(ErrorMessages.USERNAME_TAKEN, resource_type="user")

        account = UserAccount(
            id=generate_id("user"),
            name=data.name,
            email=email,
            password=hash_password(data.password),
            role=data.role,
            status=AccountStatus.ACTIVE,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._repo.add(account), "account")
        logger.info(f"Registered {stored.identity}")
        self._notify(Topics.USERS, {"userId": stored.identity})
        return stored

    def _admin_account(self) -> UserAccount:
        return UserAccount(
            id=ADMIN_ACCOUNT_ID,
            name=ADMIN_ACCOUNT_ID,
            email=settings.ADMIN_EMAIL.lower(),
            password="",
            role=Role.ADMIN,
            status=AccountStatus.ACTIVE,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    async def authenticate(self, email: str, password: str) -> UserAccount:
        """
        Check credentials and stamp the last login.

        Raises:
            AuthenticationError: On unknown e-mail, wrong password, or a
                banned, suspended or deleted account
        """
        email = email.strip().lower()
        if email == settings.ADMIN_EMAIL.lower() and password == settings.ADMIN_PASSWORD:
            return self._admin_account()

        matches = await self._repo.find(email=email) or []
        account = matches[0] if matches else None
        if account is None or not verify_password(password, account.password):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError(ErrorMessages.INVALID_CREDENTIALS)
        if account.status in _BLOCKED or account.is_deleted:
            raise AuthenticationError(ErrorMessages.ACCOUNT_DISABLED)

        stamped = await self._repo.update(account.id, {"last_login": utc_now()})
        return stamped or account

    def issue_token(self, account: UserAccount) -> TokenResponse:
        """Access token whose subject is the account's role-qualified identity."""
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        token = create_access_token(account.identity, expires_delta=expires)
        return TokenResponse(
            access_token=token,
            expires_in=int(expires.total_seconds()),
            identity=account.identity,
            user=UserPublic.model_validate(account.model_dump()),
        )

    async def login(self, email: str, password: str) -> TokenResponse:
        return self.issue_token(await self.authenticate(email, password))

    # ==========================================================================
    # LOOKUP
    # ==========================================================================

    async def list_users(
        self,
        role: Optional[str] = None,
        include_deleted: bool = False,
    ) -> List[UserAccount]:
        users = await self._repo.list(role) or []
        if include_deleted:
            return users
        return [user for user in users if not user.is_deleted]

    async def get_user(self, user_id: str) -> UserAccount:
        """
        Raises:
            NotFoundError: If no account has ``user_id``
        """
        account = await self._repo.get(user_id)
        if account is None:
            raise NotFoundError("User not found", resource_type="user", resource_id=user_id)
        return account

    async def search(self, query: str) -> List[UserAccount]:
        """Accounts whose name or e-mail contains ``query`` (case-insensitive)."""
        needle = query.strip().lower()
        return [
            user for user in await self.list_users()
            if needle in user.name.lower() or needle in user.email
        ]

    # ==========================================================================
    # ADMINISTRATION
    # ==========================================================================

    async def _administer(self, actor: str, user_id: str, changes: Dict[str, Any]) -> UserAccount:
        self._require_admin(actor, ErrorMessages.PERMISSION_DENIED)
        await self.get_user(user_id)
        updated = self._require_stored(await self._repo.update(user_id, changes), "account")
        logger.info(f"{actor} changed {updated.identity}: {sorted(changes)}")
        self._notify(Topics.USERS, {"userId": updated.identity})
        return updated

    async def change_role(self, actor: str, user_id: str, role: Role) -> UserAccount:
        return await self._administer(actor, user_id, {"role": Role(role).value})

    async def set_status(self, actor: str, user_id: str, status: AccountStatus) -> UserAccount:
        return await self._administer(actor, user_id, {"status": AccountStatus(status).value})

    async def soft_delete(self, actor: str, user_id: str) -> UserAccount:
        return await self._administer(actor, user_id, {"deleted_at": utc_now()})

    async def restore(self, actor: str, user_id: str) -> UserAccount:
        return await self._administer(actor, user_id, {"deleted_at": None})
