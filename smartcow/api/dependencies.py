# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for authentication and facade access
# ==============================================================================

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from smartcow.core.constants import ErrorMessages, Role, split_identity
from smartcow.core.exceptions import InvalidTokenError, TokenExpiredError
from smartcow.core.security import verify_access_token
from smartcow.core.settings import settings
from smartcow.database.factory import StoreFactory
from smartcow.services.facade import SyncFacade

# OAuth2 scheme for JWT tokens
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/token",
    auto_error=False,
)


# ==============================================================================
# FACADE DEPENDENCY
# ==============================================================================

async def get_facade() -> SyncFacade:
    """
    Get the synchronization facade dependency.

    Returns the facade built by the factory at start-up.
    """
    return StoreFactory.get_facade()


FacadeDep = Annotated[SyncFacade, Depends(get_facade)]


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> str:
    """
    Extract the role-qualified identity from the JWT subject.

    Raises:
        HTTPException: If the token is missing, expired or invalid
    """
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = verify_access_token(token)
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        raise _unauthorized(e.message)

    identity = payload.get("sub")
    if not identity:
        raise _unauthorized("Invalid token payload")
    return identity


CurrentIdentity = Annotated[str, Depends(get_current_identity)]


async def get_admin_identity(identity: CurrentIdentity) -> str:
    """
    Raises:
        HTTPException: 403 if the identity is not an admin
    """
    role, _ = split_identity(identity)
    if role != Role.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ErrorMessages.PERMISSION_DENIED,
        )
    return identity


AdminIdentity = Annotated[str, Depends(get_admin_identity)]
