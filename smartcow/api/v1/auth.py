# ==============================================================================
# AUTH ENDPOINTS - Authentication Routes
# ==============================================================================
# Register, login (form and JSON) and current identity
# ==============================================================================

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from smartcow.api.dependencies import CurrentIdentity, FacadeDep
from smartcow.core.constants import split_identity
from smartcow.schemas.accounts import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserPublic,
)
from smartcow.schemas.base import APIResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=APIResponse[UserPublic],
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account for a non-admin role.",
)
async def register(
    schema: RegisterRequest,
    facade: FacadeDep,
) -> APIResponse[UserPublic]:
    """Register a new user."""
    account = await facade.accounts.register(schema)
    return APIResponse.ok(
        data=UserPublic.model_validate(account.model_dump()),
        message="User registered successfully",
    )


@router.post(
    "/token",
    response_model=dict,
    summary="OAuth2 token",
    description="Form login; ``username`` carries the e-mail.",
)
async def token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    facade: FacadeDep,
) -> dict:
    """Authenticate and return a bearer token."""
    result = await facade.accounts.login(form_data.username, form_data.password)
    return {"access_token": result.access_token, "token_type": result.token_type}


@router.post(
    "/login",
    response_model=APIResponse[TokenResponse],
    summary="User login",
    description="Authenticate with a JSON payload.",
)
async def login(
    credentials: LoginRequest,
    facade: FacadeDep,
) -> APIResponse[TokenResponse]:
    result = await facade.accounts.login(credentials.email, credentials.password)
    return APIResponse.ok(data=result, message="Login successful")


@router.get(
    "/me",
    response_model=APIResponse[dict],
    summary="Current identity",
)
async def me(identity: CurrentIdentity) -> APIResponse[dict]:
    role, username = split_identity(identity)
    return APIResponse.ok(data={"identity": identity, "role": role, "username": username})
