# ==============================================================================
# SECURITY MODULE - Password Hashing & Access Tokens
# ==============================================================================
# bcrypt password hashing for account records, JWT for the HTTP surface
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from smartcow.core.settings import settings
from smartcow.core.exceptions import TokenExpiredError, InvalidTokenError


# ==============================================================================
# PASSWORD HASHING
# ==============================================================================

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using bcrypt.

    Args:
        password: Plaintext password to hash

    Returns:
        Hashed password string safe for storage
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against its hash.

    Malformed or legacy (unhashed) stored values never verify.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


# ==============================================================================
# JWT TOKEN MANAGEMENT
# ==============================================================================

class TokenType:
    """Token type constants."""
    ACCESS = "access"


def create_access_token(
    identity: str,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a JWT access token.

    The subject is the role-qualified identity (``seller:alice``), which is
    what every ownership check in the services compares against.

    Args:
        identity: Role-qualified identity
        expires_delta: Custom expiration time (default from settings)
        additional_claims: Extra claims to include in token

    Returns:
        Encoded JWT access token string

    Example:
        >>> token = create_access_token("seller:alice")
        >>> decode_token(token)["sub"]
        'seller:alice'
    """
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode: Dict[str, Any] = {
        "sub": identity,
        "exp": expire,
        "iat": now,
        "type": TokenType.ACCESS,
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        TokenExpiredError: If token has expired
        InvalidTokenError: If token is invalid or malformed
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(message=f"Invalid token: {str(e)}")


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify that a token is a valid access token.

    Raises:
        InvalidTokenError: If token is not an access token
        TokenExpiredError: If token has expired
    """
    payload = decode_token(token)

    if payload.get("type") != TokenType.ACCESS:
        raise InvalidTokenError(message="Invalid token type: expected access token")

    return payload
