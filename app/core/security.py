"""
Security module for password hashing and JWT session tokens.

Tokens are HS256-signed with the process-wide JWT_SECRET and carry the
account id and role:

    {"id": <account id>, "role": <role>, "iat": ..., "exp": ...}

Authentication (who is calling) and role checks (may they call this) are
separate gates. Every protected route first authenticates, then checks
the caller's role against the roles allowed for that route.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Iterable

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import settings
from app.core.logging import get_logger
from app.models.user import Role

logger = get_logger(__name__)

# HTTP Bearer scheme for JWT tokens. Missing or non-bearer headers are
# reported by authenticate() so that every failure yields the same 401.
security = HTTPBearer(auto_error=False)

_password_hasher = PasswordHasher()


class TokenData(BaseModel):
    """
    Decoded token data structure.
    Identity of the caller attached to every authenticated request.
    """

    id: int
    role: str
    exp: int | None = None
    iat: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# Passwords


def hash_password(password: str) -> str:
    """One-way Argon2 hash of a plaintext password."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


# Tokens


def create_access_token(
    account_id: int,
    role: str,
    expires_delta: timedelta | None = None,
    secret: str | None = None,
) -> str:
    """
    Issue a signed session token.

    Args:
        account_id: Account primary key
        role: Account role as stored
        expires_delta: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES
        secret: Signing key, defaults to JWT_SECRET

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "id": account_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(
        payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> TokenData:
    """
    Decode and validate a session token.

    Args:
        token: JWT token string

    Returns:
        TokenData with the caller's id and role

    Raises:
        HTTPException: 401 if the token is invalid, expired or incomplete
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthenticated("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise _unauthenticated("Invalid token")

    if "id" not in payload or "role" not in payload:
        logger.warning("Token payload is missing id or role")
        raise _unauthenticated("Invalid token")

    try:
        return TokenData(
            id=payload["id"],
            role=payload["role"],
            exp=payload.get("exp"),
            iat=payload.get("iat"),
        )
    except ValueError:
        logger.warning("Token payload has malformed claims")
        raise _unauthenticated("Invalid token")


def authenticate(credentials: HTTPAuthorizationCredentials | None) -> TokenData:
    """
    Resolve the caller's identity from the Authorization header.

    Raises:
        HTTPException: 401 if the header is absent or malformed, or the
            token does not validate
    """
    if credentials is None or not credentials.credentials:
        raise _unauthenticated("Authorization token missing or malformed")
    return decode_token(credentials.credentials)


def has_role(identity: TokenData, allowed_roles: Iterable[Role]) -> bool:
    """Pure predicate: does the identity hold one of the allowed roles."""
    return identity.role in {role.value for role in allowed_roles}


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenData:
    """
    Dependency to get the current authenticated user from the bearer token.

    Usage:
        @app.get("/protected")
        def protected_route(user: Annotated[TokenData, Depends(get_current_user)]):
            return {"id": user.id}
    """
    return authenticate(credentials)


def require_role(*required_roles: Role):
    """
    Dependency factory to require one of the given roles.

    Usage:
        @app.get("/admin")
        def admin_route(user: Annotated[TokenData, Depends(require_role(Role.ADMIN))]):
            pass

    Args:
        *required_roles: One or more roles (user needs at least one)

    Returns:
        Dependency function that validates roles
    """

    async def check_roles(
        current_user: Annotated[TokenData, Depends(get_current_user)],
    ) -> TokenData:
        if not has_role(current_user, required_roles):
            allowed = ", ".join(role.value for role in required_roles)
            logger.warning(
                f"User {current_user.id} lacks required roles. "
                f"Has: {current_user.role}, Required: {allowed}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"Access denied. Required roles: {allowed}. "
                    f"Your role: {current_user.role}"
                ),
            )
        return current_user

    return check_roles


# Type alias for the common dependency
CurrentUser = Annotated[TokenData, Depends(get_current_user)]
