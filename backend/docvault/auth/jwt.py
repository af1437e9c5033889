"""
Bearer token gate.

Tokens are HS256 JWTs carrying userId, username, department and role.
"""
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from ..api.exceptions import AuthenticationError
from ..core.config import JWT_ALGORITHM, JWT_EXPIRES_HOURS, JWT_SECRET
from ..core.logging_config import get_logger
from ..domain.entities import User, utc_now
from ..domain.value_objects import Department

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token.

    Args:
        claims: Token claims (userId, username, department, role)
        expires_delta: Lifetime; defaults to JWT_EXPIRES_HOURS

    Returns:
        Encoded JWT
    """
    to_encode = dict(claims)
    expire = utc_now() + (expires_delta or timedelta(hours=JWT_EXPIRES_HOURS))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> User:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    user_id = payload.get("userId")
    username = payload.get("username")
    department = Department.parse(payload.get("department"))
    if user_id is None or not username or department is None:
        raise AuthenticationError("Invalid token")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    return User(
        id=user_id,
        username=str(username),
        department=department.value,
        role=str(payload.get("role") or "user").lower(),
        email=payload.get("email"),
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """FastAPI dependency: verified caller, or AuthenticationError (401)."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Authorization header with Bearer token required")

    user = decode_access_token(credentials.credentials)

    container = getattr(request.app.state, "container", None)
    if container is not None:
        known = await container.store.get_user(user.id)
        if known is not None and not known.is_active:
            logger.warning(f"Rejected token for deactivated user {user.username} ({user.id})")
            raise AuthenticationError("Account is deactivated")

    request.state.user = user
    return user
