"""
Rate limiting - per user when authenticated, per client address otherwise.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.config import RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE, UPLOAD_RATE_LIMIT_PER_MINUTE


def get_rate_limit_key(request: Request) -> str:
    """
    Key requests by verified user id once the auth dependency has run,
    falling back to the client address.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[f"{RATE_LIMIT_PER_MINUTE}/minute"],
    enabled=RATE_LIMIT_ENABLED,
)

upload_rate_limit = limiter.limit(f"{UPLOAD_RATE_LIMIT_PER_MINUTE}/minute")
