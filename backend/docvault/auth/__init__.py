"""
Access control: bearer token verification and department-scoped rules.
"""
from .jwt import create_access_token, decode_access_token, get_current_user
from .permissions import (
    ensure_department_access,
    ensure_owner_or_elevated,
    is_elevated,
    scoped_department,
)

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "ensure_department_access",
    "ensure_owner_or_elevated",
    "is_elevated",
    "scoped_department",
]
