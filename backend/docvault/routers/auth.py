"""
Auth Router - identity of the caller as seen by the access gate.
"""
from fastapi import APIRouter, Depends

from ..auth import get_current_user, is_elevated
from ..domain.entities import User, utc_now

router = APIRouter()


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    """Verified token claims of the caller."""
    return {
        "success": True,
        "user": {
            "id": user.id,
            "username": user.username,
            "department": user.department,
            "role": user.role,
            "email": user.email,
            "elevated": is_elevated(user),
        },
        "timestamp": utc_now().isoformat(),
    }
