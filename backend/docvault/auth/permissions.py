"""
Department-scoped authorization rules.

Elevated roles (ELEVATED_ROLES, default admin and director) see every
department; everyone else is confined to their own.
"""
from typing import Optional

from ..api.exceptions import AccessDeniedError
from ..core.config import ELEVATED_ROLES
from ..domain.entities import Document, User


def is_elevated(user: User) -> bool:
    return user.has_role(ELEVATED_ROLES)


def scoped_department(user: User, requested: Optional[str]) -> Optional[str]:
    """
    Department filter a listing or search must apply for this user.

    Elevated users get whatever they asked for (None means all departments).
    Others always get their own department, whatever they asked for.
    """
    if is_elevated(user):
        return requested
    return user.department


def ensure_department_access(user: User, document: Document) -> None:
    if not is_elevated(user) and not document.belongs_to(user.department):
        raise AccessDeniedError("Access denied: document belongs to another department")


def ensure_owner_or_elevated(user: User, document: Document) -> None:
    if not is_elevated(user) and document.uploaded_by != user.id:
        raise AccessDeniedError("Access denied: only the uploader or an administrator can do this")
