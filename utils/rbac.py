import logging
from typing import Iterable, Optional

from django.conf import settings

# Canonical role names (Django group names)
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"

logger = logging.getLogger(__name__)


def editor_roles() -> list:
    return list(getattr(settings, "CATALOG_EDITOR_ROLES", [ROLE_ADMIN, ROLE_EMPLOYEE]))


def has_any_role(user, roles: Iterable[str]) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    return user.groups.filter(name__in=list(roles)).exists()


def is_catalog_editor(user, roles: Optional[Iterable[str]] = None) -> bool:
    """Consistent catalog write check: superusers and staff always, other users by group."""
    try:
        if not getattr(user, "is_authenticated", False):
            return False
        if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
            return True
        return has_any_role(user, roles if roles is not None else editor_roles())
    except Exception:
        # Conservative fallback
        logger.error("Role lookup failed for user_id=%s", getattr(user, "id", None), exc_info=True)
        return False
