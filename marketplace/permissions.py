import logging

from rest_framework import permissions

from utils.rbac import editor_roles, is_catalog_editor


logger = logging.getLogger(__name__)


class IsCatalogEditorOrReadOnly(permissions.BasePermission):
    """
    Anyone may read the catalog. Writes need an authenticated catalog editor
    (superuser, staff or a member of a CATALOG_EDITOR_ROLES group).
    """

    message = "Catalog editor role required."

    def has_permission(self, request, view):
        # Read permissions are allowed for any request,
        # so we'll always allow GET, HEAD or OPTIONS requests.
        if request.method in permissions.SAFE_METHODS:
            return True

        if is_catalog_editor(request.user):
            return True

        if request.user and request.user.is_authenticated:
            logger.warning(
                "RBAC denial: user_id=%s method=%s required=%s",
                request.user.pk,
                request.method,
                editor_roles(),
            )
        return False
