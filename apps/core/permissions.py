from rest_framework import permissions

from .context import EDITOR_ROLES, ROLE_ADMIN


def _role(request):
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, 'role', None)


class IsEditorOrReadOnly(permissions.BasePermission):
    """Catalog writes are reserved to editors, supereditors and admins."""

    message = 'Acceso denegado: Privilegios insuficientes'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return _role(request) in EDITOR_ROLES


class IsAdminRole(permissions.BasePermission):
    message = 'Acceso denegado: Privilegios insuficientes'

    def has_permission(self, request, view):
        return _role(request) == ROLE_ADMIN
