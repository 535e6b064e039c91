"""
Role based permission classes.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN_ROLES = {"admin"}
CLINICAL_ROLES = {"admin", "doctor", "nurse"}


def role_of(request):
    """Role of the authenticated user, or ``None`` for anonymous requests."""
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class PatientRecordAccess(BasePermission):
    """Any authenticated user may read; clinical staff may write; only admins delete."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = role_of(request)
        if role is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        if request.method == "DELETE":
            return role in ADMIN_ROLES
        return role in CLINICAL_ROLES
