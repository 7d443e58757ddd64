"""
Role based permission classes for the staff roles.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

SUPER_ADMIN = 'SUPER_ADMIN'
ADMIN = 'ADMIN'
MEDICO = 'MEDICO'

STAFF_ROLES = {SUPER_ADMIN, ADMIN, MEDICO}
ADMINISTRATIVE_ROLES = {SUPER_ADMIN, ADMIN}
CLINICAL_ROLES = {SUPER_ADMIN, MEDICO}


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsSuperAdmin(BasePermission):
    """Only the whitelist owner."""
    def has_permission(self, request, view) -> bool:
        return _role(request) == SUPER_ADMIN


class IsStaff(BasePermission):
    """Any hospital staff role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in STAFF_ROLES


class IsAdministrative(BasePermission):
    """Administrative staff (admin or super admin)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in ADMINISTRATIVE_ROLES


class IsClinical(BasePermission):
    """Physicians (or super admin)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in CLINICAL_ROLES


class AdministrativeWriteOrReadOnly(BasePermission):
    """Any staff may read; only administrative roles may write."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        return role in ADMINISTRATIVE_ROLES


class ClinicalWriteOrReadOnly(BasePermission):
    """Any staff may read; only clinical roles may write."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        return role in CLINICAL_ROLES
