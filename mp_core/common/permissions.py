# mp_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.exceptions import ValidationError
from rest_framework.permissions import SAFE_METHODS, BasePermission

from mp_core.common.scope import resolve_scope

# Group/role names (Django auth Group names)
ROLE_ADMIN = "ADMIN"
ROLE_DOCTOR = "DOCTOR"
ROLE_NURSE = "NURSE"
ROLE_SECRETARY = "SECRETARY"
ROLE_BILLING = "BILLING"
ROLE_READONLY = "READONLY"

ALL_ROLES = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE, ROLE_SECRETARY, ROLE_BILLING, ROLE_READONLY}
CLINICAL_STAFF = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE}
FRONT_DESK = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE, ROLE_SECRETARY}


def _user_roles(user) -> Set[str]:
    """
    Roles come from Django groups.
    - Superuser is ADMIN.
    - Authenticated user without groups is READONLY.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if not roles:
        roles.add(ROLE_READONLY)

    return roles


def ensure_scope_on_request(request) -> bool:
    """
    Permissions must not raise (it would become 400); False -> 403.
    """
    try:
        scope = resolve_scope(request)
    except ValidationError:
        return False
    if scope is None:
        return False

    request.tenant_id = scope.tenant_id
    request.facility_id = scope.facility_id
    return True


class BaseRolePermission(BasePermission):
    """
    Role-based access control keyed by ViewSet action.

    - ADMIN bypass.
    - Unknown SAFE action falls back to list/retrieve.
    - Unknown unsafe action is denied.
    """
    message = "You do not have permission to perform this action."

    allowed_roles_per_action: dict[str, set[str]] = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        return {
            "POST": "create",
            "PUT": "update",
            "PATCH": "partial_update",
            "DELETE": "destroy",
        }.get(method)

    def has_permission(self, request, view) -> bool:
        if not ensure_scope_on_request(request):
            return False

        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = _user_roles(user)
        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return bool(roles & allowed)

        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class PatientPermission(BaseRolePermission):
    """Patient registry"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": FRONT_DESK,
        "update": FRONT_DESK,
        "partial_update": FRONT_DESK,
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
        "toggle_favorite": FRONT_DESK,
        "quick_search": ALL_ROLES,
        "stats": ALL_ROLES,
        "consultations": CLINICAL_STAFF | {ROLE_SECRETARY},
        "anamneses": CLINICAL_STAFF,
        "exams": CLINICAL_STAFF,
        "prescriptions": CLINICAL_STAFF,
        "notes": CLINICAL_STAFF,
        "health_summary": CLINICAL_STAFF,
    }


class ClinicalPermission(BaseRolePermission):
    """Anamneses, notes, exams, prescriptions, medical records"""
    allowed_roles_per_action = {
        "list": CLINICAL_STAFF,
        "retrieve": CLINICAL_STAFF,
        "create": {ROLE_ADMIN, ROLE_DOCTOR},
        "update": {ROLE_ADMIN, ROLE_DOCTOR},
        "partial_update": {ROLE_ADMIN, ROLE_DOCTOR},
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
        "update_status": CLINICAL_STAFF,
        "toggle_important": CLINICAL_STAFF,
        "generate_pdf": {ROLE_ADMIN, ROLE_DOCTOR},
        "refresh": CLINICAL_STAFF,
    }


class ConsultationPermission(BaseRolePermission):
    """Consultations are booked by the front desk, documented by clinicians"""
    allowed_roles_per_action = {
        "list": FRONT_DESK | {ROLE_READONLY},
        "retrieve": FRONT_DESK | {ROLE_READONLY},
        "create": FRONT_DESK,
        "update": CLINICAL_STAFF,
        "partial_update": CLINICAL_STAFF,
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
        "update_status": FRONT_DESK,
        "today": FRONT_DESK | {ROLE_READONLY},
        "upcoming": FRONT_DESK | {ROLE_READONLY},
        "stats": FRONT_DESK | {ROLE_READONLY},
    }


class SchedulePermission(BaseRolePermission):
    """Schedule slots"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": FRONT_DESK,
        "update": FRONT_DESK,
        "partial_update": FRONT_DESK,
        "destroy": FRONT_DESK,
        "book": FRONT_DESK,
        "release": FRONT_DESK,
        "available": ALL_ROLES,
    }


class MedicationPermission(BaseRolePermission):
    """Medication catalogue"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN, ROLE_DOCTOR},
        "update": {ROLE_ADMIN, ROLE_DOCTOR},
        "partial_update": {ROLE_ADMIN, ROLE_DOCTOR},
        "destroy": {ROLE_ADMIN},
    }


class FinancePermission(BaseRolePermission):
    """Transactions, recurring transactions, bills"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING, ROLE_READONLY},
        "retrieve": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING, ROLE_READONLY},
        "create": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
        "update": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
        "partial_update": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
        "summary": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING, ROLE_READONLY},
        "toggle_active": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
        "pay": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
        "mark_overdue": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_BILLING},
    }


class WhatsAppPermission(BaseRolePermission):
    """WhatsApp sessions, messages and reminders"""
    allowed_roles_per_action = {
        "list": FRONT_DESK,
        "retrieve": FRONT_DESK,
        "create": FRONT_DESK,
        "update": FRONT_DESK,
        "partial_update": FRONT_DESK,
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
        "qr": FRONT_DESK,
        "connected": FRONT_DESK,
        "disconnect": FRONT_DESK,
        "status_callback": FRONT_DESK,
        "cancel": FRONT_DESK,
        "dispatch_due": FRONT_DESK,
    }


class DashboardPermission(BaseRolePermission):
    """Read-only aggregates"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "stats": ALL_ROLES,
        "recent_activity": ALL_ROLES,
        "search": ALL_ROLES,
    }


class AuditPermission(BaseRolePermission):
    """Audit log access"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN},
        "retrieve": {ROLE_ADMIN},
    }
