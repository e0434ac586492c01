"""
mixins.py
─────────────────────────────────────────────────────────────────────
Role-based access (RBAC) and JSON error reporting for the API views.
"""

import json
import logging

from django.contrib.auth.mixins import AccessMixin
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _

from .exceptions import AgencyError, ContractYearNotFound, PlayerNotFound

logger = logging.getLogger(__name__)

FINANCE_ROLES = ["is_admin", "is_director", "is_treasurer"]
REPORT_ROLES  = ["is_admin", "is_director", "is_treasurer", "is_agent"]
ROSTER_ROLES  = ["is_admin", "is_director", "is_agent", "is_scout"]


class RoleRequiredMixin(AccessMixin):
    """
    Lets the request through when the user holds at least one of allowed_roles.

    class MyView(RoleRequiredMixin, View):
        allowed_roles = ["is_admin", "is_treasurer"]
    """
    allowed_roles: list[str] = []

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if request.user.is_superuser:
            return super().dispatch(request, *args, **kwargs)

        if not self.allowed_roles:
            return super().dispatch(request, *args, **kwargs)

        has_role = any(getattr(request.user, role, False) for role in self.allowed_roles)
        if not has_role:
            raise PermissionDenied(
                _("No tienes permisos para acceder a esta sección.")
            )

        return super().dispatch(request, *args, **kwargs)


class JsonErrorMixin:
    """Turns service-layer errors into JSON responses carrying the message."""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except (PlayerNotFound, ContractYearNotFound) as exc:
            return JsonResponse({"error": str(exc)}, status=404)
        except AgencyError as exc:
            logger.warning("%s: %s", type(exc).__name__, exc)
            return JsonResponse({"error": str(exc)}, status=400)

    @staticmethod
    def json_body(request) -> dict:
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except json.JSONDecodeError as exc:
            raise AgencyError(f"JSON no válido: {exc}") from exc
        if not isinstance(data, dict):
            raise AgencyError("Se esperaba un objeto JSON.")
        return data
