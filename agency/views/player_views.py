"""
views/player_views.py
─────────────────────────────────────────────────────────────────────
Roster endpoints: list, detail, create, update, delete, sign, bulk
delete and spreadsheet export.
"""
from __future__ import annotations

import logging

from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views import View

from ..exceptions import AgencyError
from ..mixins import ROSTER_ROLES, JsonErrorMixin, RoleRequiredMixin
from ..services.excel_export_service import XLSX_CONTENT_TYPE, export_roster
from ..services.player_store import bulk_delete, get_player_repository

logger = logging.getLogger(__name__)


def _scouting_param(request):
    """?scouting=1 → prospects, ?scouting=0 → signed, absent → both."""
    raw = request.GET.get("scouting")
    if raw is None or raw == "":
        return None
    return raw in ("1", "true", "True")


class PlayerListView(JsonErrorMixin, RoleRequiredMixin, View):
    """GET → roster; POST {fields...} → create"""
    allowed_roles     = ROSTER_ROLES
    http_method_names = ["get", "post"]

    def get(self, request):
        players = get_player_repository().list(is_scouting=_scouting_param(request))
        return JsonResponse({"players": [p.to_dict() for p in players]})

    def post(self, request):
        player_id = get_player_repository().create(self.json_body(request))
        return JsonResponse({"id": player_id}, status=201)


class PlayerDetailView(JsonErrorMixin, RoleRequiredMixin, View):
    """GET → one player; POST {changes} → update; DELETE → remove"""
    allowed_roles     = ROSTER_ROLES
    http_method_names = ["get", "post", "delete"]

    def get(self, request, player_id):
        return JsonResponse(get_player_repository().get(player_id).to_dict())

    def post(self, request, player_id):
        record = get_player_repository().update(player_id, self.json_body(request))
        return JsonResponse(record.to_dict())

    def delete(self, request, player_id):
        get_player_repository().delete(player_id)
        return JsonResponse({"deleted": player_id})


class PlayerSignView(JsonErrorMixin, RoleRequiredMixin, View):
    allowed_roles     = ["is_admin", "is_director", "is_agent"]
    http_method_names = ["post"]

    def post(self, request, player_id):
        record = get_player_repository().sign(player_id)
        logger.info("Player %s signed by %s", player_id, request.user)
        return JsonResponse(record.to_dict())


class PlayerBulkDeleteView(JsonErrorMixin, RoleRequiredMixin, View):
    """
    POST {"ids": [...]}. Deletes run in order; a failure stops the batch and
    the players already removed stay removed.
    """
    allowed_roles     = ["is_admin", "is_director"]
    http_method_names = ["post"]

    def post(self, request):
        ids = self.json_body(request).get("ids") or []
        if not isinstance(ids, list):
            raise AgencyError("'ids' debe ser una lista.")
        deleted = bulk_delete(get_player_repository(), [str(i) for i in ids])
        return JsonResponse({"deleted": deleted})


class PlayerExportView(JsonErrorMixin, RoleRequiredMixin, View):
    allowed_roles     = ROSTER_ROLES
    http_method_names = ["get"]

    def get(self, request):
        players  = get_player_repository().list(is_scouting=_scouting_param(request))
        response = HttpResponse(export_roster(players), content_type=XLSX_CONTENT_TYPE)
        filename = f"Jugadores_{timezone.localdate().isoformat()}.xlsx"
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
