"""
views/report_views.py
─────────────────────────────────────────────────────────────────────
Report payloads (JSON) and spreadsheet downloads.
"""
from __future__ import annotations

from django.http import HttpResponse, JsonResponse
from django.views import View

from ..mixins import REPORT_ROLES, ROSTER_ROLES, JsonErrorMixin, RoleRequiredMixin
from ..services.excel_export_service import XLSX_CONTENT_TYPE, export_commissions
from ..services.player_store import get_player_repository
from ..services.report_service import (
    ALL_FILTER,
    agency_expiry_report,
    commissions_report,
    economic_report,
    portfolio_dossier,
    scouting_dossier,
)
from ..services.season import current_season


class EconomicReportView(JsonErrorMixin, RoleRequiredMixin, View):
    allowed_roles     = REPORT_ROLES
    http_method_names = ["get"]

    def get(self, request):
        report = economic_report(get_player_repository().list(is_scouting=False))
        return JsonResponse(report.to_dict())


class CommissionsReportView(JsonErrorMixin, RoleRequiredMixin, View):
    """GET ?season=<label>&format=json|xlsx"""
    allowed_roles     = REPORT_ROLES
    http_method_names = ["get"]

    def get(self, request):
        season = request.GET.get("season") or current_season()
        report = commissions_report(get_player_repository().list(is_scouting=False), season)

        if request.GET.get("format") == "xlsx":
            response = HttpResponse(export_commissions(report), content_type=XLSX_CONTENT_TYPE)
            filename = report.file_name.replace(".pdf", ".xlsx")
            response["Content-Disposition"] = f'attachment; filename="{filename}"'
            return response

        payload = report.table_payload()
        payload["totals"] = {
            "paid":    {c: float(v) for c, v in report.paid_totals.items()},
            "pending": {c: float(v) for c, v in report.pending_totals.items()},
        }
        return JsonResponse(payload)


class AgencyExpiryReportView(JsonErrorMixin, RoleRequiredMixin, View):
    allowed_roles     = REPORT_ROLES
    http_method_names = ["get"]

    def get(self, request):
        report = agency_expiry_report(get_player_repository().list(is_scouting=False))
        return JsonResponse(report.to_dict())


class PortfolioDossierView(JsonErrorMixin, RoleRequiredMixin, View):
    """GET ?category=<Fútbol|...|Todos>&position=<...|Todos>"""
    allowed_roles     = ROSTER_ROLES
    http_method_names = ["get"]

    def get(self, request):
        dossier = portfolio_dossier(
            get_player_repository().list(is_scouting=False),
            category=request.GET.get("category", ALL_FILTER),
            position=request.GET.get("position", ALL_FILTER),
        )
        return JsonResponse(dossier.to_dict())


class ScoutingDossierView(JsonErrorMixin, RoleRequiredMixin, View):
    allowed_roles     = ROSTER_ROLES
    http_method_names = ["get"]

    def get(self, request):
        dossier = scouting_dossier(
            get_player_repository().list(is_scouting=True),
            category=request.GET.get("category", ALL_FILTER),
            position=request.GET.get("position", ALL_FILTER),
        )
        return JsonResponse(dossier.to_dict())
