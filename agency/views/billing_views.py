"""
views/billing_views.py
─────────────────────────────────────────────────────────────────────
Administration (billing) endpoints: season tables + payment updates.
"""
from __future__ import annotations

import logging

from django.http import JsonResponse
from django.views import View

from ..mixins import FINANCE_ROLES, JsonErrorMixin, RoleRequiredMixin
from ..services.billing_service import administration_view, update_payment
from ..services.ledger import inconsistencies
from ..services.player_store import get_player_repository
from ..services.season import current_season

logger = logging.getLogger(__name__)


class AdministrationView(JsonErrorMixin, RoleRequiredMixin, View):
    """
    GET ?q=<search>&season=<label>
    → {season, summary, current: [...], other: [...]}
    """
    allowed_roles     = FINANCE_ROLES
    http_method_names = ["get"]

    def get(self, request):
        season  = request.GET.get("season") or current_season()
        players = get_player_repository().list(is_scouting=False)
        return JsonResponse(administration_view(players, season, request.GET.get("q")))


class PaymentUpdateView(JsonErrorMixin, RoleRequiredMixin, View):
    """
    POST {"field": "club_payment", "value": {"status": "Pagado", "payment_date": "2025-10-01"}}
    POST {"field": "global_status", "value": "Pagado"}
    """
    allowed_roles     = FINANCE_ROLES
    http_method_names = ["post"]

    def post(self, request, player_id, year_id):
        body  = self.json_body(request)
        entry = update_payment(
            get_player_repository(), player_id, year_id,
            body.get("field", ""), body.get("value"),
        )
        logger.info("Payment change by %s on %s/%s", request.user, player_id, year_id)
        return JsonResponse({
            "entry":           entry.to_dict(),
            "inconsistencies": inconsistencies(entry),
        })
