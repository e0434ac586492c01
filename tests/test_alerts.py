"""
tests/test_alerts.py
─────────────────────────────────────────────────────────────────────
Daily alert detection (payments, optional clauses, birthdays), recipient
selection and notification dispatch.
"""
from __future__ import annotations

import datetime
from types import SimpleNamespace

import pytest

from agency.models import CustomUser, Notification
from agency.services.alert_service import (
    Alert,
    FINANCE_ROLES,
    birthday_alerts,
    category_matches,
    clause_alerts,
    collect_daily_alerts,
    contract_signed_alert,
    dispatch_alerts,
    payment_alerts,
    recipients_for,
)

from .conftest import make_player, make_year

TODAY = datetime.date(2025, 9, 1)


# ════════════════════════════════════════════════════════════════════
#  Payment alerts
# ════════════════════════════════════════════════════════════════════

class TestPaymentAlerts:

    def _player(self, **club_payment):
        return make_player(id="p1", contract_years=[make_year(club_payment=club_payment)])

    def test_upcoming(self):
        alerts = payment_alerts([self._player(alert_date="2025-09-16")], TODAY)
        assert len(alerts) == 1
        assert alerts[0].title == "💰 Cobro Club Próximo"
        assert alerts[0].body == "Sergio Lozano: Vence en 15 días."
        assert alerts[0].category == "Finanzas"
        assert alerts[0].roles == FINANCE_ROLES

    def test_overdue_from_due_date(self):
        alerts = payment_alerts([self._player(due_date="2025-08-25")], TODAY)
        assert alerts[0].title == "🚨 COBRO CLUB VENCIDO"
        assert alerts[0].body == "Sergio Lozano: Vencido hace 7 días."

    def test_alert_date_wins_over_due_date(self):
        alerts = payment_alerts([self._player(alert_date="2025-09-04", due_date="2025-09-16")], TODAY)
        assert [a.body for a in alerts] == ["Sergio Lozano: Vence en 3 días."]

    @pytest.mark.parametrize("offset", [15, 3, 0, -7, -30])
    def test_alert_days(self, offset):
        target = TODAY + datetime.timedelta(days=offset)
        assert len(payment_alerts([self._player(alert_date=target)], TODAY)) == 1

    @pytest.mark.parametrize("offset", [14, 4, 1, -1, -8, -31])
    def test_quiet_days(self, offset):
        target = TODAY + datetime.timedelta(days=offset)
        assert payment_alerts([self._player(alert_date=target)], TODAY) == []

    @pytest.mark.parametrize("status", ["Pagado", "Pospuesto", "Cancelado"])
    def test_only_pending_sides(self, status):
        assert payment_alerts([self._player(status=status, alert_date="2025-09-01")], TODAY) == []

    def test_free_text_due_date_ignored(self):
        assert payment_alerts([self._player(due_date="Enero 2026")], TODAY) == []


# ════════════════════════════════════════════════════════════════════
#  Clause & birthday alerts
# ════════════════════════════════════════════════════════════════════

class TestClauseAlerts:

    @pytest.mark.parametrize("offset", [60, 30, 7, 0, -1, -7])
    def test_alert_days(self, offset):
        notice = (TODAY + datetime.timedelta(days=offset)).isoformat()
        player = make_player(contract={"optional": "Sí", "optional_notice_date": notice})
        assert len(clause_alerts([player], TODAY)) == 1

    def test_upcoming_and_expired_titles(self):
        soon    = make_player(name="Chino", contract={"optional_notice_date": "2025-10-01"})
        expired = make_player(name="Pito", contract={"optional_notice_date": "2025-08-31"})
        alerts  = clause_alerts([soon, expired], TODAY)
        assert [a.title for a in alerts] == ["⚠️ Cláusula Opcional Próxima", "🚨 CLÁUSULA VENCIDA"]
        assert alerts[0].body == "El plazo de Chino vence en 30 días."
        assert alerts[1].body == "El plazo de Pito venció hace 1 días."
        assert alerts[0].category == "F. Sala"

    def test_no_notice_date(self):
        assert clause_alerts([make_player()], TODAY) == []


class TestBirthdayAlerts:

    def test_birthday_today(self):
        player = make_player(birth_date="2000-09-01")
        alerts = birthday_alerts([player], TODAY)
        assert alerts[0].title == "🎉 Cumpleaños de Sergio Lozano"
        assert alerts[0].body == "Hoy cumple 25 años."

    def test_other_days(self):
        assert birthday_alerts([make_player(birth_date="2000-09-02")], TODAY) == []

    def test_collect_combines_all_kinds(self):
        player = make_player(
            birth_date="2000-09-01",
            contract={"optional_notice_date": "2025-09-08"},
            contract_years=[make_year(club_payment={"alert_date": "2025-09-01"})],
        )
        kinds = [a.kind for a in collect_daily_alerts([player], TODAY)]
        assert kinds == ["birthday", "clause", "payment"]


# ════════════════════════════════════════════════════════════════════
#  Recipients
# ════════════════════════════════════════════════════════════════════

class TestRecipients:

    @pytest.mark.parametrize("user_category,alert_category,expected", [
        (None, "F. Sala", True),
        ("General", "Finanzas", True),
        ("F. Sala", "F. Sala", True),
        ("Fútbol", "General", True),
        ("Fútbol", "F. Sala", False),
        ("Fútbol", "Finanzas", False),
        ("Finanzas", "Finanzas", True),
    ])
    def test_category_matches(self, user_category, alert_category, expected):
        assert category_matches(user_category, alert_category) is expected

    def test_roles_and_category(self):
        alert = Alert("clause", ("admin", "agente"), "F. Sala", "t", "b")
        admin  = SimpleNamespace(is_admin=True, category="General")
        agent  = SimpleNamespace(is_agent=True, category="F. Sala")
        other  = SimpleNamespace(is_agent=True, category="Fútbol")
        scout  = SimpleNamespace(is_scout=True, category="General")
        assert recipients_for(alert, [admin, agent, other, scout]) == [admin, agent]


# ════════════════════════════════════════════════════════════════════
#  Dispatch
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDispatch:

    def test_one_notification_per_recipient(self):
        admin     = CustomUser.objects.create_user("admin", "x", is_admin=True)
        treasurer = CustomUser.objects.create_user("caja", "x", is_treasurer=True, category="Finanzas")
        CustomUser.objects.create_user("agente", "x", is_agent=True, category="Fútbol")
        CustomUser.objects.create_user("baja", "x", is_admin=True, is_active=False)

        player = make_player(
            id="p1",
            contract={"optional_notice_date": "2025-09-08"},
            contract_years=[make_year(club_payment={"alert_date": "2025-09-04"})],
        )
        created = dispatch_alerts(collect_daily_alerts([player], TODAY))

        assert created == 3
        by_type = {}
        for n in Notification.objects.all():
            by_type.setdefault(n.type, set()).add(n.recipient_id)
        assert by_type["clause_notice"] == {admin.pk}
        assert by_type["payment_due"] == {admin.pk, treasurer.pk}
        assert not Notification.objects.filter(related_player__isnull=False).exists()

    def test_alert_without_recipients(self):
        assert dispatch_alerts([contract_signed_alert(make_player())]) == 0
        assert Notification.objects.count() == 0
