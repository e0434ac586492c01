"""
tests/test_reports.py
─────────────────────────────────────────────────────────────────────
Economic, commissions and agency-expiry reports plus the two dossiers.
"""
from __future__ import annotations

import datetime
from decimal import Decimal

import pytest

from agency.services.report_service import (
    COMMISSIONS_HEADERS,
    EMPTY_DOSSIER_TITLE,
    agency_expiry_report,
    commissions_report,
    economic_report,
    expiry_status,
    portfolio_dossier,
    scouting_dossier,
)

from .conftest import make_player, make_year


# ════════════════════════════════════════════════════════════════════
#  Commissions report
# ════════════════════════════════════════════════════════════════════

class TestCommissionsReport:

    def test_paid_and_pending_portions(self, scenario_player, today):
        report = commissions_report([scenario_player], "2025/2026", today)

        assert len(report.paid) == 1
        assert len(report.pending) == 1
        assert report.paid[0].payer == "CLUB"
        assert report.paid[0].amount == Decimal("10000")
        assert report.paid[0].date == "01/10/2025"
        assert report.pending[0].payer == "JUGADOR"
        assert report.pending[0].amount == Decimal("500")
        assert report.pending[0].date == "Enero 2026"
        assert report.paid_totals == {"EUR": Decimal("10000")}
        assert report.pending_totals == {"EUR": Decimal("500")}

    def test_other_seasons_ignored(self, scenario_player, today):
        report = commissions_report([scenario_player], "2024/2025", today)
        assert report.paid == [] and report.pending == []

    def test_canceled_side_dropped(self, today):
        player = make_player(contract_years=[make_year(club_payment={"status": "Cancelado"})])
        report = commissions_report([player], "2025/2026", today)
        assert report.paid == [] and report.pending == []

    def test_postponed_counts_as_pending(self, today):
        player = make_player(contract_years=[make_year(club_payment={"status": "Pospuesto"})])
        report = commissions_report([player], "2025/2026", today)
        assert len(report.pending) == 1
        assert report.pending[0].date == "Sin fecha"

    def test_zero_commission_side_has_no_line(self, today):
        player = make_player(contract_years=[make_year()])
        report = commissions_report([player], "2025/2026", today)
        assert [l.payer for l in report.pending] == ["CLUB"]

    def test_table_payload(self, scenario_player, today):
        report  = commissions_report([scenario_player], "2025/2026", today)
        payload = report.table_payload()

        assert payload["title"] == "INFORME ECONÓMICO PRONEO SPORTS"
        assert payload["subtitle"] == "Temporada: 2025/2026"
        assert payload["headers"] == COMMISSIONS_HEADERS
        assert payload["sections"][0]["head_color"] == [16, 185, 129]
        assert payload["sections"][1]["head_color"] == [245, 158, 11]
        assert payload["sections"][0]["rows"][0] == [
            "Sergio", "Lozano Martínez", "F. Sala", "FC Barcelona", "01/10/2025",
            "CLUB", "10.000,00 €", "Proneo",
        ]
        assert payload["footer"]["total_paid"] == "10.000,00 €"
        assert payload["footer"]["total_pending"] == "500,00 €"
        assert payload["footer"]["generated_on"] == "Generado el: 01/09/2025"
        assert report.file_name == "Informe_Comisiones_2025-2026.pdf"

    def test_currencies_totalled_separately(self, today):
        players = [
            make_player(contract_years=[make_year()]),
            make_player(first_name="Ana", contract_years=[make_year(currency="USD", salary=2500)]),
        ]
        report = commissions_report(players, "2025/2026", today)

        assert report.pending_totals == {"EUR": Decimal("10000"), "USD": Decimal("250")}
        footer = report.table_payload()["footer"]
        assert footer["total_pending"] == "10.000,00 € + 250,00 US$"
        assert footer["total_paid"] == "0,00 €"


# ════════════════════════════════════════════════════════════════════
#  Economic report
# ════════════════════════════════════════════════════════════════════

class TestEconomicReport:

    def test_percentage_only_commission(self, scenario_player, today):
        report = economic_report([scenario_player], today)

        assert report.total_value == Decimal("100000")
        assert report.total_commission == Decimal("10000")
        assert report.excluded_fixed_commission == Decimal("500")
        assert report.commission_ratio == Decimal("10.0")
        assert report.top_category == "F. Sala"

    def test_categories_without_players_omitted(self, scenario_player, today):
        report = economic_report([scenario_player], today)
        assert [c.category for c in report.categories] == ["F. Sala"]

    def test_scouting_players_excluded(self, scenario_player, today):
        prospect = make_player(id="s1", is_scouting=True, category="Fútbol",
                               contract_years=[make_year(salary=1000000)])
        report = economic_report([scenario_player, prospect], today)
        assert report.total_value == Decimal("100000")

    def test_player_without_ledger_counts(self, scenario_player, today):
        empty = make_player(id="e1", name="Sin datos")
        report = economic_report([scenario_player, empty], today)
        futsal = report.categories[0]
        assert futsal.count == 2
        assert futsal.items[1].season is None
        assert futsal.items[1].salary == 0

    def test_category_order_and_share(self, today):
        players = [
            make_player(id="w", category="Femenino", contract_years=[make_year(salary=20000)]),
            make_player(id="f", category="Fútbol", contract_years=[make_year(salary=60000)]),
        ]
        report = economic_report(players, today)
        assert [c.category for c in report.categories] == ["Fútbol", "Femenino"]
        assert report.categories[0].share_of_commission == Decimal("75.0")
        assert report.top_category == "Fútbol"

    def test_empty_portfolio(self, today):
        report = economic_report([], today)
        assert report.commission_ratio == 0
        assert report.top_category is None
        assert report.to_dict()["total_value_display"] == "0 €"


# ════════════════════════════════════════════════════════════════════
#  Agency expiry
# ════════════════════════════════════════════════════════════════════

class TestAgencyExpiry:

    @pytest.mark.parametrize("end,expected", [
        (datetime.date(2025, 8, 1), "urgent"),
        (datetime.date(2025, 12, 1), "urgent"),
        (datetime.date(2025, 12, 2), "warning"),
        (datetime.date(2026, 3, 1), "warning"),
        (datetime.date(2026, 3, 2), "safe"),
    ])
    def test_windows(self, end, expected):
        assert expiry_status(end, datetime.date(2025, 9, 1)) == expected

    def test_report_lines_sorted_and_filtered(self, today):
        players = [
            make_player(id="late", agency={"agency_end_date": "2026-02-01"}),
            make_player(id="soon", agency={"agency_end_date": "2025-11-01"}),
            make_player(id="safe", agency={"agency_end_date": "2027-06-30"}),
            make_player(id="none"),
            make_player(id="scout", is_scouting=True, agency={"agency_end_date": "2025-10-01"}),
        ]
        report = agency_expiry_report(players, today)
        assert [l.player_id for l in report.lines] == ["soon", "late"]
        assert report.urgent_count == 1
        assert report.warning_count == 1


# ════════════════════════════════════════════════════════════════════
#  Dossiers
# ════════════════════════════════════════════════════════════════════

class TestPortfolioDossier:

    def test_contract_end_year_filter(self, today):
        players = [
            make_player(id="a", contract={"end_date": "2026-06-30"}),
            make_player(id="b", contract={"end_date": "30/06/2026"}),
            make_player(id="c", contract={"end_date": "2026"}),
            make_player(id="d", contract={"end_date": "2027-06-30"}),
            make_player(id="e"),
        ]
        dossier = portfolio_dossier(players, today)
        assert dossier.season == "2025/2026"
        assert [p.id for p in dossier.pages[0].items] == ["a", "b", "c"]

    def test_pages_of_ten_in_category_order(self, today):
        players = [make_player(id=f"s{i}", contract={"end_date": "2026"}) for i in range(12)]
        players.append(make_player(id="w1", category="Femenino", contract={"end_date": "2026"}))
        players.append(make_player(id="f1", category="Fútbol", contract={"end_date": "2026"}))

        pages = portfolio_dossier(players, today).pages
        assert [(p.category, len(p.items)) for p in pages] == [
            ("Fútbol", 1), ("Femenino", 1), ("F. Sala", 10), ("F. Sala", 2),
        ]

    def test_page_size_setting(self, settings, today):
        settings.AGENCY_DOSSIER_PAGE_SIZE = 5
        players = [make_player(id=f"s{i}", contract={"end_date": "2026"}) for i in range(6)]
        assert [len(p.items) for p in portfolio_dossier(players, today).pages] == [5, 1]

    def test_category_and_position_filters(self, today):
        players = [
            make_player(id="p1", position="Portero", contract={"end_date": "2026"}),
            make_player(id="p2", position="Ala", contract={"end_date": "2026"}),
            make_player(id="p3", category="Fútbol", position="Portero", contract={"end_date": "2026"}),
        ]
        dossier = portfolio_dossier(players, today, category="F. Sala", position="Portero")
        assert [p.id for page in dossier.pages for p in page.items] == ["p1"]
        assert dossier.positions == ["Ala", "Portero"]

    def test_empty_dossier_placeholder(self, today):
        dossier = portfolio_dossier([], today)
        assert len(dossier.pages) == 1
        assert dossier.pages[0].category == EMPTY_DOSSIER_TITLE
        assert dossier.pages[0].items == []

    def test_scouting_players_excluded(self, today):
        prospect = make_player(id="s", is_scouting=True, contract={"end_date": "2026"})
        assert portfolio_dossier([prospect], today).pages[0].category == EMPTY_DOSSIER_TITLE


class TestScoutingDossier:

    def test_prospects_without_year_filter(self, today):
        players = [
            make_player(id="s1", is_scouting=True, contract={"end_date": "2030"}),
            make_player(id="s2", is_scouting=True),
            make_player(id="signed"),
        ]
        dossier = scouting_dossier(players, today)
        assert [p.id for p in dossier.pages[0].items] == ["s1", "s2"]
        assert dossier.to_dict()["page_count"] == 1
