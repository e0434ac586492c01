"""
tests/conftest.py
─────────────────────────────────────────────────────────────────────
Shared builders for ledger entries, player records and stores.
"""
from __future__ import annotations

import datetime

import pytest

from agency.services.ledger import ContractYear
from agency.services.player_store import InMemoryPlayerRepository
from agency.services.roster import PlayerRecord


def make_year(**overrides) -> ContractYear:
    data = {
        "year":                 "2025/2026",
        "salary":               100000,
        "club_commission_type": "percentage",
        "club_commission_pct":  10,
    }
    data.update(overrides)
    return ContractYear.from_dict(data)


def make_player(**overrides) -> PlayerRecord:
    data = {
        "first_name": "Sergio",
        "last_name1": "Lozano",
        "last_name2": "Martínez",
        "name":       "Sergio Lozano",
        "club":       "FC Barcelona",
        "category":   "F. Sala",
        "position":   "Ala",
    }
    data.update(overrides)
    return PlayerRecord.from_dict(data)


@pytest.fixture
def today():
    return datetime.date(2025, 9, 1)


@pytest.fixture
def scenario_player():
    """Club side 10 % collected, player side 500 fixed still pending."""
    return make_player(contract_years=[make_year(
        id="y2025",
        player_commission_type="fixed",
        player_commission_fixed=500,
        club_payment={"status": "Pagado", "payment_date": "2025-10-01"},
        player_payment={"status": "Pendiente", "due_date": "Enero 2026"},
    )])


@pytest.fixture
def memory_store():
    return InMemoryPlayerRepository()
