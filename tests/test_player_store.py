"""
tests/test_player_store.py
─────────────────────────────────────────────────────────────────────
Player Record Store: CRUD, contract history, subscriptions, bulk delete
and the ORM-backed repository.
"""
from __future__ import annotations

import pytest

from agency.exceptions import LedgerValidationError, PlayerNotFound, StoreError
from agency.models import CustomUser, Notification, Player
from agency.services.player_store import (
    DjangoPlayerRepository,
    InMemoryPlayerRepository,
    bulk_delete,
    get_player_repository,
)
from agency.services.roster import CONTRACT_HISTORY_LIMIT

from .conftest import make_player, make_year


# ════════════════════════════════════════════════════════════════════
#  CRUD
# ════════════════════════════════════════════════════════════════════

class TestCrud:

    def test_create_assigns_id_and_timestamps(self, memory_store):
        player_id = memory_store.create({"first_name": "Dani", "last_name1": "Saldise"})
        record = memory_store.get(player_id)
        assert player_id
        assert record.first_name == "Dani"
        assert record.created_at is not None
        assert record.updated_at == record.created_at

    def test_create_keeps_requested_id(self, memory_store):
        assert memory_store.create(make_player(id="p1")) == "p1"

    def test_list_filters_rosters(self, memory_store):
        memory_store.create(make_player(id="signed"))
        memory_store.create(make_player(id="prospect", is_scouting=True))
        assert {p.id for p in memory_store.list()} == {"signed", "prospect"}
        assert [p.id for p in memory_store.list(is_scouting=True)] == ["prospect"]
        assert [p.id for p in memory_store.list(is_scouting=False)] == ["signed"]

    def test_get_missing(self, memory_store):
        with pytest.raises(PlayerNotFound):
            memory_store.get("nope")

    def test_update_is_shallow(self, memory_store):
        memory_store.create(make_player(id="p1"))
        updated = memory_store.update("p1", {"club": "ElPozo Murcia"})
        assert updated.club == "ElPozo Murcia"
        assert updated.first_name == "Sergio"
        assert memory_store.get("p1").club == "ElPozo Murcia"

    def test_update_replaces_contract_years(self, memory_store):
        memory_store.create(make_player(id="p1", contract_years=[make_year(id="a"), make_year(id="b")]))
        memory_store.update("p1", {"contract_years": [make_year(id="c")]})
        assert [y.id for y in memory_store.get("p1").contract_years] == ["c"]

    def test_update_unknown_field(self, memory_store):
        memory_store.create(make_player(id="p1"))
        with pytest.raises(LedgerValidationError):
            memory_store.update("p1", {"shoe_size": 44})

    def test_update_invalid_ledger_rejected(self, memory_store):
        memory_store.create(make_player(id="p1"))
        with pytest.raises(LedgerValidationError):
            memory_store.update("p1", {"contract_years": [{"year": "2025/2026", "salary": -5}]})
        assert memory_store.get("p1").contract_years == []

    def test_delete(self, memory_store):
        memory_store.create(make_player(id="p1"))
        memory_store.delete("p1")
        with pytest.raises(PlayerNotFound):
            memory_store.get("p1")

    def test_delete_missing(self, memory_store):
        with pytest.raises(PlayerNotFound):
            memory_store.delete("nope")

    def test_sign(self, memory_store):
        memory_store.create(make_player(id="p1", is_scouting=True))
        assert memory_store.sign("p1").is_scouting is False
        assert memory_store.list(is_scouting=True) == []

    def test_insert_failure_becomes_store_error(self):
        class BrokenStore(InMemoryPlayerRepository):
            def _insert(self, record):
                raise OSError("disk full")

        with pytest.raises(StoreError, match="disk full"):
            BrokenStore().create(make_player())


# ════════════════════════════════════════════════════════════════════
#  Contract history
# ════════════════════════════════════════════════════════════════════

class TestContractHistory:

    def test_previous_contract_snapshotted(self, memory_store):
        memory_store.create(make_player(id="p1", contract={"end_date": "2026", "clause": "1M"}))
        record = memory_store.update("p1", {"contract": {"end_date": "2028", "clause": "3M"}})
        assert record.contract.end_date == "2028"
        assert [c.end_date for c in record.contract_history] == ["2026"]

    def test_empty_contract_not_snapshotted(self, memory_store):
        memory_store.create(make_player(id="p1"))
        record = memory_store.update("p1", {"contract": {"end_date": "2028"}})
        assert record.contract_history == []

    def test_identical_contract_not_snapshotted(self, memory_store):
        memory_store.create(make_player(id="p1", contract={"end_date": "2026"}))
        record = memory_store.update("p1", {"contract": {"end_date": "2026"}})
        assert record.contract_history == []

    def test_history_capped_newest_first(self, memory_store):
        memory_store.create(make_player(id="p1", contract={"end_date": "2000"}))
        for year in range(2001, 2013):
            memory_store.update("p1", {"contract": {"end_date": str(year)}})

        history = memory_store.get("p1").contract_history
        assert len(history) == CONTRACT_HISTORY_LIMIT
        assert history[0].end_date == "2011"
        assert history[-1].end_date == "2002"

    def test_other_changes_leave_history_alone(self, memory_store):
        memory_store.create(make_player(id="p1", contract={"end_date": "2026"}))
        record = memory_store.update("p1", {"club": "Movistar Inter"})
        assert record.contract_history == []


# ════════════════════════════════════════════════════════════════════
#  Subscriptions
# ════════════════════════════════════════════════════════════════════

class TestSubscriptions:

    def test_initial_snapshot_and_updates(self, memory_store):
        memory_store.create(make_player(id="p1"))
        seen = []
        unsubscribe = memory_store.subscribe(lambda players: seen.append([p.id for p in players]))
        assert seen == [["p1"]]

        memory_store.create(make_player(id="p2"))
        assert len(seen) == 2 and set(seen[1]) == {"p1", "p2"}

        unsubscribe()
        memory_store.delete("p1")
        assert len(seen) == 2

    def test_filtered_subscription(self, memory_store):
        seen = []
        memory_store.subscribe(lambda players: seen.append([p.id for p in players]), is_scouting=True)
        memory_store.create(make_player(id="signed"))
        memory_store.create(make_player(id="prospect", is_scouting=True))
        assert seen[-1] == ["prospect"]

    def test_failing_subscriber_does_not_break_writes(self, memory_store):
        calls = []

        def listener(players):
            calls.append(len(players))
            if len(calls) > 1:
                raise RuntimeError("render failed")

        memory_store.subscribe(listener)
        memory_store.create(make_player(id="p1"))
        assert memory_store.get("p1").id == "p1"
        assert calls == [0, 1]


# ════════════════════════════════════════════════════════════════════
#  Bulk delete & factory
# ════════════════════════════════════════════════════════════════════

class TestBulkDelete:

    def test_deletes_all(self, memory_store):
        for pid in ("a", "b", "c"):
            memory_store.create(make_player(id=pid))
        assert bulk_delete(memory_store, ["a", "b"]) == 2
        assert [p.id for p in memory_store.list()] == ["c"]

    def test_failure_keeps_earlier_deletes(self, memory_store):
        for pid in ("a", "b"):
            memory_store.create(make_player(id=pid))
        with pytest.raises(PlayerNotFound):
            bulk_delete(memory_store, ["a", "missing", "b"])
        assert [p.id for p in memory_store.list()] == ["b"]


class TestFactory:

    def test_memory_store_selected(self, settings):
        settings.AGENCY_PLAYER_STORE = "memory"
        get_player_repository.cache_clear()
        try:
            assert isinstance(get_player_repository(), InMemoryPlayerRepository)
        finally:
            get_player_repository.cache_clear()

    def test_unknown_store(self, settings):
        settings.AGENCY_PLAYER_STORE = "firestore"
        get_player_repository.cache_clear()
        try:
            with pytest.raises(StoreError):
                get_player_repository()
        finally:
            get_player_repository.cache_clear()


# ════════════════════════════════════════════════════════════════════
#  Django ORM repository
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDjangoRepository:

    def test_round_trip(self, scenario_player):
        store = DjangoPlayerRepository()
        player_id = store.create(scenario_player)

        record = store.get(player_id)
        assert record.full_name == "Sergio Lozano Martínez"
        assert record.contract_years == scenario_player.contract_years
        assert Player.objects.count() == 1

    def test_non_uuid_ids_are_replaced(self):
        store = DjangoPlayerRepository()
        player_id = store.create(make_player(id="p1"))
        assert player_id != "p1"
        with pytest.raises(PlayerNotFound):
            store.get("p1")

    def test_update_and_delete(self):
        store = DjangoPlayerRepository()
        player_id = store.create(make_player(contract={"end_date": "2026"}))

        store.update(player_id, {"contract": {"end_date": "2027"}, "club": "Jimbee Cartagena"})
        record = store.get(player_id)
        assert record.club == "Jimbee Cartagena"
        assert [c.end_date for c in record.contract_history] == ["2026"]

        store.delete(player_id)
        assert Player.objects.count() == 0

    def test_orm_saves_reach_subscribers(self):
        store = DjangoPlayerRepository()
        seen = []
        store.subscribe(lambda players: seen.append(len(players)))

        store.create(make_player())
        Player.objects.create(first_name="Admin", last_name1="Alta")
        assert seen[-1] == 2

    def test_sign_notifies_finance_roles(self):
        treasurer = CustomUser.objects.create_user("tesoreria", "x", is_treasurer=True)
        CustomUser.objects.create_user("ojeador", "x", is_scout=True)

        store = DjangoPlayerRepository()
        player_id = store.create(make_player(is_scouting=True))
        store.sign(player_id)

        notes = Notification.objects.all()
        assert [n.recipient for n in notes] == [treasurer]
        assert notes[0].type == "contract_signed"
        assert notes[0].title == "🚨 CONTRATO FIRMADO"
        assert notes[0].related_player_id.hex == player_id

    def test_plain_update_sends_no_signed_alert(self):
        CustomUser.objects.create_user("tesoreria", "x", is_treasurer=True)
        store = DjangoPlayerRepository()
        player_id = store.create(make_player())
        store.update(player_id, {"club": "Palma Futsal"})
        assert Notification.objects.count() == 0

    def test_out_of_range_stored_row_does_not_break_reads(self):
        Player.objects.create(first_name="Bad", contract_years=[
            {"year": "2025/2026", "salary": -1000, "club_commission_pct": 150,
             "currency": "JPY", "club_payment": {"status": "Perdido"}},
        ])
        Player.objects.create(first_name="Clean", contract_years=[make_year().to_dict()])

        players = {p.first_name: p for p in DjangoPlayerRepository().list(is_scouting=False)}

        assert set(players) == {"Bad", "Clean"}
        repaired = players["Bad"].contract_years[0]
        assert repaired.club_commission_pct == 100
        assert repaired.salary == 0
        assert repaired.currency == "EUR"
        assert repaired.club_payment.status == "Pendiente"
        assert players["Clean"].contract_years[0].club_commission_pct == 10
