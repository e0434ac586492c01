"""
services/player_store.py
─────────────────────────────────────────────────────────────────────
Player Record Store: the one persistence seam for roster documents.

Two implementations share the same behaviour:
    InMemoryPlayerRepository → tests and demo sessions (process-local)
    DjangoPlayerRepository   → production, backed by agency.models.Player

Writes are last-write-wins; ``contract_years`` is always replaced as a
whole list. Subscribers receive the filtered roster immediately and again
after every change until they call the returned unsubscribe function.
"""

from __future__ import annotations

import logging
import threading
import uuid
import weakref
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.conf import settings
from django.utils import timezone

from ..exceptions import PlayerNotFound, StoreError
from .roster import PlayerRecord, apply_changes

logger = logging.getLogger(__name__)

Listener    = Callable[[List[PlayerRecord]], None]
Unsubscribe = Callable[[], None]


# ════════════════════════════════════════════════════════════════════
#  BASE REPOSITORY
# ════════════════════════════════════════════════════════════════════

class PlayerRepository:
    """
    Storage primitives (_all / _load / _insert / _save / _remove) are
    provided by subclasses; everything else lives here.
    """

    def __init__(self):
        self._listeners: List[tuple] = []
        self._lock = threading.Lock()

    # ── Subscriptions ──────────────────────────────────────────────
    def subscribe(self, listener: Listener, is_scouting: Optional[bool] = None) -> Unsubscribe:
        entry = (listener, is_scouting)
        with self._lock:
            self._listeners.append(entry)
        listener(self.list(is_scouting))

        def unsubscribe():
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for listener, is_scouting in listeners:
            try:
                listener(self.list(is_scouting))
            except Exception:
                logger.exception("Player store subscriber failed")

    # ── Reads ──────────────────────────────────────────────────────
    def list(self, is_scouting: Optional[bool] = None) -> List[PlayerRecord]:
        """Newest first; ``is_scouting`` None returns both rosters."""
        records = [r for r in self._all() if is_scouting is None or r.is_scouting == is_scouting]
        return sorted(records, key=lambda r: r.created_at or timezone.now(), reverse=True)

    def get(self, player_id: str) -> PlayerRecord:
        record = self._load(str(player_id))
        if record is None:
            raise PlayerNotFound(player_id)
        return record

    # ── Writes ─────────────────────────────────────────────────────
    def create(self, data) -> str:
        record = data if isinstance(data, PlayerRecord) else PlayerRecord.from_dict(dict(data))
        now = timezone.now()
        record = PlayerRecord.from_dict({
            **_fields_of(record),
            "id":         self._new_id(record.id),
            "created_at": now,
            "updated_at": now,
        })
        try:
            self._insert(record)
        except Exception as exc:
            logger.error("Player create failed: %s", exc, exc_info=True)
            raise StoreError(f"No se pudo crear el jugador: {exc}") from exc
        logger.info("Player created: %s (%s)", record.id, record.full_name)
        self._changed()
        return record.id

    def update(self, player_id: str, changes: Dict[str, Any]) -> PlayerRecord:
        current = self.get(player_id)
        updated = apply_changes(current, changes)
        try:
            self._save(updated)
        except Exception as exc:
            logger.error("Player update failed (%s): %s", player_id, exc, exc_info=True)
            raise StoreError(f"No se pudo actualizar el jugador {player_id}: {exc}") from exc
        self._changed()
        return updated

    def delete(self, player_id: str):
        self.get(player_id)
        try:
            self._remove(str(player_id))
        except Exception as exc:
            logger.error("Player delete failed (%s): %s", player_id, exc, exc_info=True)
            raise StoreError(f"No se pudo eliminar el jugador {player_id}: {exc}") from exc
        logger.info("Player deleted: %s", player_id)
        self._changed()

    def sign(self, player_id: str) -> PlayerRecord:
        """Scouting prospect → signed player."""
        return self.update(player_id, {"is_scouting": False})

    def _changed(self):
        self.notify()

    def _new_id(self, requested: str) -> str:
        return requested or uuid.uuid4().hex

    # ── Storage primitives ─────────────────────────────────────────
    def _all(self) -> Iterable[PlayerRecord]:
        raise NotImplementedError

    def _load(self, player_id: str) -> Optional[PlayerRecord]:
        raise NotImplementedError

    def _insert(self, record: PlayerRecord):
        raise NotImplementedError

    def _save(self, record: PlayerRecord):
        raise NotImplementedError

    def _remove(self, player_id: str):
        raise NotImplementedError


def _fields_of(record: PlayerRecord) -> Dict[str, Any]:
    return {name: getattr(record, name) for name in record.__dataclass_fields__}


# ════════════════════════════════════════════════════════════════════
#  IN-MEMORY
# ════════════════════════════════════════════════════════════════════

class InMemoryPlayerRepository(PlayerRepository):
    def __init__(self, records: Iterable[PlayerRecord] = ()):
        super().__init__()
        self._records: Dict[str, PlayerRecord] = {}
        for record in records:
            self.create(record)

    def _all(self):
        return list(self._records.values())

    def _load(self, player_id):
        return self._records.get(player_id)

    def _insert(self, record):
        self._records[record.id] = record

    def _save(self, record):
        self._records[record.id] = record

    def _remove(self, player_id):
        self._records.pop(player_id, None)


# ════════════════════════════════════════════════════════════════════
#  DJANGO ORM
# ════════════════════════════════════════════════════════════════════

class DjangoPlayerRepository(PlayerRepository):
    """
    Persists to agency.models.Player. Changes made through the ORM
    elsewhere (admin, shell) reach subscribers through the post_save /
    post_delete receivers in agency.signals.
    """

    def __init__(self):
        super().__init__()
        _LIVE_ORM_STORES.add(self)

    def _model(self):
        from agency.models import Player
        return Player

    def _all(self):
        return [p.to_record() for p in self._model().objects.all()]

    def _new_id(self, requested: str) -> str:
        return requested if _is_uuid(requested) else uuid.uuid4().hex

    def _load(self, player_id):
        if not _is_uuid(player_id):
            return None
        player = self._model().objects.filter(pk=player_id).first()
        return player.to_record() if player else None

    def _insert(self, record):
        player = self._model()(pk=uuid.UUID(record.id))
        player.apply_record(record)
        player.save()

    def _save(self, record):
        player = self._model().objects.get(pk=record.id)
        player.apply_record(record)
        player.save()

    def _remove(self, player_id):
        self._model().objects.filter(pk=player_id).delete()

    def _changed(self):
        # the post_save / post_delete receivers broadcast the change
        pass


_LIVE_ORM_STORES: "weakref.WeakSet[DjangoPlayerRepository]" = weakref.WeakSet()


def broadcast_change():
    """Called by the Player post_save / post_delete receivers."""
    for store in list(_LIVE_ORM_STORES):
        store.notify()


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except ValueError:
        return False


# ════════════════════════════════════════════════════════════════════
#  BULK OPERATIONS & FACTORY
# ════════════════════════════════════════════════════════════════════

def bulk_delete(store: PlayerRepository, player_ids: Iterable[str]) -> int:
    """
    Sequential deletes with no rollback: the first failure propagates and
    the deletes already performed stay applied.
    """
    deleted = 0
    for player_id in player_ids:
        store.delete(player_id)
        deleted += 1
    logger.info("Bulk delete: %d players removed", deleted)
    return deleted


STORES = {
    "memory": InMemoryPlayerRepository,
    "django": DjangoPlayerRepository,
}


@lru_cache(maxsize=1)
def get_player_repository() -> PlayerRepository:
    kind = getattr(settings, "AGENCY_PLAYER_STORE", "django")
    try:
        return STORES[kind]()
    except KeyError:
        raise StoreError(f"AGENCY_PLAYER_STORE desconocido: {kind}") from None
