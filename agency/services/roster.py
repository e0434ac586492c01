"""
services/roster.py
─────────────────────────────────────────────────────────────────────
Player document types shared by the record store, billing, reports and
the spreadsheet import/export.

A PlayerRecord is the store-agnostic shape of one roster document
(signed player or scouting prospect). Dates that users type freely
(contract end, notice date, brand end) stay as text; dates the agency
computes on (birth date, agency contract window) are parsed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..exceptions import LedgerValidationError
from .ledger import ContractYear, dump_contract_years, load_contract_years, to_decimal, coerce_choice
from .season import parse_date

CONTRACT_HISTORY_LIMIT = 10


# ────────────────────────────────────────────────────────────────────
#  Choices
# ────────────────────────────────────────────────────────────────────

class Category(models.TextChoices):
    FOOTBALL = "Fútbol",       _("Fútbol")
    FUTSAL   = "F. Sala",      _("Fútbol Sala")
    WOMEN    = "Femenino",     _("Femenino")
    COACHES  = "Entrenadores", _("Entrenadores")


class PayerType(models.TextChoices):
    CLUB   = "Club",    _("Club")
    PLAYER = "Jugador", _("Jugador")
    BOTH   = "Ambos",   _("Ambos")


class ScoutingStatus(models.TextChoices):
    NOT_CONTACTED = "No contactado", _("No contactado")
    CONTACTED     = "Contactado",    _("Contactado")
    NEGOTIATING   = "Negociando",    _("Negociando")
    REJECTED      = "Rechazado",     _("Rechazado")


def _text(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (date, datetime)):
        return (raw.date() if isinstance(raw, datetime) else raw).isoformat()
    return str(raw).strip()


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


# ────────────────────────────────────────────────────────────────────
#  Nested parts
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContractTerms:
    """Club contract as typed by the user; compared as a whole for history snapshots."""
    end_date:             str = ""
    clause:               str = ""
    optional:             str = ""
    optional_notice_date: str = ""
    conditions:           str = ""

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _text(getattr(self, f.name)))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ContractTerms":
        data = data or {}
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def is_empty(self) -> bool:
        return not any(self.to_dict().values())

    @property
    def end_year(self) -> Optional[int]:
        """Calendar year of the end date; bare years ("2026") are accepted."""
        d = parse_date(self.end_date)
        if d:
            return d.year
        text = self.end_date.strip()
        return int(text) if len(text) == 4 and text.isdigit() else None


@dataclass(frozen=True)
class AgencyLink:
    """Representation agreement between the agency and the player."""
    contract_date:   Optional[date] = None
    agency_end_date: Optional[date] = None
    commission_pct:  Any            = 0
    payer_type:      PayerType      = PayerType.CLUB

    def __post_init__(self):
        object.__setattr__(self, "contract_date", parse_date(self.contract_date))
        object.__setattr__(self, "agency_end_date", parse_date(self.agency_end_date))
        object.__setattr__(self, "commission_pct", to_decimal(self.commission_pct))
        object.__setattr__(self, "payer_type",
                           coerce_choice(PayerType, self.payer_type, PayerType.CLUB, "payer_type"))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AgencyLink":
        data = data or {}
        return cls(
            contract_date=data.get("contract_date"),
            agency_end_date=data.get("agency_end_date"),
            commission_pct=data.get("commission_pct"),
            payer_type=data.get("payer_type"),
        )

    def to_dict(self) -> Dict[str, Any]:
        pct = self.commission_pct
        return {
            "contract_date":   _iso(self.contract_date),
            "agency_end_date": _iso(self.agency_end_date),
            "commission_pct":  int(pct) if pct == pct.to_integral_value() else float(pct),
            "payer_type":      self.payer_type.value,
        }


@dataclass(frozen=True)
class ScoutingInfo:
    current_agent:     str            = ""
    agent_end_date:    str            = ""
    contract_type:     str            = ""
    contract_end:      str            = ""
    status:            ScoutingStatus = ScoutingStatus.NOT_CONTACTED
    notes:             str            = ""
    last_contact_date: str            = ""

    def __post_init__(self):
        for f in fields(self):
            if f.name != "status":
                object.__setattr__(self, f.name, _text(getattr(self, f.name)))
        object.__setattr__(self, "status",
                           coerce_choice(ScoutingStatus, self.status,
                                   ScoutingStatus.NOT_CONTACTED, "scouting.status"))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ScoutingInfo"]:
        if not data:
            return None
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})

    def to_dict(self) -> Dict[str, str]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out["status"] = self.status.value
        return out


# ────────────────────────────────────────────────────────────────────
#  PlayerRecord
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlayerRecord:
    id:                    str                    = ""
    first_name:            str                    = ""
    last_name1:            str                    = ""
    last_name2:            str                    = ""
    name:                  str                    = ""
    nationality:           str                    = ""
    birth_date:            Optional[date]         = None
    club:                  str                    = ""
    league:                str                    = ""
    position:              str                    = ""
    preferred_foot:        str                    = ""
    category:              Category               = Category.FOOTBALL
    is_scouting:           bool                   = False
    monitoring_agent:      str                    = ""
    contract:              ContractTerms          = field(default_factory=ContractTerms)
    contract_history:      List[ContractTerms]    = field(default_factory=list)
    agency:                AgencyLink             = field(default_factory=AgencyLink)
    sports_brand:          str                    = ""
    sports_brand_end_date: str                    = ""
    scouting:              Optional[ScoutingInfo] = None
    contract_years:        List[ContractYear]     = field(default_factory=list)
    created_at:            Optional[datetime]     = None
    updated_at:            Optional[datetime]     = None

    def __post_init__(self):
        set_ = object.__setattr__
        for name in ("id", "first_name", "last_name1", "last_name2", "name", "nationality",
                     "club", "league", "position", "preferred_foot", "monitoring_agent",
                     "sports_brand", "sports_brand_end_date"):
            set_(self, name, _text(getattr(self, name)))
        set_(self, "birth_date", parse_date(self.birth_date))
        set_(self, "category", coerce_choice(Category, self.category, Category.FOOTBALL, "category"))
        set_(self, "is_scouting", bool(self.is_scouting))
        if not isinstance(self.contract, ContractTerms):
            set_(self, "contract", ContractTerms.from_dict(self.contract))
        set_(self, "contract_history", [
            c if isinstance(c, ContractTerms) else ContractTerms.from_dict(c)
            for c in (self.contract_history or [])
        ][:CONTRACT_HISTORY_LIMIT])
        if not isinstance(self.agency, AgencyLink):
            set_(self, "agency", AgencyLink.from_dict(self.agency))
        if self.scouting is not None and not isinstance(self.scouting, ScoutingInfo):
            set_(self, "scouting", ScoutingInfo.from_dict(self.scouting))
        set_(self, "contract_years", load_contract_years(self.contract_years))

    # ── Display ─────────────────────────────────────────────────────
    @property
    def display_name(self) -> str:
        return self.first_name or self.name

    @property
    def surname(self) -> str:
        return f"{self.last_name1} {self.last_name2}".strip()

    @property
    def full_name(self) -> str:
        return f"{self.display_name} {self.surname}".strip()

    @property
    def agent(self) -> str:
        return self.monitoring_agent or "Proneo"

    def age(self, today: Optional[date] = None) -> Optional[int]:
        """Calendar-year difference, matching how imported sheets fill the age."""
        if not self.birth_date:
            return None
        return (today or date.today()).year - self.birth_date.year

    def contract_year(self, year_id: str) -> Optional[ContractYear]:
        return next((y for y in self.contract_years if y.id == year_id), None)

    # ── Serialisation ───────────────────────────────────────────────
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":                    self.id,
            "first_name":            self.first_name,
            "last_name1":            self.last_name1,
            "last_name2":            self.last_name2,
            "name":                  self.name,
            "nationality":           self.nationality,
            "birth_date":            _iso(self.birth_date),
            "club":                  self.club,
            "league":                self.league,
            "position":              self.position,
            "preferred_foot":        self.preferred_foot,
            "category":              self.category.value,
            "is_scouting":           self.is_scouting,
            "monitoring_agent":      self.monitoring_agent,
            "contract":              self.contract.to_dict(),
            "contract_history":      [c.to_dict() for c in self.contract_history],
            "agency":                self.agency.to_dict(),
            "sports_brand":          self.sports_brand,
            "sports_brand_end_date": self.sports_brand_end_date,
            "scouting":              self.scouting.to_dict() if self.scouting else None,
            "contract_years":        dump_contract_years(self.contract_years),
            "created_at":            self.created_at.isoformat() if self.created_at else None,
            "updated_at":            self.updated_at.isoformat() if self.updated_at else None,
        }


# ────────────────────────────────────────────────────────────────────
#  Change application
# ────────────────────────────────────────────────────────────────────

EDITABLE_FIELDS = {f.name for f in fields(PlayerRecord)} - {"id", "created_at", "updated_at"}


def _contract_key(contract: ContractTerms) -> str:
    return json.dumps(contract.to_dict(), sort_keys=True)


def apply_changes(record: PlayerRecord, changes: Dict[str, Any]) -> PlayerRecord:
    """
    Shallow field update with the contract-history side effect: when the
    contract changes, the previous one is pushed to the front of
    ``contract_history`` (kept to the 10 most recent).
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise LedgerValidationError(f"Campos desconocidos: {', '.join(sorted(unknown))}")

    updated = replace(record, **changes, updated_at=timezone.now())

    if "contract" in changes and "contract_history" not in changes and not record.contract.is_empty:
        if _contract_key(record.contract) != _contract_key(updated.contract):
            history = [record.contract, *record.contract_history][:CONTRACT_HISTORY_LIMIT]
            updated = replace(updated, contract_history=history)
    return updated
