"""
services/ledger.py
─────────────────────────────────────────────────────────────────────
Contract-year ledger: one season's salary and commission terms for a
player, with independent club-side / player-side payment records and a
manually set global status.

Entries are immutable and validated at construction; edits produce new
entries (dataclasses.replace) and are written back as a whole list.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.db import models
from django.utils.translation import gettext_lazy as _

from ..exceptions import LedgerValidationError
from .season import parse_date

logger = logging.getLogger(__name__)

ZERO    = Decimal("0")
HUNDRED = Decimal("100")


# ────────────────────────────────────────────────────────────────────
#  Choices
# ────────────────────────────────────────────────────────────────────

class PaymentStatus(models.TextChoices):
    PENDING   = "Pendiente", _("Pendiente")
    PAID      = "Pagado",    _("Pagado")
    POSTPONED = "Pospuesto", _("Pospuesto")
    CANCELED  = "Cancelado", _("Cancelado")


class CommissionType(models.TextChoices):
    PERCENTAGE = "percentage", _("Porcentaje")
    FIXED      = "fixed",      _("Importe fijo")


class Currency(models.TextChoices):
    EUR = "EUR", "EUR"
    USD = "USD", "USD"
    GBP = "GBP", "GBP"


class Side(models.TextChoices):
    CLUB   = "club",   _("Club")
    PLAYER = "player", _("Jugador")


# ────────────────────────────────────────────────────────────────────
#  Coercion helpers
# ────────────────────────────────────────────────────────────────────

def to_decimal(raw) -> Decimal:
    """Numeric input with fallback: missing or malformed values become 0."""
    if raw is None or isinstance(raw, bool):
        return ZERO
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else ZERO
    try:
        value = Decimal(str(raw).strip().replace(",", "."))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return value if value.is_finite() else ZERO


def coerce_choice(choices, raw, default, field_name: str):
    if raw is None or raw == "":
        return default
    if raw in choices.values:
        return choices(raw)
    raise LedgerValidationError(f"Valor no válido para {field_name}: {raw!r}")


def _number(value: Decimal):
    """Decimal → JSON-native int/float for document storage."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


# ────────────────────────────────────────────────────────────────────
#  PaymentRecord
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PaymentRecord:
    """
    Collection state of one commission side.

    ``due_date`` is a free-text forecast ("Enero 2026"); ``alert_date`` is the
    exact reminder date; ``payment_date`` is filled in by the user, it is never
    stamped automatically when the status changes.
    """
    status:       PaymentStatus  = PaymentStatus.PENDING
    due_date:     str            = ""
    alert_date:   Optional[date] = None
    payment_date: Optional[date] = None
    is_paid:      bool           = False
    notes:        str            = ""

    def __post_init__(self):
        object.__setattr__(self, "status",
                           coerce_choice(PaymentStatus, self.status, PaymentStatus.PENDING, "status"))
        object.__setattr__(self, "due_date", (self.due_date or "").strip())
        object.__setattr__(self, "alert_date", parse_date(self.alert_date))
        object.__setattr__(self, "payment_date", parse_date(self.payment_date))
        object.__setattr__(self, "is_paid", bool(self.is_paid))
        object.__setattr__(self, "notes", self.notes or "")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PaymentRecord":
        if not data:
            return cls()
        return cls(
            status=data.get("status"),
            due_date=data.get("due_date") or "",
            alert_date=data.get("alert_date"),
            payment_date=data.get("payment_date"),
            is_paid=data.get("is_paid", False),
            notes=data.get("notes") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status":       self.status.value,
            "due_date":     self.due_date,
            "alert_date":   _iso(self.alert_date),
            "payment_date": _iso(self.payment_date),
            "is_paid":      self.is_paid,
            "notes":        self.notes,
        }

    @property
    def is_collecting(self) -> bool:
        """Still expected to be collected (anything but Pagado / Cancelado)."""
        return self.status not in (PaymentStatus.PAID, PaymentStatus.CANCELED)


# ────────────────────────────────────────────────────────────────────
#  ContractYear
# ────────────────────────────────────────────────────────────────────

def new_entry_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class ContractYear:
    id:                      str            = field(default_factory=new_entry_id)
    year:                    str            = ""
    salary:                  Decimal        = ZERO
    currency:                Currency       = Currency.EUR
    club_commission_type:    CommissionType = CommissionType.PERCENTAGE
    club_commission_pct:     Decimal        = ZERO
    club_commission_fixed:   Decimal        = ZERO
    player_commission_type:  CommissionType = CommissionType.PERCENTAGE
    player_commission_pct:   Decimal        = ZERO
    player_commission_fixed: Decimal        = ZERO
    club_payment:            PaymentRecord  = field(default_factory=PaymentRecord)
    player_payment:          PaymentRecord  = field(default_factory=PaymentRecord)
    global_status:           PaymentStatus  = PaymentStatus.PENDING

    # ── Validation ──────────────────────────────────────────────────
    def __post_init__(self):
        set_ = object.__setattr__
        set_(self, "id", str(self.id or new_entry_id()))
        set_(self, "year", (self.year or "").strip())
        set_(self, "currency", coerce_choice(Currency, self.currency, Currency.EUR, "currency"))
        set_(self, "global_status",
             coerce_choice(PaymentStatus, self.global_status, PaymentStatus.PENDING, "global_status"))

        for side in Side.values:
            set_(self, f"{side}_commission_type",
                 coerce_choice(CommissionType, getattr(self, f"{side}_commission_type"),
                         CommissionType.PERCENTAGE, f"{side}_commission_type"))
            pct   = to_decimal(getattr(self, f"{side}_commission_pct"))
            fixed = to_decimal(getattr(self, f"{side}_commission_fixed"))
            if not (ZERO <= pct <= HUNDRED):
                raise LedgerValidationError(f"Porcentaje de comisión fuera de rango (0-100): {pct}")
            if fixed < ZERO:
                raise LedgerValidationError(f"La comisión fija no puede ser negativa: {fixed}")
            set_(self, f"{side}_commission_pct", pct)
            set_(self, f"{side}_commission_fixed", fixed)

            payment = getattr(self, f"{side}_payment")
            if not isinstance(payment, PaymentRecord):
                set_(self, f"{side}_payment", PaymentRecord.from_dict(payment))

        salary = to_decimal(self.salary)
        if salary < ZERO:
            raise LedgerValidationError(f"El salario no puede ser negativo: {salary}")
        set_(self, "salary", salary)

    # ── Commission ──────────────────────────────────────────────────
    def commission(self, side: str) -> Decimal:
        """salary × pct / 100 for percentage terms, the fixed amount otherwise."""
        side = Side(side)
        if getattr(self, f"{side}_commission_type") == CommissionType.FIXED:
            return getattr(self, f"{side}_commission_fixed")
        return self.salary * getattr(self, f"{side}_commission_pct") / HUNDRED

    @property
    def club_commission(self) -> Decimal:
        return self.commission(Side.CLUB)

    @property
    def player_commission(self) -> Decimal:
        return self.commission(Side.PLAYER)

    @property
    def total_commission(self) -> Decimal:
        return self.club_commission + self.player_commission

    @property
    def percentage_commission(self) -> Decimal:
        """salary × (club_pct + player_pct) / 100, ignoring commission types."""
        return self.salary * (self.club_commission_pct + self.player_commission_pct) / HUNDRED

    @property
    def fixed_commission(self) -> Decimal:
        """Sum of the fixed-type sides; these are absent from percentage_commission."""
        return sum(
            (getattr(self, f"{side}_commission_fixed")
             for side in Side.values
             if getattr(self, f"{side}_commission_type") == CommissionType.FIXED),
            ZERO,
        )

    def payment(self, side: str) -> PaymentRecord:
        return getattr(self, f"{Side(side)}_payment")

    # ── Serialisation ───────────────────────────────────────────────
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractYear":
        return cls(
            id=data.get("id") or new_entry_id(),
            year=data.get("year") or "",
            salary=data.get("salary"),
            currency=data.get("currency"),
            club_commission_type=data.get("club_commission_type"),
            club_commission_pct=data.get("club_commission_pct"),
            club_commission_fixed=data.get("club_commission_fixed"),
            player_commission_type=data.get("player_commission_type"),
            player_commission_pct=data.get("player_commission_pct"),
            player_commission_fixed=data.get("player_commission_fixed"),
            club_payment=PaymentRecord.from_dict(data.get("club_payment")),
            player_payment=PaymentRecord.from_dict(data.get("player_payment")),
            global_status=data.get("global_status"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":                      self.id,
            "year":                    self.year,
            "salary":                  _number(self.salary),
            "currency":                self.currency.value,
            "club_commission_type":    self.club_commission_type.value,
            "club_commission_pct":     _number(self.club_commission_pct),
            "club_commission_fixed":   _number(self.club_commission_fixed),
            "player_commission_type":  self.player_commission_type.value,
            "player_commission_pct":   _number(self.player_commission_pct),
            "player_commission_fixed": _number(self.player_commission_fixed),
            "club_payment":            self.club_payment.to_dict(),
            "player_payment":          self.player_payment.to_dict(),
            "global_status":           self.global_status.value,
        }


def load_contract_years(raw: Optional[List[Any]]) -> List[ContractYear]:
    """Document list (dicts or entries) → validated ContractYear list."""
    return [y if isinstance(y, ContractYear) else ContractYear.from_dict(y) for y in (raw or [])]


def load_stored_contract_years(raw: Optional[List[Any]]) -> List[ContractYear]:
    """
    Persisted document list → ContractYear list, repairing values that
    would fail validation instead of raising.

    Rows can reach the database without going through the write paths
    (admin JSON editing, legacy data); one bad row must not break every
    read of the roster.
    """
    years = []
    for item in raw or []:
        if isinstance(item, ContractYear):
            years.append(item)
        elif isinstance(item, dict):
            years.append(ContractYear.from_dict(_repair_stored_entry(item)))
        else:
            logger.warning("Ignoring malformed contract year: %r", item)
    return years


_STORED_CHOICES = (
    ("currency",               Currency),
    ("club_commission_type",   CommissionType),
    ("player_commission_type", CommissionType),
    ("global_status",          PaymentStatus),
)


def _repair_stored_entry(data: Dict[str, Any]) -> Dict[str, Any]:
    """Clamp percentages to 0-100, zero negative amounts, reset unknown choices."""
    fixed = dict(data)
    label = data.get("year") or data.get("id") or "?"

    for key in ("salary", "club_commission_fixed", "player_commission_fixed"):
        value = to_decimal(fixed.get(key))
        if value < ZERO:
            logger.warning("Contract year %s: negative %s (%s) reset to 0", label, key, value)
            fixed[key] = ZERO

    for key in ("club_commission_pct", "player_commission_pct"):
        value   = to_decimal(fixed.get(key))
        clamped = min(max(value, ZERO), HUNDRED)
        if clamped != value:
            logger.warning("Contract year %s: %s %s clamped to %s", label, key, value, clamped)
            fixed[key] = clamped

    for key, choices in _STORED_CHOICES:
        raw = fixed.get(key)
        if raw not in (None, "") and raw not in choices.values:
            logger.warning("Contract year %s: unknown %s %r reset to default", label, key, raw)
            fixed[key] = None

    for key in ("club_payment", "player_payment"):
        record = fixed.get(key)
        if record is not None and not isinstance(record, dict):
            logger.warning("Contract year %s: malformed %s reset", label, key)
            fixed[key] = None
        elif record and record.get("status") not in (None, "") and record["status"] not in PaymentStatus.values:
            logger.warning("Contract year %s: unknown %s status %r reset", label, key, record["status"])
            fixed[key] = {**record, "status": None}
    return fixed


def dump_contract_years(years: List[ContractYear]) -> List[Dict[str, Any]]:
    return [y.to_dict() for y in years]


# ────────────────────────────────────────────────────────────────────
#  Payment state machine
# ────────────────────────────────────────────────────────────────────
#  Any status is reachable from any status; nothing is gated and the
#  global status is never derived from the two side records.

PAYMENT_FIELDS = ("club_payment", "player_payment", "global_status")
_RECORD_KEYS   = {"status", "due_date", "alert_date", "payment_date", "notes"}


def update_side_payment(entry: ContractYear, side: str, **changes) -> ContractYear:
    """
    Merge ``changes`` into one side's PaymentRecord.

    ``is_paid`` follows the new status (legacy duplicate); ``payment_date`` is
    only changed when passed explicitly.
    """
    unknown = set(changes) - _RECORD_KEYS
    if unknown:
        raise LedgerValidationError(f"Campos de pago desconocidos: {', '.join(sorted(unknown))}")

    side    = Side(side)
    current = entry.payment(side)
    merged  = {**current.to_dict(), **changes}
    if "status" in changes:
        merged["is_paid"] = merged["status"] == PaymentStatus.PAID
    record = PaymentRecord.from_dict(merged)
    return replace(entry, **{f"{side}_payment": record})


def set_global_status(entry: ContractYear, status) -> ContractYear:
    return replace(entry, global_status=coerce_choice(PaymentStatus, status, None, "global_status")
                   or PaymentStatus.PENDING)


def apply_payment_change(entry: ContractYear, field_name: str, value) -> ContractYear:
    """
    Single entry point used by the administration table:
        field_name = "club_payment" | "player_payment" → value is a dict of changes
        field_name = "global_status"                    → value is a status
    """
    if field_name == "global_status":
        return set_global_status(entry, value)
    if field_name in ("club_payment", "player_payment"):
        if not isinstance(value, dict):
            raise LedgerValidationError("Los cambios de pago deben ser un diccionario.")
        return update_side_payment(entry, field_name.split("_")[0], **value)
    raise LedgerValidationError(f"Campo no editable: {field_name}")


def inconsistencies(entry: ContractYear) -> List[str]:
    """
    Human-readable notes where the manual global status disagrees with the
    side records. Reported only; nothing is corrected.
    """
    notes: List[str] = []
    sides = [entry.payment(s).status for s in Side.values if entry.commission(s) > ZERO]
    if sides and all(s == PaymentStatus.PAID for s in sides) and entry.global_status != PaymentStatus.PAID:
        notes.append(f"Cobros cobrados pero estado global {entry.global_status.value}")
    if entry.global_status == PaymentStatus.PAID and any(s != PaymentStatus.PAID for s in sides):
        notes.append("Estado global Pagado con cobros pendientes")
    if entry.global_status == PaymentStatus.CANCELED and any(s == PaymentStatus.PAID for s in sides):
        notes.append("Estado global Cancelado con cobros ya pagados")
    for s in Side.values:
        record = entry.payment(s)
        if record.status == PaymentStatus.PAID and record.payment_date is None:
            notes.append(f"Cobro {Side(s).label} pagado sin fecha de pago")
    return notes
