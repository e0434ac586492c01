"""
services/alert_service.py
─────────────────────────────────────────────────────────────────────
Daily alert sweep and event notifications.

    payments  → pending side payments 15 / 3 / 0 / -7 / -30 days from due
    clauses   → optional-clause notice dates 60 / 30 / 7 / 0 / -1 / -7 days away
    birthdays → players born on today's day and month

Alerts are computed as plain values first, then fanned out to
Notification rows for users holding one of the alert roles and a
matching category.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .ledger import PaymentStatus, Side
from .roster import PlayerRecord
from .season import days_until, parse_date

logger = logging.getLogger(__name__)

PAYMENT_ALERT_DAYS = (15, 3, 0, -7, -30)
CLAUSE_ALERT_DAYS  = (60, 30, 7, 0, -1, -7)

FINANCE_ROLES  = ("admin", "director", "tesorero")
CLAUSE_ROLES   = ("admin", "director", "agente")
BIRTHDAY_ROLES = ("admin", "director", "scout", "agente")

GENERAL_CATEGORY = "General"
FINANCE_CATEGORY = "Finanzas"

# alert role → CustomUser boolean
ROLE_FIELDS = {
    "admin":    "is_admin",
    "director": "is_director",
    "tesorero": "is_treasurer",
    "agente":   "is_agent",
    "scout":    "is_scout",
}

SIDE_LABELS = {Side.CLUB: "Cobro Club", Side.PLAYER: "Cobro Jugador"}


@dataclass(frozen=True)
class Alert:
    kind:      str                 # "payment" | "clause" | "birthday" | "contract_signed"
    roles:     Tuple[str, ...]
    category:  str
    title:     str
    body:      str
    player_id: str = ""


def _player_name(player: PlayerRecord) -> str:
    return player.name or player.first_name or "Jugador"


# ════════════════════════════════════════════════════════════════════
#  DETECTORS
# ════════════════════════════════════════════════════════════════════

def payment_alerts(players: Iterable[PlayerRecord], today: date) -> List[Alert]:
    """Reminder date is ``alert_date`` when set, otherwise a parseable ``due_date``."""
    alerts = []
    for player in players:
        for entry in player.contract_years:
            for side in (Side.CLUB, Side.PLAYER):
                record = entry.payment(side)
                if record.status != PaymentStatus.PENDING:
                    continue
                target = record.alert_date or parse_date(record.due_date)
                if target is None:
                    continue
                diff = days_until(target, today)
                if diff not in PAYMENT_ALERT_DAYS:
                    continue
                label = SIDE_LABELS[side]
                name  = _player_name(player)
                if diff < 0:
                    title = f"🚨 {label.upper()} VENCIDO"
                    body  = f"{name}: Vencido hace {abs(diff)} días."
                else:
                    title = f"💰 {label} Próximo"
                    body  = f"{name}: Vence en {diff} días."
                alerts.append(Alert("payment", FINANCE_ROLES, FINANCE_CATEGORY, title, body, player.id))
    return alerts


def clause_alerts(players: Iterable[PlayerRecord], today: date) -> List[Alert]:
    alerts = []
    for player in players:
        notice = parse_date(player.contract.optional_notice_date)
        if notice is None:
            continue
        diff = days_until(notice, today)
        if diff not in CLAUSE_ALERT_DAYS:
            continue
        name = _player_name(player)
        if diff < 0:
            title = "🚨 CLÁUSULA VENCIDA"
            body  = f"El plazo de {name} venció hace {abs(diff)} días."
        else:
            title = "⚠️ Cláusula Opcional Próxima"
            body  = f"El plazo de {name} vence en {diff} días."
        alerts.append(Alert("clause", CLAUSE_ROLES, player.category.value, title, body, player.id))
    return alerts


def birthday_alerts(players: Iterable[PlayerRecord], today: date) -> List[Alert]:
    alerts = []
    for player in players:
        born = player.birth_date
        if born is None or (born.month, born.day) != (today.month, today.day):
            continue
        alerts.append(Alert(
            "birthday", BIRTHDAY_ROLES, player.category.value,
            f"🎉 Cumpleaños de {_player_name(player)}",
            f"Hoy cumple {player.age(today)} años.",
            player.id,
        ))
    return alerts


def collect_daily_alerts(players: Iterable[PlayerRecord], today: Optional[date] = None) -> List[Alert]:
    today   = today or date.today()
    players = list(players)
    return birthday_alerts(players, today) + clause_alerts(players, today) + payment_alerts(players, today)


def contract_signed_alert(player: PlayerRecord) -> Alert:
    name = _player_name(player)
    return Alert(
        "contract_signed", FINANCE_ROLES, GENERAL_CATEGORY,
        "🚨 CONTRATO FIRMADO",
        f"{name} ha firmado con la agencia. Requiere validación.",
        player.id,
    )


# ════════════════════════════════════════════════════════════════════
#  RECIPIENTS & DISPATCH
# ════════════════════════════════════════════════════════════════════

def category_matches(user_category: Optional[str], alert_category: Optional[str]) -> bool:
    """Users without a category (or "General") and "General" alerts always match."""
    user_category = user_category or GENERAL_CATEGORY
    if not alert_category or alert_category == GENERAL_CATEGORY or user_category == GENERAL_CATEGORY:
        return True
    return user_category == alert_category


def recipients_for(alert: Alert, users: Sequence) -> List:
    fields = [ROLE_FIELDS[r] for r in alert.roles if r in ROLE_FIELDS]
    return [
        u for u in users
        if any(getattr(u, f, False) for f in fields) and category_matches(getattr(u, "category", ""), alert.category)
    ]


NOTIFICATION_TYPES = {
    "payment":         "payment_due",
    "clause":          "clause_notice",
    "birthday":        "birthday",
    "contract_signed": "contract_signed",
}


def dispatch_alerts(alerts: Iterable[Alert]) -> int:
    """Create one Notification per (alert, recipient); returns how many were created."""
    from agency.models import CustomUser, Notification, Player

    alerts  = list(alerts)
    users   = list(CustomUser.objects.filter(is_active=True))
    known   = _existing_player_ids(Player, {a.player_id for a in alerts if a.player_id})
    created = 0
    for alert in alerts:
        recipients = recipients_for(alert, users)
        if not recipients:
            logger.info("Alert without recipients: %s", alert.title)
            continue
        Notification.objects.bulk_create([
            Notification(
                recipient=user,
                type=NOTIFICATION_TYPES.get(alert.kind, "general"),
                title=alert.title,
                message=alert.body,
                related_player_id=alert.player_id if alert.player_id in known else None,
            )
            for user in recipients
        ])
        created += len(recipients)
    logger.info("Alerts dispatched: %d notifications", created)
    return created


def _existing_player_ids(Player, ids) -> set:
    """Only ORM-backed players can be linked; in-memory ids are left unlinked."""
    valid = []
    for raw in ids:
        try:
            valid.append(uuid.UUID(str(raw)))
        except ValueError:
            continue
    found = Player.objects.filter(pk__in=valid).values_list("pk", flat=True)
    return {pk.hex for pk in found} | {str(pk) for pk in found}
