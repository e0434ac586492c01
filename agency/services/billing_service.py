"""
services/billing_service.py
─────────────────────────────────────────────────────────────────────
Administration (billing) view model: one row per (player, contract year),
search, current-season / other-seasons split, header totals and the
single write path for payment changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import ContractYearNotFound
from .ledger import ZERO, ContractYear, PaymentStatus, Side, apply_payment_change, inconsistencies
from .roster import Category, PayerType, PlayerRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingRow:
    player_id:   str
    player_name: str
    first_name:  str
    surname:     str
    club:        str
    category:    str
    agent:       str
    payer_type:  str
    entry:       ContractYear

    # ── Shortcuts used by views and exports ────────────────────────
    @property
    def year(self) -> str:
        return self.entry.year

    @property
    def year_id(self) -> str:
        return self.entry.id

    @property
    def salary(self) -> Decimal:
        return self.entry.salary

    @property
    def commission(self) -> Decimal:
        return self.entry.total_commission

    def to_dict(self) -> Dict:
        return {
            "player_id":       self.player_id,
            "player_name":     self.player_name,
            "first_name":      self.first_name,
            "surname":         self.surname,
            "club":            self.club,
            "category":        self.category,
            "agent":           self.agent,
            "payer_type":      self.payer_type,
            "commission":      float(self.commission),
            "billable":        {s.value: side_is_billable(self.entry, s) for s in Side},
            "inconsistencies": inconsistencies(self.entry),
            **self.entry.to_dict(),
        }


@dataclass
class BillingSummary:
    portfolio_value:        Decimal            = ZERO
    total_commission:       Decimal            = ZERO
    commission_by_category: Dict[str, Decimal] = field(default_factory=dict)
    paid_count:             int                = 0
    pending_count:          int                = 0
    row_count:              int                = 0

    def to_dict(self) -> Dict:
        return {
            "portfolio_value":        float(self.portfolio_value),
            "total_commission":       float(self.total_commission),
            "commission_by_category": {k: float(v) for k, v in self.commission_by_category.items()},
            "paid_count":             self.paid_count,
            "pending_count":          self.pending_count,
            "row_count":              self.row_count,
        }


# ════════════════════════════════════════════════════════════════════
#  AGGREGATION
# ════════════════════════════════════════════════════════════════════

def build_billing_rows(players: Iterable[PlayerRecord]) -> List[BillingRow]:
    """Players without contract years contribute no rows."""
    rows: List[BillingRow] = []
    for player in players:
        for entry in player.contract_years:
            rows.append(BillingRow(
                player_id=player.id,
                player_name=player.name or player.full_name,
                first_name=player.display_name,
                surname=player.surname,
                club=player.club,
                category=player.category.value,
                agent=player.agent,
                payer_type=(player.agency.payer_type or PayerType.CLUB).value,
                entry=entry,
            ))
    return rows


def filter_rows(rows: Iterable[BillingRow], search: Optional[str]) -> List[BillingRow]:
    """Case-insensitive containment on player name or club; blank search keeps all."""
    needle = (search or "").strip().lower()
    if not needle:
        return list(rows)
    return [r for r in rows if needle in r.player_name.lower() or needle in r.club.lower()]


def partition_by_season(rows: Iterable[BillingRow], season_label: str) -> Tuple[List[BillingRow], List[BillingRow]]:
    """(current, other): exact ``year`` equality; every row lands in exactly one list."""
    current, other = [], []
    for row in rows:
        (current if row.year == season_label else other).append(row)
    return current, other


def summarize(rows: Iterable[BillingRow]) -> BillingSummary:
    summary = BillingSummary(commission_by_category={c.value: ZERO for c in Category})
    for row in rows:
        summary.row_count       += 1
        summary.portfolio_value += row.salary
        commission = row.entry.club_commission + row.entry.player_commission
        summary.total_commission += commission
        summary.commission_by_category[row.category] = (
            summary.commission_by_category.get(row.category, ZERO) + commission
        )
        if row.entry.global_status == PaymentStatus.PAID:
            summary.paid_count += 1
        elif row.entry.global_status == PaymentStatus.PENDING:
            summary.pending_count += 1
    return summary


def administration_view(players: Iterable[PlayerRecord], season_label: str,
                        search: Optional[str] = None) -> Dict:
    """Payload of the administration screen (stats + both tables)."""
    rows = filter_rows(build_billing_rows(players), search)
    current, other = partition_by_season(rows, season_label)
    return {
        "season":  season_label,
        "summary": summarize(rows).to_dict(),
        "current": [r.to_dict() for r in current],
        "other":   [r.to_dict() for r in other],
    }


# ════════════════════════════════════════════════════════════════════
#  PAYMENT UPDATES
# ════════════════════════════════════════════════════════════════════

def update_payment(store, player_id: str, year_id: str, field_name: str, value) -> ContractYear:
    """
    Apply one payment edit and write the player's whole ``contract_years``
    list back in a single update (last write wins).
    """
    player = store.get(player_id)
    target = player.contract_year(year_id)
    if target is None:
        raise ContractYearNotFound(player_id, year_id)

    changed = apply_payment_change(target, field_name, value)
    years   = [changed if y.id == year_id else y for y in player.contract_years]
    store.update(player_id, {"contract_years": years})

    logger.info("Payment updated: player=%s year=%s field=%s", player_id, target.year, field_name)
    return changed


def side_is_billable(entry: ContractYear, side: str) -> bool:
    """Whether the administration table shows a payment control for ``side``."""
    return entry.commission(Side(side)) > ZERO
