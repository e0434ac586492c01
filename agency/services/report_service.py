"""
services/report_service.py
═══════════════════════════════════════════════════════════════════════
Printable report aggregates. Rendering (PDF / print preview) is done by
the client; these functions return plain data plus the table payload a
PDF renderer needs.

    economic_report()        portfolio value & commission per category
    commissions_report()     collected vs pending commission portions
    agency_expiry_report()   representation agreements about to lapse
    portfolio_dossier()      signed players whose club contract ends this season
    scouting_dossier()       scouting prospects
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.conf import settings

from .currency import format_currency
from .ledger import ZERO, HUNDRED, ContractYear, PaymentStatus, Side
from .roster import Category, PlayerRecord
from .season import Season, add_months, format_date_es, resolve_active_entry

logger = logging.getLogger(__name__)

ALL_FILTER = "Todos"

ECONOMIC_CATEGORY_ORDER = [Category.FOOTBALL, Category.FUTSAL, Category.WOMEN, Category.COACHES]
DOSSIER_CATEGORY_ORDER  = [Category.FOOTBALL, Category.WOMEN, Category.FUTSAL, Category.COACHES]

EMPTY_DOSSIER_TITLE = "Vista Previa (Sin Datos)"


# ════════════════════════════════════════════════════════════════════
#  ECONOMIC REPORT
# ════════════════════════════════════════════════════════════════════

@dataclass
class PlayerEconomics:
    player_id:  str
    name:       str
    club:       str
    season:     Optional[str]
    salary:     Decimal
    commission: Decimal


@dataclass
class CategoryEconomics:
    category:                  str
    count:                     int
    value:                     Decimal = ZERO
    commission:                Decimal = ZERO
    excluded_fixed_commission: Decimal = ZERO
    share_of_commission:       Decimal = ZERO
    items: List[PlayerEconomics]       = field(default_factory=list)


@dataclass
class EconomicReport:
    categories:                List[CategoryEconomics]
    total_value:               Decimal
    total_commission:          Decimal
    excluded_fixed_commission: Decimal

    @property
    def commission_ratio(self) -> Decimal:
        """Commission / portfolio value, in percent (0 for an empty portfolio)."""
        if self.total_value <= ZERO:
            return ZERO
        return (self.total_commission / self.total_value * HUNDRED).quantize(Decimal("0.1"))

    @property
    def top_category(self) -> Optional[str]:
        if not self.categories:
            return None
        return max(self.categories, key=lambda c: c.commission).category

    def to_dict(self) -> Dict:
        return {
            "total_value":               float(self.total_value),
            "total_commission":          float(self.total_commission),
            "excluded_fixed_commission": float(self.excluded_fixed_commission),
            "commission_ratio":          float(self.commission_ratio),
            "top_category":              self.top_category,
            "total_value_display":       format_currency(self.total_value, decimals=0),
            "total_commission_display":  format_currency(self.total_commission, decimals=0),
            "categories": [
                {
                    "category":                  c.category,
                    "count":                     c.count,
                    "value":                     float(c.value),
                    "commission":                float(c.commission),
                    "excluded_fixed_commission": float(c.excluded_fixed_commission),
                    "share_of_commission":       float(c.share_of_commission),
                    "items": [
                        {
                            "player_id":  i.player_id,
                            "name":       i.name,
                            "club":       i.club,
                            "season":     i.season or "-",
                            "salary":     float(i.salary),
                            "commission": float(i.commission),
                        }
                        for i in c.items
                    ],
                }
                for c in self.categories
            ],
        }


def economic_report(players: Iterable[PlayerRecord], today: Optional[date] = None) -> EconomicReport:
    """
    Signed players per category, valued on the season-resolved ledger entry.

    Commission here is salary × (club_pct + player_pct) / 100. Fixed-type
    amounts are not part of that total; they are exposed separately as
    ``excluded_fixed_commission``.
    """
    signed = [p for p in players if not p.is_scouting]
    categories: List[CategoryEconomics] = []

    for cat in ECONOMIC_CATEGORY_ORDER:
        members = [p for p in signed if p.category == cat]
        if not members:
            continue
        stats = CategoryEconomics(category=cat.value, count=len(members))
        for player in members:
            entry: Optional[ContractYear] = resolve_active_entry(player.contract_years, today)
            salary     = entry.salary if entry else ZERO
            commission = entry.percentage_commission if entry else ZERO
            stats.value      += salary
            stats.commission += commission
            if entry:
                stats.excluded_fixed_commission += entry.fixed_commission
            stats.items.append(PlayerEconomics(
                player_id=player.id,
                name=player.name or player.full_name,
                club=player.club,
                season=entry.year if entry else None,
                salary=salary,
                commission=commission,
            ))
        categories.append(stats)

    total_value      = sum((c.value for c in categories), ZERO)
    total_commission = sum((c.commission for c in categories), ZERO)
    for c in categories:
        if total_commission > ZERO:
            c.share_of_commission = (c.commission / total_commission * HUNDRED).quantize(Decimal("0.1"))

    return EconomicReport(
        categories=categories,
        total_value=total_value,
        total_commission=total_commission,
        excluded_fixed_commission=sum((c.excluded_fixed_commission for c in categories), ZERO),
    )


# ════════════════════════════════════════════════════════════════════
#  COMMISSIONS REPORT
# ════════════════════════════════════════════════════════════════════

COMMISSIONS_TITLE   = "INFORME ECONÓMICO PRONEO SPORTS"
COMMISSIONS_HEADERS = ["Nombre", "Apellidos", "Deporte", "Club", "Fecha", "Pagador", "Importe", "Agente"]
PAID_HEAD_COLOR     = (16, 185, 129)
PENDING_HEAD_COLOR  = (245, 158, 11)

PAYER_LABELS = {Side.CLUB: "CLUB", Side.PLAYER: "JUGADOR"}


@dataclass
class CommissionLine:
    player_id: str
    name:      str
    surname:   str
    category:  str
    club:      str
    date:      str
    payer:     str
    amount:    Decimal
    currency:  str
    agent:     str

    def as_cells(self) -> List[str]:
        return [
            self.name, self.surname, self.category, self.club, self.date, self.payer,
            format_currency(self.amount, self.currency), self.agent,
        ]


def totals_by_currency(lines: Iterable[CommissionLine]) -> Dict[str, Decimal]:
    """Amounts are never added across currencies; keys keep first-seen order."""
    totals: Dict[str, Decimal] = {}
    for line in lines:
        totals[line.currency] = totals.get(line.currency, ZERO) + line.amount
    return totals


def format_totals(totals: Dict[str, Decimal]) -> str:
    """"10.000,00 € + 250,00 US$"; an empty section shows zero in the default currency."""
    if not totals:
        return format_currency(ZERO)
    return " + ".join(format_currency(amount, currency) for currency, amount in totals.items())


@dataclass
class CommissionsReport:
    season:        str
    paid:          List[CommissionLine]
    pending:       List[CommissionLine]
    generated_on:  date

    @property
    def paid_totals(self) -> Dict[str, Decimal]:
        return totals_by_currency(self.paid)

    @property
    def pending_totals(self) -> Dict[str, Decimal]:
        return totals_by_currency(self.pending)

    @property
    def file_name(self) -> str:
        return f"Informe_Comisiones_{self.season.replace('/', '-')}.pdf"

    def table_payload(self) -> Dict:
        """Everything a PDF renderer needs: title, sections, head colours, footer."""
        return {
            "title":    COMMISSIONS_TITLE,
            "subtitle": f"Temporada: {self.season}",
            "headers":  COMMISSIONS_HEADERS,
            "sections": [
                {
                    "title":      "1. COMISIONES COBRADAS",
                    "head_color": list(PAID_HEAD_COLOR),
                    "rows":       [l.as_cells() for l in self.paid],
                },
                {
                    "title":      "2. COMISIONES PENDIENTES",
                    "head_color": list(PENDING_HEAD_COLOR),
                    "rows":       [l.as_cells() for l in self.pending],
                },
            ],
            "footer": {
                "total_paid":    format_totals(self.paid_totals),
                "total_pending": format_totals(self.pending_totals),
                "generated_on":  f"Generado el: {self.generated_on.strftime('%d/%m/%Y')}",
            },
            "file_name": self.file_name,
        }


def commissions_report(players: Iterable[PlayerRecord], season_label: str,
                       today: Optional[date] = None) -> CommissionsReport:
    """
    Per player, the first entry whose ``year`` equals ``season_label``; each
    side with a positive commission becomes one line. Pagado lines are
    collected, Cancelado lines are dropped, the rest are pending.
    """
    paid: List[CommissionLine] = []
    pending: List[CommissionLine] = []

    for player in players:
        entry = next((y for y in player.contract_years if y.year == season_label), None)
        if entry is None:
            continue
        for side in (Side.CLUB, Side.PLAYER):
            amount = entry.commission(side)
            if amount <= ZERO:
                continue
            record  = entry.payment(side)
            is_paid = record.status == PaymentStatus.PAID
            if not is_paid and not record.is_collecting:
                continue
            line = CommissionLine(
                player_id=player.id,
                name=player.display_name,
                surname=player.surname,
                category=player.category.value if player.category else "General",
                club=player.club,
                date=(format_date_es(record.payment_date, "-") if is_paid
                      else format_date_es(record.due_date, "Sin fecha")),
                payer=PAYER_LABELS[side],
                amount=amount,
                currency=entry.currency.value,
                agent=player.agent,
            )
            (paid if is_paid else pending).append(line)

    logger.info("Commissions report %s: %d paid, %d pending", season_label, len(paid), len(pending))
    return CommissionsReport(season=season_label, paid=paid, pending=pending,
                             generated_on=today or date.today())


# ════════════════════════════════════════════════════════════════════
#  AGENCY EXPIRY REPORT
# ════════════════════════════════════════════════════════════════════

URGENT_MONTHS  = 3
WARNING_MONTHS = 6


@dataclass
class ExpiryLine:
    player_id:       str
    name:            str
    club:            str
    category:        str
    agency_end_date: date
    status:          str      # "urgent" | "warning"


@dataclass
class AgencyExpiryReport:
    lines: List[ExpiryLine]

    @property
    def urgent_count(self) -> int:
        return sum(1 for l in self.lines if l.status == "urgent")

    @property
    def warning_count(self) -> int:
        return sum(1 for l in self.lines if l.status == "warning")

    def to_dict(self) -> Dict:
        return {
            "urgent_count":  self.urgent_count,
            "warning_count": self.warning_count,
            "lines": [
                {
                    "player_id":       l.player_id,
                    "name":            l.name,
                    "club":            l.club,
                    "category":        l.category,
                    "agency_end_date": l.agency_end_date.isoformat(),
                    "status":          l.status,
                }
                for l in self.lines
            ],
        }


def expiry_status(end: date, today: date) -> str:
    if end <= add_months(today, URGENT_MONTHS):
        return "urgent"
    if end <= add_months(today, WARNING_MONTHS):
        return "warning"
    return "safe"


def agency_expiry_report(players: Iterable[PlayerRecord], today: Optional[date] = None) -> AgencyExpiryReport:
    """Already-expired agreements count as urgent; safe ones are left out."""
    today = today or date.today()
    lines = []
    for p in players:
        end = p.agency.agency_end_date
        if p.is_scouting or end is None:
            continue
        status = expiry_status(end, today)
        if status == "safe":
            continue
        lines.append(ExpiryLine(
            player_id=p.id, name=p.name or p.full_name, club=p.club,
            category=p.category.value, agency_end_date=end, status=status,
        ))
    lines.sort(key=lambda l: l.agency_end_date)
    return AgencyExpiryReport(lines=lines)


# ════════════════════════════════════════════════════════════════════
#  DOSSIERS
# ════════════════════════════════════════════════════════════════════

@dataclass
class DossierPage:
    category: str
    items:    List[PlayerRecord]

    def to_dict(self) -> Dict:
        return {
            "category": self.category,
            "items": [
                {
                    "player_id":      p.id,
                    "name":           p.name or p.full_name,
                    "club":           p.club,
                    "league":         p.league,
                    "position":       p.position,
                    "nationality":    p.nationality,
                    "age":            p.age(),
                    "contract_end":   p.contract.end_date,
                    "preferred_foot": p.preferred_foot,
                }
                for p in self.items
            ],
        }


@dataclass
class Dossier:
    season: str
    pages:  List[DossierPage]
    positions: List[str]

    def to_dict(self) -> Dict:
        return {
            "season":     self.season,
            "page_count": len(self.pages),
            "positions":  self.positions,
            "pages":      [p.to_dict() for p in self.pages],
        }


def _page_size() -> int:
    return int(getattr(settings, "AGENCY_DOSSIER_PAGE_SIZE", 10))


def _paginate(players: List[PlayerRecord], keep, category: str, position: str) -> List[DossierPage]:
    size  = _page_size()
    pages = []
    cats  = DOSSIER_CATEGORY_ORDER if category == ALL_FILTER else [
        c for c in DOSSIER_CATEGORY_ORDER if c == category
    ]
    for cat in cats:
        members = [
            p for p in players
            if p.category == cat and keep(p) and (position == ALL_FILTER or p.position == position)
        ]
        for start in range(0, len(members), size):
            pages.append(DossierPage(category=cat.value, items=members[start:start + size]))
    if not pages:
        pages.append(DossierPage(category=EMPTY_DOSSIER_TITLE, items=[]))
    return pages


def _positions(players: Iterable[PlayerRecord], category: str) -> List[str]:
    return sorted({p.position for p in players
                   if p.position and (category == ALL_FILTER or p.category == category)})


def portfolio_dossier(players: Iterable[PlayerRecord], today: Optional[date] = None,
                      category: str = ALL_FILTER, position: str = ALL_FILTER) -> Dossier:
    """Signed players whose club contract ends in the running season's end year."""
    players = list(players)
    season  = Season.current(today)
    pages = _paginate(
        players,
        keep=lambda p: not p.is_scouting and p.contract.end_year == season.end_year,
        category=category,
        position=position,
    )
    return Dossier(season=season.label, pages=pages, positions=_positions(players, category))


def scouting_dossier(players: Iterable[PlayerRecord], today: Optional[date] = None,
                     category: str = ALL_FILTER, position: str = ALL_FILTER) -> Dossier:
    players  = [p for p in players if p.is_scouting]
    season   = Season.current(today)
    pages    = _paginate(players, keep=lambda p: True, category=category, position=position)
    return Dossier(season=season.label, pages=pages, positions=_positions(players, category))
