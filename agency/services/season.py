"""
services/season.py
─────────────────────────────────────────────────────────────────────
Season and calendar helpers used across billing, reports and alerts.

Sports seasons run July → June: on 2025-09-01 the running season is
"2025/2026", on 2025-03-01 it is still "2024/2025".
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence, TypeVar

SEASON_START_MONTH = 7

_SEPARATORS = re.compile(r"[/\-\s]")
_DMY        = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO        = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")

T = TypeVar("T")


@dataclass(frozen=True)
class Season:
    """A July → June sports season identified by its starting calendar year."""

    start_year: int

    # ── Validation ──────────────────────────────────────────────────
    def __post_init__(self):
        if not (1900 <= self.start_year <= 2999):
            raise ValueError(f"Año de inicio de temporada fuera de rango: {self.start_year}")

    @property
    def end_year(self) -> int:
        return self.start_year + 1

    @property
    def label(self) -> str:
        return f"{self.start_year}/{self.end_year}"

    # ── Conversion ──────────────────────────────────────────────────
    @classmethod
    def for_date(cls, d: date) -> "Season":
        return cls(target_start_year(d))

    @classmethod
    def current(cls, today: Optional[date] = None) -> "Season":
        return cls.for_date(today or date.today())

    def __str__(self) -> str:
        return self.label


# ─── Season resolver ────────────────────────────────────────────────

def target_start_year(today: date) -> int:
    """Starting year of the season running on ``today`` (July rollover)."""
    return today.year if today.month >= SEASON_START_MONTH else today.year - 1


def normalize_season_label(label: Optional[str]) -> str:
    """"2024/2025" → "20242025"; strips slashes, dashes and whitespace."""
    return _SEPARATORS.sub("", label or "")


def find_season_entry(entries: Sequence[T], today: date) -> Optional[T]:
    """
    First entry whose normalised ``year`` contains the target start year,
    or None. Containment is a substring test, so "2024/2034" also matches 2024.
    """
    target = str(target_start_year(today))
    for entry in entries:
        if target in normalize_season_label(getattr(entry, "year", "")):
            return entry
    return None


def resolve_active_entry(entries: Optional[Sequence[T]], today: Optional[date] = None) -> Optional[T]:
    """
    Ledger entry considered active this season.

    Falls back to the first entry when nothing matches; callers must treat
    that as a weak fallback, not a real match. Empty list → None.
    """
    if not entries:
        return None
    match = find_season_entry(entries, today or date.today())
    return match if match is not None else entries[0]


def current_season_label(today: Optional[date] = None, override: Optional[str] = None) -> str:
    """
    Canonical current-season label used for the current/other split and the
    commissions report. A non-empty ``override`` (AGENCY_CURRENT_SEASON) wins.
    """
    if override and override.strip():
        return override.strip()
    return Season.current(today).label


def current_season(today: Optional[date] = None) -> str:
    """current_season_label() with the override read from Django settings."""
    from django.conf import settings

    return current_season_label(today, getattr(settings, "AGENCY_CURRENT_SEASON", ""))


# ─── Calendar helpers ───────────────────────────────────────────────

def parse_date(raw) -> Optional[date]:
    """
    Lenient calendar-date parser; None for anything it cannot read.

    Supported input formats:
        date / datetime / pandas Timestamp
        "2025-06-30", "2025-06-30 00:00:00", "2025-06-30T10:00:00Z"
        "30/06/2025"
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text or text.lower() in ("nan", "nat", "none"):
        return None

    try:
        m = _ISO.match(text)
        if m:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        m = _DMY.match(text)
        if m:
            return date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
    except ValueError:
        return None
    return None


def days_until(target: date, today: Optional[date] = None) -> int:
    """Whole days from ``today`` to ``target`` (negative = already past)."""
    return (target - (today or date.today())).days


def add_months(d: date, months: int) -> date:
    """Calendar month arithmetic, clamping the day to the target month's end."""
    month_index = d.month - 1 + months
    year  = d.year + month_index // 12
    month = month_index % 12 + 1
    day   = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_date_es(value, fallback: str = "-") -> str:
    """dd/mm/yyyy for parseable dates, the raw text otherwise, fallback when empty."""
    if value is None or value == "":
        return fallback
    d = parse_date(value)
    if d is None:
        return str(value).strip() or fallback
    return d.strftime("%d/%m/%Y")
