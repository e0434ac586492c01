"""
tests/test_season.py
─────────────────────────────────────────────────────────────────────
Season resolution (July → June) and calendar helpers.
"""
from __future__ import annotations

import datetime

import pytest

from agency.services.season import (
    Season,
    add_months,
    current_season,
    current_season_label,
    days_until,
    format_date_es,
    normalize_season_label,
    parse_date,
    resolve_active_entry,
    target_start_year,
)

from .conftest import make_year


# ════════════════════════════════════════════════════════════════════
#  Season resolver
# ════════════════════════════════════════════════════════════════════

class TestTargetStartYear:

    @pytest.mark.parametrize("today,expected", [
        (datetime.date(2025, 9, 1), 2025),
        (datetime.date(2025, 7, 1), 2025),
        (datetime.date(2025, 6, 30), 2024),
        (datetime.date(2025, 3, 1), 2024),
        (datetime.date(2026, 1, 1), 2025),
    ])
    def test_july_rollover(self, today, expected):
        assert target_start_year(today) == expected


class TestNormalizeLabel:

    @pytest.mark.parametrize("raw,expected", [
        ("2024/2025", "20242025"),
        ("2024-2025", "20242025"),
        (" 2024 / 2025 ", "20242025"),
        ("", ""),
        (None, ""),
    ])
    def test_strips_separators(self, raw, expected):
        assert normalize_season_label(raw) == expected


class TestResolveActiveEntry:

    def test_matching_season_selected(self):
        entries = [make_year(year="2025/2026"), make_year(year="2026/2027")]
        assert resolve_active_entry(entries, datetime.date(2025, 9, 1)) is entries[0]

    def test_second_entry_can_match(self):
        entries = [make_year(year="2023/2024"), make_year(year="2026/2027")]
        assert resolve_active_entry(entries, datetime.date(2026, 10, 1)) is entries[1]

    def test_no_match_falls_back_to_first(self):
        entries = [make_year(year="2025/2026")]
        assert resolve_active_entry(entries, datetime.date(2025, 3, 1)) is entries[0]

    def test_empty_list_returns_none(self):
        assert resolve_active_entry([], datetime.date(2025, 9, 1)) is None
        assert resolve_active_entry(None, datetime.date(2025, 9, 1)) is None

    def test_containment_matches_previous_season_label(self):
        # "20242025" contains "2025", so the earlier label wins when listed first
        entries = [make_year(year="2024/2025"), make_year(year="2025/2026")]
        assert resolve_active_entry(entries, datetime.date(2025, 9, 1)) is entries[0]

    def test_containment_matches_any_position_in_label(self):
        # "20242034" contains "2024" even though it is not a real season label
        entries = [make_year(year="2022/2023"), make_year(year="2024/2034")]
        assert resolve_active_entry(entries, datetime.date(2024, 9, 1)) is entries[1]


class TestCurrentSeason:

    def test_label_from_date(self):
        assert current_season_label(datetime.date(2025, 9, 1)) == "2025/2026"
        assert current_season_label(datetime.date(2025, 3, 1)) == "2024/2025"

    def test_override_wins(self):
        assert current_season_label(datetime.date(2025, 9, 1), " 2030/2031 ") == "2030/2031"

    def test_blank_override_ignored(self):
        assert current_season_label(datetime.date(2025, 9, 1), "  ") == "2025/2026"

    def test_settings_override(self, settings):
        settings.AGENCY_CURRENT_SEASON = "2022/2023"
        assert current_season(datetime.date(2025, 9, 1)) == "2022/2023"

    def test_season_label(self):
        season = Season.for_date(datetime.date(2026, 2, 1))
        assert season.label == "2025/2026"
        assert season.end_year == 2026
        assert str(season) == "2025/2026"

    def test_out_of_range_start_year(self):
        with pytest.raises(ValueError):
            Season(1200)


# ════════════════════════════════════════════════════════════════════
#  Calendar helpers
# ════════════════════════════════════════════════════════════════════

class TestParseDate:

    @pytest.mark.parametrize("raw,expected", [
        ("2025-06-30", datetime.date(2025, 6, 30)),
        ("2025-06-30 00:00:00", datetime.date(2025, 6, 30)),
        ("2025-06-30T10:00:00Z", datetime.date(2025, 6, 30)),
        ("30/06/2025", datetime.date(2025, 6, 30)),
        ("1/7/2025", datetime.date(2025, 7, 1)),
        (datetime.datetime(2025, 6, 30, 12, 0), datetime.date(2025, 6, 30)),
    ])
    def test_supported_formats(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "nan", "Enero 2026", "2026", "31/02/2025"])
    def test_unreadable_returns_none(self, raw):
        assert parse_date(raw) is None


class TestCalendarArithmetic:

    def test_days_until(self):
        today = datetime.date(2025, 9, 1)
        assert days_until(datetime.date(2025, 9, 16), today) == 15
        assert days_until(datetime.date(2025, 8, 25), today) == -7

    def test_add_months_clamps_day(self):
        assert add_months(datetime.date(2025, 11, 30), 3) == datetime.date(2026, 2, 28)
        assert add_months(datetime.date(2025, 1, 31), 1) == datetime.date(2025, 2, 28)
        assert add_months(datetime.date(2025, 10, 15), 6) == datetime.date(2026, 4, 15)


class TestFormatDateEs:

    def test_parseable_date(self):
        assert format_date_es("2025-10-01") == "01/10/2025"

    def test_free_text_kept(self):
        assert format_date_es("Enero 2026") == "Enero 2026"

    def test_empty_uses_fallback(self):
        assert format_date_es(None, "Sin fecha") == "Sin fecha"
        assert format_date_es("") == "-"
