"""
services/excel_export_service.py
─────────────────────────────────────────────────────────────────────
.xlsx exports built with openpyxl:

    export_roster()       one row per player, same headers the importer reads
    export_commissions()  two sheets (Cobradas / Pendientes) + totals

Both return the workbook as bytes so views can stream it directly.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Sequence

from django.conf import settings
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from .excel_import_service import HEADER_MAP
from .report_service import (
    COMMISSIONS_HEADERS,
    PAID_HEAD_COLOR,
    PENDING_HEAD_COLOR,
    CommissionsReport,
)
from .roster import PlayerRecord

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ROSTER_HEADERS = list(HEADER_MAP) + ["DEPORTE", "COMISIÓN %", "PAGADOR"]


def _rgb_hex(rgb: Sequence[int]) -> str:
    return "FF" + "".join(f"{c:02X}" for c in rgb)


def _write_header(ws, headers: List[str], rgb: Sequence[int]):
    fill = PatternFill(start_color=_rgb_hex(rgb), end_color=_rgb_hex(rgb), fill_type="solid")
    ws.append(headers)
    for cell in ws[1]:
        cell.fill      = fill
        cell.font      = Font(bold=True, color="FFFFFFFF")
        cell.alignment = Alignment(horizontal="center")
    ws.freeze_panes = "A2"


def _autosize(ws):
    for column in ws.columns:
        width = max((len(str(c.value)) for c in column if c.value is not None), default=8)
        ws.column_dimensions[column[0].column_letter].width = min(width + 2, 40)


def _to_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def roster_row(p: PlayerRecord) -> list:
    return [
        p.first_name, p.last_name1, p.last_name2, p.league, p.club, p.nationality,
        p.position, p.preferred_foot,
        p.birth_date.isoformat() if p.birth_date else "",
        p.sports_brand, p.sports_brand_end_date, p.monitoring_agent,
        p.contract.end_date, p.contract.clause, p.contract.optional,
        p.contract.optional_notice_date, p.contract.conditions,
        p.agency.contract_date.isoformat() if p.agency.contract_date else "",
        p.agency.agency_end_date.isoformat() if p.agency.agency_end_date else "",
        p.category.value, float(p.agency.commission_pct), p.agency.payer_type.value,
    ]


def export_roster(players: Iterable[PlayerRecord]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Jugadores"
    _write_header(ws, ROSTER_HEADERS, PAID_HEAD_COLOR)
    count = 0
    for p in players:
        ws.append(roster_row(p))
        count += 1
    _autosize(ws)
    logger.info("Roster export: %d players", count)
    return _to_bytes(wb)


def export_commissions(report: CommissionsReport) -> bytes:
    wb = Workbook()
    sheets = [
        ("Cobradas",   report.paid,    PAID_HEAD_COLOR,    "Total Cobrado",   report.paid_totals),
        ("Pendientes", report.pending, PENDING_HEAD_COLOR, "Total Pendiente", report.pending_totals),
    ]
    for index, (title, lines, rgb, total_label, totals) in enumerate(sheets):
        ws = wb.active if index == 0 else wb.create_sheet()
        ws.title = title
        _write_header(ws, COMMISSIONS_HEADERS, rgb)
        for line in lines:
            ws.append([
                line.name, line.surname, line.category, line.club, line.date,
                line.payer, float(line.amount), line.agent,
            ])
        ws.append([])
        for currency, total in (totals or {settings.AGENCY_DEFAULT_CURRENCY: 0}).items():
            ws.append([total_label, "", "", "", "", currency, float(total), ""])
            ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
        for row in ws.iter_rows(min_row=2, min_col=7, max_col=7):
            for cell in row:
                cell.number_format = "#,##0.00"
        _autosize(ws)
    return _to_bytes(wb)
