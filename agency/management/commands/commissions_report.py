"""
management/commands/commissions_report.py
─────────────────────────────────────────────────────────────────────
Print (or export) the collected / pending commissions of one season
Usage:
    python manage.py commissions_report
    python manage.py commissions_report --season 2024/2025
    python manage.py commissions_report --xlsx /tmp/comisiones.xlsx
"""
from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand

from agency.services.currency import format_currency
from agency.services.excel_export_service import export_commissions
from agency.services.player_store import get_player_repository
from agency.services.report_service import commissions_report, format_totals
from agency.services.season import current_season


class Command(BaseCommand):
    help = "Informe de comisiones cobradas y pendientes de una temporada"

    def add_arguments(self, parser):
        parser.add_argument("--season", type=str, default="",
                            help="Temporada exacta (por defecto: la actual)")
        parser.add_argument("--xlsx", type=str, default="",
                            help="Guarda también el informe en este archivo .xlsx")

    def handle(self, *args, **options):
        season = options["season"] or current_season()
        report = commissions_report(get_player_repository().list(is_scouting=False), season)

        self.stdout.write("═" * 72)
        self.stdout.write(self.style.HTTP_INFO(f"  Comisiones  ·  Temporada {season}"))
        self.stdout.write("═" * 72)

        for title, lines, style in (
            ("1. COMISIONES COBRADAS", report.paid, self.style.SUCCESS),
            ("2. COMISIONES PENDIENTES", report.pending, self.style.WARNING),
        ):
            self.stdout.write(style(f"\n  {title} ({len(lines)})"))
            for line in lines:
                self.stdout.write(
                    f"  {line.name} {line.surname:<22} {line.club:<20} "
                    f"{line.payer:<8} {line.date:<12} {format_currency(line.amount, line.currency):>16}"
                )

        self.stdout.write("\n" + "═" * 72)
        self.stdout.write(self.style.SUCCESS(f"  Total Cobrado   : {format_totals(report.paid_totals)}"))
        self.stdout.write(self.style.WARNING(f"  Total Pendiente : {format_totals(report.pending_totals)}"))
        self.stdout.write("═" * 72)

        if options["xlsx"]:
            path = Path(options["xlsx"])
            path.write_bytes(export_commissions(report))
            self.stdout.write(self.style.SUCCESS(f"\n  Guardado en {path}"))
