"""
management/commands/import_players.py
─────────────────────────────────────────────────────────────────────
Import players from a roster workbook on the command line
Usage:
    python manage.py import_players /path/to/jugadores.xlsx
    python manage.py import_players /path/to/jugadores.xlsx --dry-run
    python manage.py import_players /path/to/jugadores.xlsx --category "F. Sala" --sheets "Sala,Juvenil"
"""
from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from agency.services.excel_import_service import ExcelImportService
from agency.services.player_store import get_player_repository
from agency.services.roster import Category


class Command(BaseCommand):
    help = "Importa jugadores desde un archivo Excel"

    def add_arguments(self, parser):
        parser.add_argument(
            "filepath",
            type=str,
            help="Ruta del archivo Excel (.xlsx/.xls)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            default=False,
            help="Analiza el archivo sin guardar nada",
        )
        parser.add_argument(
            "--sheets",
            type=str,
            default="",
            help='Hojas separadas por comas (por defecto: la primera)  ej: "Sala,Juvenil"',
        )
        parser.add_argument(
            "--category",
            type=str,
            default=Category.FOOTBALL,
            choices=Category.values,
            help="Deporte asignado a los jugadores importados",
        )
        parser.add_argument(
            "--verbose-errors",
            action="store_true",
            default=False,
            help="Muestra todas las filas con error",
        )

    def handle(self, *args, **options):
        filepath = Path(options["filepath"])

        if not filepath.exists():
            raise CommandError(f"Archivo no encontrado: {filepath}")
        if filepath.suffix.lower() not in (".xlsx", ".xls"):
            raise CommandError(f"Formato no válido: {filepath.suffix}")

        sheet_names_raw = options.get("sheets", "").strip()
        sheet_names = [s.strip() for s in sheet_names_raw.split(",") if s.strip()] or None

        dry_run = options["dry_run"]

        mode = self.style.WARNING("[DRY RUN]") if dry_run else self.style.SUCCESS("[LIVE]")
        self.stdout.write(f"\n{mode} Importando: {filepath}  ({options['category']})")
        if sheet_names:
            self.stdout.write(f"  Hojas: {', '.join(sheet_names)}")
        self.stdout.write("")

        svc    = ExcelImportService(filepath=str(filepath), sheet_names=sheet_names,
                                    category=options["category"])
        result = svc.run(store=get_player_repository(), dry_run=dry_run)

        # ── Summary ──────────────────────────────────────────────
        self.stdout.write("═" * 55)
        self.stdout.write(self.style.HTTP_INFO("  Resultado de la importación"))
        self.stdout.write("═" * 55)
        self.stdout.write(f"  Filas totales : {result.total_rows}")
        self.stdout.write(self.style.SUCCESS(f"  Creados       : {result.created}"))
        self.stdout.write(self.style.HTTP_REDIRECT(f"  Actualizados  : {result.updated}"))
        self.stdout.write(f"  Omitidos      : {result.skipped}")
        self.stdout.write(self.style.ERROR(f"  Errores       : {result.errors}"))
        self.stdout.write(f"  Éxito         : {result.success_rate}%")
        self.stdout.write("═" * 55)

        # ── Warnings ─────────────────────────────────────────────
        if result.warnings:
            self.stdout.write(self.style.WARNING("\n  Avisos:"))
            for w in result.warnings:
                self.stdout.write(f"  ⚠  {w}")

        # ── Errors ───────────────────────────────────────────────
        error_rows = [r for r in result.rows if r.action == "error"]
        if error_rows:
            self.stdout.write(self.style.ERROR(f"\n  Filas con error ({len(error_rows)}):"))
            show = error_rows if options["verbose_errors"] else error_rows[:10]
            for rr in show:
                self.stdout.write(
                    f"  ✕  hoja={rr.sheet}  fila={rr.row_num}  "
                    f"nombre={rr.name}  mensaje: {rr.message}"
                )
            if not options["verbose_errors"] and len(error_rows) > 10:
                self.stdout.write(
                    f"  ... y {len(error_rows) - 10} errores más "
                    f"(usa --verbose-errors para verlos todos)"
                )

        self.stdout.write("")
        if result.total_rows and result.errors == result.total_rows:
            raise CommandError("Todas las filas han fallado.")
