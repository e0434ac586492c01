"""
management/commands/check_alerts.py
─────────────────────────────────────────────────────────────────────
Run the daily alert sweep by hand (payments, optional clauses, birthdays)
Usage:
    python manage.py check_alerts
    python manage.py check_alerts --date 2026-02-02 --dry-run
"""
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from agency.services.alert_service import collect_daily_alerts, dispatch_alerts
from agency.services.player_store import get_player_repository
from agency.services.season import parse_date


class Command(BaseCommand):
    help = "Comprueba avisos diarios de cobros, cláusulas y cumpleaños"

    def add_arguments(self, parser):
        parser.add_argument("--date", type=str, default="",
                            help="Fecha de referencia (YYYY-MM-DD o DD/MM/YYYY)")
        parser.add_argument("--dry-run", action="store_true", default=False,
                            help="Lista los avisos sin crear notificaciones")

    def handle(self, *args, **options):
        today = None
        if options["date"]:
            today = parse_date(options["date"])
            if today is None:
                raise CommandError(f"Fecha no válida: {options['date']}")

        players = get_player_repository().list()
        alerts  = collect_daily_alerts(players, today)

        self.stdout.write(f"\n  Jugadores revisados: {len(players)}")
        self.stdout.write(f"  Avisos detectados  : {len(alerts)}\n")
        for alert in alerts:
            self.stdout.write(f"  [{alert.category}] {alert.title}: {alert.body}")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("\n  [DRY RUN] No se han creado notificaciones."))
            return

        created = dispatch_alerts(alerts)
        self.stdout.write(self.style.SUCCESS(f"\n  Notificaciones creadas: {created}"))
