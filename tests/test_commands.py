"""
tests/test_commands.py
─────────────────────────────────────────────────────────────────────
Management commands and Celery tasks (eager).
"""
from __future__ import annotations

import datetime
import os
import time
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from openpyxl import Workbook

from agency.models import CustomUser, Notification, Player
from agency.services.player_store import get_player_repository
from agency.tasks import (
    check_daily_alerts_task,
    cleanup_temp_imports_task,
    import_players_task,
)

from .conftest import make_player, make_year

pytestmark = pytest.mark.django_db


@pytest.fixture
def roster_file(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.append(["NOMBRE", "PRIMER APELLIDO", "SEGUNDO APELLIDO", "EQUIPO"])
    ws.append(["Sergio", "Lozano", "Martínez", "FC Barcelona"])
    ws.append(["Dani", "Saldise", "", "Movistar Inter"])
    path = tmp_path / "jugadores.xlsx"
    wb.save(path)
    return str(path)


def _run(*args) -> str:
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


# ════════════════════════════════════════════════════════════════════
#  import_players
# ════════════════════════════════════════════════════════════════════

class TestImportPlayersCommand:

    def test_live_import(self, roster_file):
        output = _run("import_players", roster_file, "--category", "F. Sala")
        assert "[LIVE]" in output
        assert "Creados       : 2" in output
        assert set(Player.objects.values_list("category", flat=True)) == {"F. Sala"}

    def test_dry_run(self, roster_file):
        output = _run("import_players", roster_file, "--dry-run")
        assert "[DRY RUN]" in output
        assert "Omitidos      : 2" in output
        assert Player.objects.count() == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError, match="Archivo no encontrado"):
            call_command("import_players", str(tmp_path / "nada.xlsx"))

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "jugadores.csv"
        path.write_text("NOMBRE\n")
        with pytest.raises(CommandError, match="Formato no válido"):
            call_command("import_players", str(path))


# ════════════════════════════════════════════════════════════════════
#  commissions_report
# ════════════════════════════════════════════════════════════════════

class TestCommissionsReportCommand:

    def test_totals_and_xlsx(self, scenario_player, tmp_path):
        get_player_repository().create(scenario_player)
        target = tmp_path / "comisiones.xlsx"

        output = _run("commissions_report", "--season", "2025/2026", "--xlsx", str(target))
        assert "Temporada 2025/2026" in output
        assert "Total Cobrado   : 10.000,00 €" in output
        assert "Total Pendiente : 500,00 €" in output
        assert target.exists()


# ════════════════════════════════════════════════════════════════════
#  check_alerts
# ════════════════════════════════════════════════════════════════════

class TestCheckAlertsCommand:

    @pytest.fixture
    def due_player(self):
        return get_player_repository().create(make_player(
            contract_years=[make_year(club_payment={"alert_date": "2025-09-04"})],
        ))

    def test_dry_run_lists_alerts(self, due_player):
        CustomUser.objects.create_user("caja", "x", is_treasurer=True)
        output = _run("check_alerts", "--date", "2025-09-01", "--dry-run")
        assert "💰 Cobro Club Próximo" in output
        assert Notification.objects.count() == 0

    def test_creates_notifications(self, due_player):
        CustomUser.objects.create_user("caja", "x", is_treasurer=True)
        output = _run("check_alerts", "--date", "01/09/2025")
        assert "Notificaciones creadas: 1" in output
        assert Notification.objects.get().type == "payment_due"

    def test_bad_date(self):
        with pytest.raises(CommandError):
            call_command("check_alerts", "--date", "mañana")


# ════════════════════════════════════════════════════════════════════
#  Celery tasks
# ════════════════════════════════════════════════════════════════════

class TestTasks:

    def test_daily_alerts_task(self):
        today = datetime.date.today()
        CustomUser.objects.create_user("caja", "x", is_treasurer=True)
        get_player_repository().create(make_player(
            contract_years=[make_year(club_payment={"alert_date": today.isoformat()})],
        ))
        result = check_daily_alerts_task.apply().get()
        assert result == {"players": 1, "alerts": 1, "notifications": 1}

    def test_import_task(self, roster_file):
        result = import_players_task.apply(args=[roster_file], kwargs={"category": "Femenino"}).get()
        assert result["created"] == 2
        assert Player.objects.filter(category="Femenino").count() == 2

    def test_cleanup_removes_only_stale_uploads(self, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        folder = tmp_path / "imports"
        folder.mkdir()
        stale, fresh = folder / "tmp_old.xlsx", folder / "tmp_new.xlsx"
        stale.write_bytes(b"x")
        fresh.write_bytes(b"x")
        old = time.time() - 48 * 3600
        os.utime(stale, (old, old))

        assert cleanup_temp_imports_task.apply().get() == {"deleted": 1}
        assert not stale.exists()
        assert fresh.exists()

    def test_cleanup_without_folder(self, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        assert cleanup_temp_imports_task.apply().get() == {"deleted": 0}
