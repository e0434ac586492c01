"""
agency/tasks.py
─────────────────────────────────────────────────────────────────────
Celery background tasks

Beat schedule (agency_config/celery.py):
    'daily-alerts':         agency.tasks.check_daily_alerts_task      10:00 Europe/Madrid
    'cleanup-temp-imports': agency.tasks.cleanup_temp_imports_task    02:00
"""

from __future__ import annotations
import logging
import time
from pathlib import Path

from celery import shared_task

logger = logging.getLogger(__name__)

IMPORT_UPLOAD_DIR = "imports"
TEMP_IMPORT_MAX_AGE_HOURS = 24


# ─────────────────────────────────────────────────────────────────────
# 1. Daily alert sweep: payments, optional clauses, birthdays
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=3, default_retry_delay=300)
def check_daily_alerts_task(self):
    from .services.alert_service import collect_daily_alerts, dispatch_alerts
    from .services.player_store import get_player_repository
    try:
        players = get_player_repository().list()
        alerts  = collect_daily_alerts(players)
        created = dispatch_alerts(alerts)
        logger.info("[alerts] players:%d alerts:%d notifications:%d",
                    len(players), len(alerts), created)
        return {"players": len(players), "alerts": len(alerts), "notifications": created}
    except Exception as exc:
        logger.exception("Daily alert sweep failed: %s", exc)
        raise self.retry(exc=exc)


# ─────────────────────────────────────────────────────────────────────
# 2. Background spreadsheet import (uploads larger than the sync limit)
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=1)
def import_players_task(self, filepath: str, category: str = "Fútbol", dry_run: bool = False):
    from .exceptions import AgencyError
    from .services.excel_import_service import run_import
    try:
        result = run_import(filepath, dry_run=dry_run, category=category)
    except AgencyError as exc:
        logger.error("Import of %s failed: %s", filepath, exc)
        raise
    except Exception as exc:
        logger.exception("Import of %s crashed: %s", filepath, exc)
        raise self.retry(exc=exc)
    logger.info("[import] %s created:%d updated:%d errors:%d",
                filepath, result.created, result.updated, result.errors)
    return result.to_dict()


# ─────────────────────────────────────────────────────────────────────
# 3. Remove stale uploaded spreadsheets
# ─────────────────────────────────────────────────────────────────────
@shared_task
def cleanup_temp_imports_task(max_age_hours: int = TEMP_IMPORT_MAX_AGE_HOURS):
    from django.conf import settings

    folder = Path(settings.MEDIA_ROOT) / IMPORT_UPLOAD_DIR
    if not folder.exists():
        return {"deleted": 0}

    cutoff  = time.time() - max_age_hours * 3600
    deleted = 0
    for path in folder.glob("*.xls*"):
        if path.stat().st_mtime < cutoff:
            path.unlink()
            deleted += 1
    logger.info("[cleanup] %d temporary imports removed", deleted)
    return {"deleted": deleted}
