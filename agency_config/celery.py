"""
agency_config/celery.py
─────────────────────────────────────────────────────────────────────
Celery application configuration + beat schedule
"""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "agency_config.settings.development")

app = Celery("agency")

# Read config from Django settings (CELERY_* keys)
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks in all INSTALLED_APPS
app.autodiscover_tasks()


# ── Periodic Task Schedule ────────────────────────────────────────────
app.conf.beat_schedule = {
    # Payment, optional-clause and birthday alerts, every day at 10:00
    "check-daily-alerts": {
        "task":     "agency.tasks.check_daily_alerts_task",
        "schedule": crontab(hour=10, minute=0),
    },
    # Temporary spreadsheet uploads, every night
    "cleanup-temp-imports-nightly": {
        "task":     "agency.tasks.cleanup_temp_imports_task",
        "schedule": crontab(hour=2, minute=0),
    },
}

app.conf.timezone = "Europe/Madrid"
