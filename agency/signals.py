"""
signals.py
─────────────────────────────────────────────────────────────────────
Player change signals: contract-signed notification and store
subscriber refresh.

Registered in apps.py:
    class AgencyConfig(AppConfig):
        def ready(self):
            import agency.signals  # noqa: F401
"""
from __future__ import annotations

import logging

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Player
from .services.alert_service import contract_signed_alert, dispatch_alerts
from .services.player_store import broadcast_change

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────
#  Signal 1: scouting prospect signed → notify finance roles
# ────────────────────────────────────────────────────────────────────

@receiver(pre_save, sender=Player)
def _cache_old_scouting_flag(sender, instance, **kwargs):
    """Keeps the stored is_scouting value around for the post_save check."""
    instance._was_scouting = (
        Player.objects.filter(pk=instance.pk).values_list("is_scouting", flat=True).first()
        if instance.pk else None
    )


@receiver(post_save, sender=Player)
def on_player_signed(sender, instance: Player, created: bool, **kwargs):
    if created:
        return
    if getattr(instance, "_was_scouting", None) is True and not instance.is_scouting:
        logger.info("Contract signed: %s", instance)
        dispatch_alerts([contract_signed_alert(instance.to_record())])


# ────────────────────────────────────────────────────────────────────
#  Signal 2: any roster change → refresh store subscribers
# ────────────────────────────────────────────────────────────────────

@receiver(post_save, sender=Player)
@receiver(post_delete, sender=Player)
def on_player_changed(sender, instance: Player, **kwargs):
    broadcast_change()
