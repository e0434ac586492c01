"""
context_processors.py
─────────────────────────────────────────────────────────────────────
Context processors: inject global data into every template.
Add to TEMPLATES[0]['OPTIONS']['context_processors'] in settings:
    "agency.context_processors.global_context"
"""
from __future__ import annotations
from agency.models import Notification
from agency.services.season import current_season


def global_context(request):
    """
    Data every page needs:
    - unread notifications
    - the current season label (admin header)
    """
    ctx = {
        "unread_notif_count":   0,
        "recent_notifications": [],
        "current_season":       current_season(),
    }

    if not request.user.is_authenticated:
        return ctx

    notifications = list(
        Notification.objects
        .filter(recipient=request.user)
        .order_by("-created_at")[:8]
    )
    ctx["recent_notifications"] = notifications
    ctx["unread_notif_count"]   = Notification.objects.filter(
        recipient=request.user, is_read=False
    ).count()

    return ctx
