"""
views/notification_views.py
─────────────────────────────────────────────────────────────────────
The current user's notifications.
"""
from __future__ import annotations

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from ..models import Notification


class NotificationListView(LoginRequiredMixin, View):
    http_method_names = ["get"]

    def get(self, request):
        qs = Notification.objects.filter(recipient=request.user)
        if request.GET.get("unread") == "1":
            qs = qs.filter(is_read=False)
        return JsonResponse({
            "notifications": [
                {
                    "id":         n.pk,
                    "type":       n.type,
                    "title":      n.title,
                    "message":    n.message,
                    "is_read":    n.is_read,
                    "player_id":  str(n.related_player_id) if n.related_player_id else None,
                    "created_at": n.created_at.isoformat(),
                }
                for n in qs[:50]
            ],
        })


class NotificationReadView(LoginRequiredMixin, View):
    http_method_names = ["post"]

    def post(self, request, pk):
        notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
        notification.mark_as_read()
        return JsonResponse({"id": notification.pk, "is_read": True})
