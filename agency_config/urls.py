"""
agency_config/urls.py
─────────────────────────────────────────────────────────────────────
Master URL Router: every namespace is included here
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse
from django.views.generic import RedirectView


def health_check(request):
    """Container health-check endpoint."""
    return JsonResponse({"status": "ok"})


urlpatterns = [
    # ── Admin ─────────────────────────────────────────────────────────
    path("admin/", admin.site.urls),

    # ── Health Check ──────────────────────────────────────────────────
    path("health/", health_check, name="health"),

    # ── Administración (facturación) ──────────────────────────────────
    path("administration/", include("agency.urls.billing_urls", namespace="billing")),

    # ── Informes ──────────────────────────────────────────────────────
    path("reports/", include("agency.urls.report_urls", namespace="reports")),

    # ── Jugadores ─────────────────────────────────────────────────────
    path("players/", include("agency.urls.player_urls", namespace="players")),

    # ── Avisos ────────────────────────────────────────────────────────
    path("notifications/", include("agency.urls.notification_urls", namespace="notifications")),

    path("", RedirectView.as_view(url="/administration/", permanent=False)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
