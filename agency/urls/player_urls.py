"""
agency/urls/player_urls.py
namespace = "players"
"""
from django.urls import path

from ..views.import_views import PlayerImportView
from ..views.player_views import (
    PlayerBulkDeleteView,
    PlayerDetailView,
    PlayerExportView,
    PlayerListView,
    PlayerSignView,
)

app_name = "players"

urlpatterns = [
    # ── Roster ──────────────────────────────────────────────────────
    path("",                      PlayerListView.as_view(),       name="list"),
    path("bulk-delete/",          PlayerBulkDeleteView.as_view(), name="bulk-delete"),
    path("export/",               PlayerExportView.as_view(),     name="export"),
    path("import/",               PlayerImportView.as_view(),     name="import"),
    path("<str:player_id>/",      PlayerDetailView.as_view(),     name="detail"),
    path("<str:player_id>/sign/", PlayerSignView.as_view(),       name="sign"),
]
