"""
views/import_views.py
─────────────────────────────────────────────────────────────────────
Bulk spreadsheet import of players (admin / director only)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from django.core.files.storage import default_storage
from django.http import JsonResponse
from django.utils import timezone
from django.views import View

from ..exceptions import AgencyError
from ..mixins import JsonErrorMixin, RoleRequiredMixin
from ..services.excel_import_service import ExcelImportService
from ..services.player_store import get_player_repository
from ..services.roster import Category
from ..tasks import IMPORT_UPLOAD_DIR

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".xlsx", ".xls"}
MAX_UPLOAD_MB      = 50


class PlayerImportView(JsonErrorMixin, RoleRequiredMixin, View):
    """
    POST multipart:
        excel_file   the workbook
        category     Fútbol | F. Sala | Femenino | Entrenadores (default Fútbol)
        sheet_names  optional, comma separated
        dry_run      "1" → parse only
    → ImportResult as JSON
    """
    allowed_roles     = ["is_admin", "is_director"]
    http_method_names = ["post"]

    def post(self, request):
        uploaded = request.FILES.get("excel_file")

        # ── Validation ────────────────────────────────────────────
        if not uploaded:
            raise AgencyError("No se ha subido ningún archivo.")

        suffix = Path(uploaded.name).suffix.lower()
        if suffix not in ALLOWED_EXTENSIONS:
            raise AgencyError(f"Formato no soportado. Solo: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

        size_mb = uploaded.size / (1024 * 1024)
        if size_mb > MAX_UPLOAD_MB:
            raise AgencyError(f"El archivo ({size_mb:.1f} MB) supera el límite de {MAX_UPLOAD_MB} MB.")

        category = request.POST.get("category") or Category.FOOTBALL
        if category not in Category.values:
            raise AgencyError(f"Deporte no válido: {category}")

        # ── Save temporarily ──────────────────────────────────────
        tmp_name  = f"{IMPORT_UPLOAD_DIR}/tmp_{timezone.now().strftime('%Y%m%d_%H%M%S')}_{uploaded.name}"
        tmp_path  = default_storage.save(tmp_name, uploaded)
        full_path = default_storage.path(tmp_path)

        sheet_names_raw = request.POST.get("sheet_names", "").strip()
        sheet_names = [s.strip() for s in sheet_names_raw.split(",") if s.strip()] or None
        dry_run = request.POST.get("dry_run") == "1"

        # ── Run import ────────────────────────────────────────────
        try:
            svc    = ExcelImportService(filepath=full_path, sheet_names=sheet_names, category=category)
            result = svc.run(store=get_player_repository(), dry_run=dry_run)
        finally:
            _cleanup(full_path)

        logger.info(
            "Import by %s of %s (dry_run=%s): created=%d updated=%d errors=%d",
            request.user, uploaded.name, dry_run, result.created, result.updated, result.errors,
        )
        return JsonResponse({"filename": uploaded.name, "dry_run": dry_run, **result.to_dict()})


def _cleanup(path: str):
    if os.path.exists(path):
        os.remove(path)
