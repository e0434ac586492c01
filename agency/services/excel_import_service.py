"""
services/excel_import_service.py
═══════════════════════════════════════════════════════════════════════
Spreadsheet Player Import Service

Reads the agency's roster workbook (first sheet unless sheet names are
given) and creates or updates signed players through the Player Record
Store. Headers are matched by name, case-insensitively:

  NOMBRE              first_name
  PRIMER APELLIDO     last_name1
  SEGUNDO APELLIDO    last_name2
  LIGA                league               (default "España")
  EQUIPO              club
  NACIONALIDAD        nationality          (default "España")
  POSICIÓN            position             (default "Ala")
  PIERNA HÁBIL        preferred_foot       (default "Derecha")
  FECHA NAC.          birth_date
  MARCA               sports_brand         (default "Joma")
  FIN MARCA           sports_brand_end_date
  SEGUIMIENTO         monitoring_agent     (default "Jaume")
  FECHA FIN CONTRATO  contract.end_date
  CLAUSULA            contract.clause      (default "0")
  OPCIONAL            contract.optional    (default "No")
  FECHA AVISO         contract.optional_notice_date
  CONDICIONES         contract.conditions
  FECHA CONTRATO      agency.contract_date
  FECHA FIN           agency.agency_end_date

New players get a 10 % agency commission paid by the club. An existing
signed player with the same first name and both surnames is updated
instead of duplicated, from the non-blank cells only; its agency terms
and category are kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import pandas as pd

from ..exceptions import AgencyError
from .roster import AgencyLink, Category, ContractTerms, PayerType, PlayerRecord
from .season import parse_date

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  CONSTANTS
# ══════════════════════════════════════════════════════════════════════

# header → (field key, default)
HEADER_MAP: Dict[str, tuple] = {
    "NOMBRE":             ("first_name",            ""),
    "PRIMER APELLIDO":    ("last_name1",            ""),
    "SEGUNDO APELLIDO":   ("last_name2",            ""),
    "LIGA":               ("league",                "España"),
    "EQUIPO":             ("club",                  ""),
    "NACIONALIDAD":       ("nationality",           "España"),
    "POSICIÓN":           ("position",              "Ala"),
    "PIERNA HÁBIL":       ("preferred_foot",        "Derecha"),
    "FECHA NAC.":         ("birth_date",            ""),
    "MARCA":              ("sports_brand",          "Joma"),
    "FIN MARCA":          ("sports_brand_end_date", ""),
    "SEGUIMIENTO":        ("monitoring_agent",      "Jaume"),
    "FECHA FIN CONTRATO": ("contract_end_date",     ""),
    "CLAUSULA":           ("clause",                "0"),
    "OPCIONAL":           ("optional",              "No"),
    "FECHA AVISO":        ("optional_notice_date",  ""),
    "CONDICIONES":        ("conditions",            ""),
    "FECHA CONTRATO":     ("agency_contract_date",  ""),
    "FECHA FIN":          ("agency_end_date",       ""),
}

DATE_KEYS = {
    "birth_date", "sports_brand_end_date", "contract_end_date",
    "optional_notice_date", "agency_contract_date", "agency_end_date",
}

IMPORT_COMMISSION_PCT = 10
IMPORT_PAYER_TYPE     = PayerType.CLUB


# ══════════════════════════════════════════════════════════════════════
#  RESULT DATA CLASSES
# ══════════════════════════════════════════════════════════════════════

@dataclass
class RowResult:
    row_num: int
    name:    str
    action:  str           # "created" | "updated" | "skipped" | "error"
    message: str = ""
    sheet:   str = ""


@dataclass
class ImportResult:
    total_rows: int = 0
    created:    int = 0
    updated:    int = 0
    skipped:    int = 0
    errors:     int = 0
    rows:     List[RowResult] = field(default_factory=list)
    warnings: List[str]       = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        if self.total_rows == 0:
            return 0.0
        return round((self.created + self.updated) / self.total_rows * 100, 1)

    def to_dict(self) -> Dict:
        return {
            "total_rows":   self.total_rows,
            "created":      self.created,
            "updated":      self.updated,
            "skipped":      self.skipped,
            "errors":       self.errors,
            "success_rate": self.success_rate,
            "warnings":     self.warnings,
            "rows": [
                {"row": r.row_num, "name": r.name, "action": r.action,
                 "message": r.message, "sheet": r.sheet}
                for r in self.rows
            ],
        }


# ══════════════════════════════════════════════════════════════════════
#  CELL HELPERS
# ══════════════════════════════════════════════════════════════════════

def clean_cell(raw) -> str:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ""
    text = str(raw).strip()
    return "" if text.lower() in ("nan", "nat", "none") else text


def date_cell(raw) -> str:
    """ISO text for real dates; free text ("2026", "Junio 2026") is kept as typed."""
    text = clean_cell(raw)
    d = parse_date(text)
    return d.isoformat() if d else text


def normalise_header(raw) -> str:
    return " ".join(str(raw).split()).upper()


def read_cells(values: Dict[str, str]) -> Dict[str, str]:
    """Header-keyed raw cells → field-keyed cleaned text, blanks included."""
    cells = {}
    for header, (key, _default) in HEADER_MAP.items():
        value = values.get(header, "")
        cells[key] = date_cell(value) if key in DATE_KEYS else clean_cell(value)
    return cells


def map_row(values: Dict[str, str], category: str = Category.FOOTBALL) -> Dict:
    """
    Header-keyed cell values → PlayerRecord field dict, with defaults for
    empty cells. Display name is first name + first surname.
    """
    cells = read_cells(values)
    get = {key: cells[key] or default for key, default in HEADER_MAP.values()}

    return {
        "first_name":            get["first_name"],
        "last_name1":            get["last_name1"],
        "last_name2":            get["last_name2"],
        "name":                  f"{get['first_name']} {get['last_name1']}".strip(),
        "league":                get["league"],
        "club":                  get["club"],
        "nationality":           get["nationality"],
        "position":              get["position"],
        "preferred_foot":        get["preferred_foot"],
        "category":              category,
        "birth_date":            get["birth_date"] or None,
        "sports_brand":          get["sports_brand"],
        "sports_brand_end_date": get["sports_brand_end_date"],
        "monitoring_agent":      get["monitoring_agent"],
        "contract": ContractTerms(
            end_date=get["contract_end_date"],
            clause=get["clause"],
            optional=get["optional"],
            optional_notice_date=get["optional_notice_date"],
            conditions=get["conditions"],
        ),
        "agency": AgencyLink(
            contract_date=get["agency_contract_date"] or None,
            agency_end_date=get["agency_end_date"] or None,
            commission_pct=IMPORT_COMMISSION_PCT,
            payer_type=IMPORT_PAYER_TYPE,
        ),
        "is_scouting":           False,
    }


# Fields a re-import may overwrite on an existing player
UPDATABLE_KEYS = (
    "league", "club", "nationality", "position", "preferred_foot", "birth_date",
    "sports_brand", "sports_brand_end_date", "monitoring_agent",
)
CONTRACT_KEYS = {
    "contract_end_date":    "end_date",
    "clause":               "clause",
    "optional":             "optional",
    "optional_notice_date": "optional_notice_date",
    "conditions":           "conditions",
}


def update_changes(values: Dict[str, str], current: PlayerRecord) -> Dict:
    """
    Changes for a player already on the roster: only cells that are present
    and non-blank, no defaults. Contract cells are merged into the current
    contract; the agency link and the category are left as they are.
    """
    cells   = read_cells(values)
    changes = {key: cells[key] for key in UPDATABLE_KEYS if cells[key]}
    contract = {attr: cells[key] for key, attr in CONTRACT_KEYS.items() if cells[key]}
    if contract:
        changes["contract"] = replace(current.contract, **contract)
    return changes


def _identity(first: str, last1: str, last2: str) -> tuple:
    return tuple(s.strip().lower() for s in (first, last1, last2))


# ══════════════════════════════════════════════════════════════════════
#  MAIN IMPORT SERVICE
# ══════════════════════════════════════════════════════════════════════

class ExcelImportService:
    """
    Reads a roster workbook and writes players through a Player Record Store.

    Usage:
        svc = ExcelImportService(filepath="/uploads/jugadores.xlsx", category="F. Sala")
        result = svc.run(store=get_player_repository(), dry_run=False)
    """

    def __init__(
        self,
        filepath,
        sheet_names: Optional[List[str]] = None,
        category: str = Category.FOOTBALL,
        header_row: int = 0,
    ):
        self.filepath    = filepath
        self.sheet_names = sheet_names   # None = first sheet only
        self.category    = Category(category)
        self.header_row  = header_row    # 0-based for pandas

    # ── Public entry point ─────────────────────────────────────────
    def run(self, store=None, dry_run: bool = False) -> ImportResult:
        """
        Process the workbook and return an ImportResult summary.

        dry_run=True → parse and validate only, nothing is written.
        """
        if store is None and not dry_run:
            raise AgencyError("Se necesita un almacén de jugadores para importar.")

        result = ImportResult()
        xf = pd.ExcelFile(self.filepath)
        sheets = self.sheet_names or xf.sheet_names[:1]

        existing = {}
        if store is not None:
            existing = {
                _identity(p.first_name, p.last_name1, p.last_name2): p.id
                for p in store.list(is_scouting=False)
            }

        logger.info("Excel import started: %s (%d sheets)", self.filepath, len(sheets))

        for sheet_name in sheets:
            if sheet_name not in xf.sheet_names:
                result.warnings.append(f"Hoja «{sheet_name}» no encontrada")
                continue
            df = pd.read_excel(xf, sheet_name=sheet_name, header=self.header_row, dtype=str)
            self._process_sheet(df, sheet_name, result, store, existing, dry_run)

        logger.info(
            "Import complete: total=%d created=%d updated=%d errors=%d",
            result.total_rows, result.created, result.updated, result.errors
        )
        return result

    # ── Sheet processor ────────────────────────────────────────────
    def _process_sheet(self, df: pd.DataFrame, sheet_name: str, result: ImportResult,
                       store, existing: Dict, dry_run: bool):
        df = df.rename(columns=normalise_header)
        missing = [h for h in ("NOMBRE", "PRIMER APELLIDO") if h not in df.columns]
        if missing:
            result.warnings.append(f"Hoja «{sheet_name}» omitida: faltan columnas {', '.join(missing)}")
            return

        unknown = [c for c in df.columns if c not in HEADER_MAP]
        if unknown:
            result.warnings.append(f"Hoja «{sheet_name}»: columnas ignoradas {', '.join(map(str, unknown))}")

        for df_idx, row in df.iterrows():
            result.total_rows += 1
            rr = self._process_row(
                values={h: row.get(h) for h in HEADER_MAP},
                row_num=int(df_idx) + self.header_row + 2,
                sheet_name=sheet_name,
                store=store,
                existing=existing,
                dry_run=dry_run,
            )
            result.rows.append(rr)

            if rr.action == "created":   result.created += 1
            elif rr.action == "updated": result.updated += 1
            elif rr.action == "skipped": result.skipped += 1
            elif rr.action == "error":   result.errors  += 1

    # ── Row processor ──────────────────────────────────────────────
    def _process_row(self, values: Dict, row_num: int, sheet_name: str,
                     store, existing: Dict, dry_run: bool) -> RowResult:
        try:
            data = map_row(values, self.category)
        except (AgencyError, ValueError) as exc:
            return RowResult(row_num=row_num, name="?", action="error",
                             sheet=sheet_name, message=str(exc)[:200])

        name = data["name"]
        if not data["first_name"] and not data["last_name1"]:
            return RowResult(row_num=row_num, name="?", action="skipped", sheet=sheet_name,
                             message="Fila sin nombre ni apellido")

        key       = _identity(data["first_name"], data["last_name1"], data["last_name2"])
        player_id = existing.get(key)

        if dry_run:
            verb = "actualizaría" if player_id else "crearía"
            return RowResult(row_num=row_num, name=name, action="skipped", sheet=sheet_name,
                             message=f"[DRY RUN] Se {verb} | {data['club'] or '-'}")

        try:
            if player_id:
                store.update(player_id, update_changes(values, store.get(player_id)))
                action = "updated"
            else:
                player_id = store.create(PlayerRecord.from_dict(data))
                existing[key] = player_id
                action = "created"
        except AgencyError as exc:
            logger.error("Row %d (%s): %s", row_num, name, exc, exc_info=True)
            return RowResult(row_num=row_num, name=name, action="error",
                             sheet=sheet_name, message=str(exc)[:200])

        return RowResult(row_num=row_num, name=name, action=action, sheet=sheet_name,
                         message=f"{data['club'] or '-'} | {self.category.value}")


# ══════════════════════════════════════════════════════════════════════
#  STANDALONE RUNNER
# ══════════════════════════════════════════════════════════════════════

def run_import(
    filepath,
    store=None,
    dry_run: bool = False,
    sheet_names: Optional[List[str]] = None,
    category: str = Category.FOOTBALL,
) -> ImportResult:
    """Entry point for the management command, the upload view and the Celery task."""
    if store is None and not dry_run:
        from .player_store import get_player_repository
        store = get_player_repository()
    svc = ExcelImportService(filepath=filepath, sheet_names=sheet_names, category=category)
    return svc.run(store=store, dry_run=dry_run)
