"""
FinDash — Configuration: paths, sources, cutoff, column mapping, constants.
"""
import datetime as dt
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with FINDASH_DATA_DIR for deployment)
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("FINDASH_DATA_DIR", str(Path.home() / "FinDash")))
DATA_FOLDER = _data_dir
EXPORT_FOLDER = _data_dir / "export"

# ---------------------------------------------------------------------------
# Source layout (first match per role wins; one current source only)
#   - current export covers everything on/after the cutoff
#   - the older CSV export covers everything before it
#   - the 2017 spreadsheet is a best-effort extra and may be absent
# ---------------------------------------------------------------------------
SOURCES = [
    {"name": "current", "filename": "movimientos.csv", "kind": "csv", "role": "current", "optional": False},
    {"name": "history", "filename": "movimientos - hasta 1 mayo 2022.csv", "kind": "csv", "role": "historical", "optional": False},
    {"name": "2017", "filename": "Movimientos 2017.xlsx", "kind": "xlsx", "role": "historical", "optional": True},
]

# Day the current export takes over from the historical ones (inclusive)
CUTOFF_DATE = dt.date.fromisoformat(os.environ.get("FINDASH_CUTOFF", "2022-05-02"))

CSV_ENCODINGS = ["utf-8-sig", "latin-1"]
# Candidate separators for bank CSV exports, sniffed from the header line
CSV_DELIMITERS = ",;\t"

# ---------------------------------------------------------------------------
# Column mapping from raw bank export → internal names
# ---------------------------------------------------------------------------
COLUMN_MAP = {
    "Tipo de movimiento": "operation_type",
    "Categoría": "category",
    "Concepto": "concept",
    "Entidad": "entity",
    "Nota": "note",
}

AMOUNT_COLUMN = "Importe"
DATE_COLUMN = "Fecha valor"
# Spreadsheet exports sometimes only carry the operation date
DATE_FALLBACK_COLUMN = "Fecha de operación"

# Text fields that are trimmed; "entity" is passed through untouched
TRIMMED_FIELDS = {"operation_type", "category", "concept", "note"}

# ---------------------------------------------------------------------------
# Display constants
# ---------------------------------------------------------------------------
MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]

# ---------------------------------------------------------------------------
# Exploration
# ---------------------------------------------------------------------------
SUGGESTION_LIMIT = 10           # matches shown while typing
SUGGESTION_DEFAULT_LIMIT = 20   # most frequent values shown for an empty query
ITEMS_PER_PAGE = 50

LOG_LEVEL = os.environ.get("FINDASH_LOG_LEVEL", "INFO")
