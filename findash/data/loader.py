"""
Source discovery, parallel loading, and merge into one transaction set.
"""
from __future__ import annotations

import csv
import datetime as dt
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pandas as pd

from findash.config import CSV_DELIMITERS, CSV_ENCODINGS, CUTOFF_DATE, DATA_FOLDER, SOURCES
from findash.data.merge import merge_sources
from findash.data.normalize import (
    CsvRecordNormalizer, RecordNormalizer, SpreadsheetRecordNormalizer,
)
from findash.data.schemas import SourceKind, SourceRole, SourceSpec, Transaction
from findash.errors import SourceLoadFailed
from findash.logging_setup import get_logger

logger = get_logger("findash.data.loader")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

def default_sources(folder: Path = DATA_FOLDER) -> list[SourceSpec]:
    """The configured source layout resolved against ``folder``."""
    return [SourceSpec.from_config(entry, folder) for entry in SOURCES]


# ---------------------------------------------------------------------------
# Raw readers
# ---------------------------------------------------------------------------

def sniff_delimiter(path: Path, encoding: str) -> str:
    """Delimiter of a CSV export, guessed from its header line (comma if unclear)."""
    with open(path, encoding=encoding, newline="") as f:
        header = f.readline()
    try:
        return csv.Sniffer().sniff(header, delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","


def read_csv_frame(path: Path) -> pd.DataFrame:
    """Read a bank CSV export as text cells; blank lines skipped."""
    last_exc: Exception | None = None
    for encoding in CSV_ENCODINGS:
        try:
            df = pd.read_csv(
                path, sep=sniff_delimiter(path, encoding), dtype=str,
                keep_default_na=False, skip_blank_lines=True, encoding=encoding,
            )
            break
        except UnicodeDecodeError as exc:
            last_exc = exc
    else:
        raise last_exc  # type: ignore[misc]
    df.columns = df.columns.str.strip()
    return df


def read_xlsx_frame(path: Path) -> pd.DataFrame:
    """Read the first sheet of a spreadsheet, keeping native cell types."""
    df = pd.read_excel(path, sheet_name=0, engine="openpyxl", dtype=object)
    df.columns = [str(c).strip() for c in df.columns]
    return df.astype(object).where(df.notna(), "")


_READERS = {
    SourceKind.CSV: (read_csv_frame, CsvRecordNormalizer),
    SourceKind.XLSX: (read_xlsx_frame, SpreadsheetRecordNormalizer),
}


def normalizer_for(spec: SourceSpec) -> RecordNormalizer:
    _, normalizer_cls = _READERS[spec.kind]
    return normalizer_cls(source=spec.name)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_source(spec: SourceSpec) -> list[Transaction]:
    """Read and normalize one source.

    A missing file, an unreadable file, or a header without the date/amount
    columns is a SourceLoadFailed, except for optional sources, which
    contribute nothing instead.
    """
    reader, _ = _READERS[spec.kind]
    normalizer = normalizer_for(spec)
    try:
        if not spec.path.exists():
            raise FileNotFoundError(f"File not found: {spec.path}")
        frame = reader(spec.path)
        missing = normalizer.missing_columns(frame.columns)
        if missing:
            raise ValueError(f"{spec.path.name} has no column(s) {missing}; found {list(frame.columns)}")
    except Exception as exc:
        if spec.optional:
            logger.warning("  Optional source %s unavailable (%s), skipping", spec.name, exc)
            return []
        raise SourceLoadFailed(spec.name, str(exc)) from exc

    records = frame.to_dict(orient="records")
    transactions = normalizer.normalize_all(records)
    logger.info("  Loaded %s: %d records → %d transactions", spec.path.name, len(records), len(transactions))
    return transactions


def load_all_sources(
    sources: list[SourceSpec] | None = None,
    cutoff: dt.date = CUTOFF_DATE,
    max_workers: int | None = None,
) -> list[Transaction]:
    """Load every source in parallel, then merge once all have finished.

    The first non-optional failure aborts the whole load; no partial set is
    ever returned.
    """
    if sources is None:
        sources = default_sources()
    if not any(s.role == SourceRole.CURRENT for s in sources):
        raise ValueError("At least one source must be designated current")

    logger.info("Loading %d sources (cutoff %s)...", len(sources), cutoff.isoformat())
    with ThreadPoolExecutor(max_workers=max_workers or len(sources)) as pool:
        futures = [(spec, pool.submit(load_source, spec)) for spec in sources]
        loaded = [(spec, future.result()) for spec, future in futures]

    merged = merge_sources(loaded, cutoff)
    logger.info("  Total: %d transactions after merge", len(merged))
    return merged
