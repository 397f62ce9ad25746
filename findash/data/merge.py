"""
Cutoff-based merge of overlapping transaction sources.

Exports taken at different times overlap. Instead of trying to match
duplicates across formats, one cutoff date decides which source is trusted:
the current source on/after the cutoff, every historical source before it.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Sequence

from findash.data.schemas import SourceRole, SourceSpec, Transaction
from findash.logging_setup import get_logger

logger = get_logger("findash.data.merge")


def in_authoritative_window(role: SourceRole, date: dt.date, cutoff: dt.date) -> bool:
    """True when a source with ``role`` is trusted for ``date``."""
    if role == SourceRole.CURRENT:
        return date >= cutoff
    return date < cutoff


def merge_sources(
    loaded: Sequence[tuple[SourceSpec, Sequence[Transaction]]],
    cutoff: dt.date,
) -> list[Transaction]:
    """Combine per-source transactions into one set, newest first.

    Records outside their source's window are dropped. Sorting is stable, so
    same-day records keep their source order and in-source order.
    """
    current = [spec.name for spec, _ in loaded if spec.role == SourceRole.CURRENT]
    if len(current) != 1:
        raise ValueError(f"Exactly one current source is required, got {len(current)}: {current}")

    merged: list[Transaction] = []
    for spec, transactions in loaded:
        kept = [t for t in transactions if in_authoritative_window(spec.role, t.date, cutoff)]
        logger.info(
            "  %s (%s): %d rows, kept %d %s %s",
            spec.name, spec.role.value, len(transactions), len(kept),
            "on/after" if spec.role == SourceRole.CURRENT else "before", cutoff.isoformat(),
        )
        merged.extend(kept)

    merged.sort(key=lambda t: t.date, reverse=True)
    return merged
