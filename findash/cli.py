#!/usr/bin/env python3
"""
FinDash CLI — Unified entry point for summaries, exploration, JSON export, and API server.

USAGE:
  python -m findash.cli summary                                 # All data
  python -m findash.cli summary --year 2023 --year 2024         # Selected years
  python -m findash.cli summary --type "Gastos" --category "Supermercado"

  python -m findash.cli explore mercadona                       # Substring search on concept
  python -m findash.cli explore "Supermercado" --field category --exact

  python -m findash.cli export                                  # JSON aggregates to export/
  python -m findash.cli export --output ./dist

  python -m findash.cli serve                                   # Start API server
  python -m findash.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from findash.analytics.aggregates import (
    annual_variation, monthly_average, total_amount, waterfall,
)
from findash.analytics.dashboard import dashboard_summary
from findash.config import DATA_FOLDER, EXPORT_FOLDER
from findash.data.schemas import ActiveTab, FilterSelection
from findash.data.store import DataStore
from findash.errors import SourceLoadFailed
from findash.filters.explore import Explorer
from findash.filters.selection import FilterEngine
from findash.logging_setup import configure_logging


def _load_store() -> DataStore:
    print(f"  Data folder: {DATA_FOLDER}")
    return DataStore().load()


def _fmt(amount: float) -> str:
    return f"{amount:>14,.2f}"


def _engine(store: DataStore, args) -> FilterEngine:
    selection = FilterSelection.of(args.year or (), args.type or (), args.category or ())
    return FilterEngine(store.df, selection)


def cmd_summary(args):
    """Print total, variation, averages, and the waterfall for a selection."""
    store = _load_store()
    engine = _engine(store, args)
    df = engine.visible()

    print("\n" + "=" * 60)
    print("  FINDASH — SUMMARY")
    print("=" * 60)
    sel = engine.selection.to_dict()
    print(f"  Years: {sel['years'] or 'all'}  Types: {sel['types'] or 'all'}  Categories: {sel['categories'] or 'all'}")
    print(f"  Transactions: {len(df):,}   Total: {_fmt(total_amount(df))}\n")

    print(f"  {'YEAR':<8}{'AMOUNT':>14}{'DIFF':>14}{'%':>9}")
    for row in annual_variation(df):
        if row["previous"] is None:
            print(f"  {row['year']:<8}{_fmt(row['amount'])}{'—':>14}{'—':>9}")
        else:
            print(f"  {row['year']:<8}{_fmt(row['amount'])}{_fmt(row['diff'])}{row['percent']:>8.1f}%")

    print(f"\n  {'YEAR':<8}{'MONTHLY AVG':>14}")
    for row in monthly_average(df):
        print(f"  {row['year']:<8}{_fmt(row['average'])}")

    print(f"\n  {'WATERFALL':<14}{'AMOUNT':>14}{'START':>14}{'END':>14}")
    for entry in waterfall(df):
        print(f"  {entry['name']:<14}{_fmt(entry['amount'])}{_fmt(entry['start'])}{_fmt(entry['end'])}")


def cmd_explore(args):
    """Search one field and print monthly buckets plus the first page of rows."""
    store = _load_store()
    engine = _engine(store, args)
    engine.set_tab(ActiveTab.EXPLORATION)

    explorer = Explorer(engine.visible(), field=args.field, universe=store.df)
    if args.exact:
        explorer.select(args.query)
    else:
        explorer.type_query(args.query)
        explorer.submit()

    rows = explorer.transactions()
    print(f"\n  {len(rows):,} matches for '{args.query}' ({explorer.mode.value}) — total {_fmt(total_amount(rows))}\n")
    for bucket in explorer.buckets():
        print(f"  {bucket['name']}  {_fmt(bucket['amount'])}  ({bucket['count']})")

    print()
    for _, r in explorer.current_page().iterrows():
        print(f"  {r['date']:%Y-%m-%d}  {r['concept'][:40]:<42}{r['category'][:20]:<22}{_fmt(r['amount'])}")
    if explorer.page_count() > 1:
        print(f"\n  Page 1 of {explorer.page_count()}")

    if rows.empty and not args.exact:
        explorer.type_query(args.query)
        hints = explorer.suggestions()
        if hints:
            print("  Close values: " + ", ".join(hints))


def _write_json(path: Path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def cmd_export(args):
    """Write dashboard JSON for all data and for each year."""
    store = _load_store()
    out = Path(args.output)

    _write_json(out / "dashboard.json", dashboard_summary(store.df))
    _write_json(out / "filters.json", {
        "years": store.years(),
        "types": store.types(),
        "categories_by_type": store.categories_by_type(),
    })
    for year in store.years():
        engine = FilterEngine(store.df, FilterSelection.of(years=[year]))
        _write_json(out / "years" / f"{year}.json", dashboard_summary(engine.visible()))
    print(f"\n  Exported dashboard data for {len(store.years())} years to {out.resolve()}")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    uvicorn.run("findash.main:app", host="0.0.0.0", port=args.port, reload=args.reload)


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", type=int, action="append", help="Year (repeatable)")
    parser.add_argument("--type", action="append", help="Movement type (repeatable)")
    parser.add_argument("--category", action="append", help="Category (repeatable)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="findash",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: FINDASH_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    summary_parser = subparsers.add_parser("summary", help="Print yearly summary tables")
    _add_selection_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    explore_parser = subparsers.add_parser("explore", help="Search transactions by concept or category")
    explore_parser.add_argument("query", help="Text to search for")
    explore_parser.add_argument("--field", choices=["concept", "category"], default="concept")
    explore_parser.add_argument("--exact", action="store_true", help="Exact match instead of substring")
    explore_parser.add_argument("--year", type=int, action="append", help="Year (repeatable)")
    explore_parser.set_defaults(func=cmd_explore, type=None, category=None)

    export_parser = subparsers.add_parser("export", help="Export dashboard JSON")
    export_parser.add_argument("--output", default=str(EXPORT_FOLDER), help=f"Output directory (default: {EXPORT_FOLDER})")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    configure_logging(args.log_level)
    try:
        args.func(args)
    except SourceLoadFailed as exc:
        print(f"\nError loading data: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
