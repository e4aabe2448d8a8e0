#!/usr/bin/env python3
"""
View every asset with its current book value, plus portfolio totals.

Usage:
    python3 scripts/view_valuations.py [--as-of YYYY-MM-DD] [--exclude-archived]
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from uuid import uuid4

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///assets.db"

W = 96


def _fmt(money) -> str:
    if money is None:
        return "N/A"
    return f"{money.currency.code} {money.amount:,.2f}"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List asset book values.")
    parser.add_argument(
        "--as-of",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Valuation date (YYYY-MM-DD). Default: today.",
    )
    parser.add_argument(
        "--exclude-archived",
        action="store_true",
        help="Hide archived assets from the listing.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="YAML settings file.",
    )
    parser.add_argument(
        "--db-url",
        default=DB_URL,
        help=f"Database URL (default: {DB_URL!r}).",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    logging.disable(logging.CRITICAL)

    from asset_config import get_active_settings
    from asset_kernel.db.engine import init_engine_from_url, session_scope
    from asset_kernel.domain.clock import SystemClock
    from asset_modules._orm_registry import create_all_tables
    from asset_modules.assets.repository import SqlAssetRepository, SqlCatalogStore
    from asset_modules.assets.service import AssetRegistryService

    try:
        config = get_active_settings(args.settings)
        init_engine_from_url(args.db_url)
        create_all_tables()
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    actor_id = uuid4()  # read-only run
    clock = SystemClock()
    with session_scope() as session:
        service = AssetRegistryService(
            SqlAssetRepository(session, actor_id),
            SqlCatalogStore(session, actor_id),
            config=config,
            clock=clock,
        )
        as_of = args.as_of or clock.today()
        rows = service.list_valuations(as_of, include_archived=not args.exclude_archived)
        summary = service.portfolio_summary(as_of)

    if not rows:
        print("  No assets found. Run run_nfe_import.py first.")
        return 1

    print()
    print("=" * W)
    print(f"ASSET VALUATIONS AS OF {as_of.isoformat()}".center(W))
    print("=" * W)
    print(f"  {'Tag':<12} {'Name':<30} {'Category':<18} {'Purchase':>15} {'Current':>15}")
    print(f"  {'-'*12} {'-'*30} {'-'*18} {'-'*15} {'-'*15}")
    for row in rows:
        flag = " (archived)" if row.asset.archived else ""
        print(
            f"  {row.asset.asset_tag:<12} {(row.asset.name + flag)[:30]:<30} "
            f"{(row.category_name or '?')[:18]:<18} "
            f"{_fmt(row.asset.purchase_value):>15} {_fmt(row.value):>15}"
        )
        if row.error_code:
            print(f"  {'':<12} {row.error_code}: {row.error_message}")

    print("-" * W)
    print(f"  Assets: {summary.asset_count}  (unvaluable: {summary.unvaluable_count})")
    print(f"  Total purchase value:     {_fmt(summary.total_purchase_value)}")
    print(f"  Total current value:      {_fmt(summary.total_current_value)}")
    print(f"  Accumulated depreciation: {_fmt(summary.total_depreciation)}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
