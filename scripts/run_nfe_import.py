#!/usr/bin/env python3
"""
Import assets from an extracted NF-e invoice (JSON).

Runs the import wizard non-interactively: preview the invoice, select units
per line, dilute freight per the active settings, then create one asset per
selected unit.

Per-asset metadata comes either from a JSON file (a list with one object per
unit, in invoice line order; keys are the TaskMetadata fields) or from
--category-id plus --tag-prefix, which tags units PREFIX-0001, PREFIX-0002...

Usage:
    python3 scripts/run_nfe_import.py --file <invoice.json> [options]

Examples:
    # Show what the invoice contains and whether the supplier is registered
    python3 scripts/run_nfe_import.py --file nfe.json --preview-only

    # Import 3 units of line 0 and every unit of line 2
    python3 scripts/run_nfe_import.py --file nfe.json --select 0=3 --select 2=all \\
        --category-id 6f1c... --tag-prefix PAT

    # Import everything with per-unit metadata from a file
    python3 scripts/run_nfe_import.py --file nfe.json --select-all --metadata meta.json
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from uuid import UUID, uuid4

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///assets.db"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import assets from an NF-e extraction JSON: preview -> select -> commit.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--file",
        required=True,
        type=Path,
        help="Path to the extraction output (JSON object).",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="LINE=QTY",
        help="Units to import from a line (0-based), QTY a number or 'all'. Repeatable.",
    )
    parser.add_argument(
        "--select-all",
        action="store_true",
        help="Import every whole unit of every line.",
    )
    parser.add_argument(
        "--metadata",
        type=Path,
        default=None,
        help="JSON list of per-unit metadata objects.",
    )
    parser.add_argument(
        "--category-id",
        type=UUID,
        default=None,
        help="Category for every unit when --metadata is not given.",
    )
    parser.add_argument(
        "--tag-prefix",
        default="PAT",
        help="Asset tag prefix when --metadata is not given (default: PAT).",
    )
    parser.add_argument(
        "--preview-only",
        action="store_true",
        help="Print the invoice preview and exit. No DB writes.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="YAML settings file (default: ASSET_SETTINGS_FILE env or bundled defaults).",
    )
    parser.add_argument(
        "--actor-id",
        default=None,
        help="Actor UUID for audit (default: RUN_IMPORT_ACTOR_ID env or new UUID).",
    )
    parser.add_argument(
        "--db-url",
        default=DB_URL,
        help=f"Database URL (default: {DB_URL!r}).",
    )
    return parser.parse_args()


def _selection(args: argparse.Namespace, document) -> dict[int, int]:
    if args.select_all:
        return {i: p.selectable_units for i, p in enumerate(document.products)}
    selected: dict[int, int] = {}
    for item in args.select:
        line, _, qty = item.partition("=")
        index = int(line)
        if qty.strip().lower() == "all":
            if 0 <= index < len(document.products):
                selected[index] = document.products[index].selectable_units
            else:
                selected[index] = 0
        else:
            selected[index] = int(qty)
    return selected


def _metadata(args: argparse.Namespace, task_count: int):
    from asset_ingestion.domain.types import TaskMetadata

    if args.metadata is not None:
        with args.metadata.open(encoding="utf-8") as f:
            raw = json.load(f)
        items = []
        for entry in raw:
            entry = dict(entry)
            for key in ("category_id", "location_id", "model_id"):
                if entry.get(key):
                    entry[key] = UUID(entry[key])
            if "previously_depreciated_value" in entry:
                entry["previously_depreciated_value"] = Decimal(str(entry["previously_depreciated_value"]))
            if entry.get("purchase_date"):
                entry["purchase_date"] = date.fromisoformat(entry["purchase_date"])
            items.append(TaskMetadata(**entry))
        return items

    return [
        TaskMetadata(asset_tag=f"{args.tag_prefix}-{n:04d}", category_id=args.category_id)
        for n in range(1, task_count + 1)
    ]


def main() -> int:
    args = _parse_args()

    actor_id = UUID(args.actor_id) if args.actor_id else UUID(os.environ.get("RUN_IMPORT_ACTOR_ID", str(uuid4())))
    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1

    # Lazy imports so we fail fast on args first
    from asset_config import get_active_settings
    from asset_ingestion.adapters import load_invoice_document
    from asset_ingestion.services import NFeImportService
    from asset_kernel.db.engine import init_engine_from_url, session_scope
    from asset_kernel.exceptions import AssetKernelError, ValidationError
    from asset_kernel.logging_config import LogContext
    from asset_modules._orm_registry import create_all_tables
    from asset_modules.assets.repository import SqlAssetRepository, SqlCatalogStore

    try:
        config = get_active_settings(args.settings)
    except Exception as e:
        print(f"ERROR: Failed to load settings: {e}", file=sys.stderr)
        return 1

    try:
        document = load_invoice_document(source_path, currency=config.currency_code)
    except ValidationError as e:
        print(f"ERROR: Invalid invoice document: {e}", file=sys.stderr)
        for err in e.errors:
            print(f"  {err.describe()}", file=sys.stderr)
        return 1

    try:
        init_engine_from_url(args.db_url)
        create_all_tables()
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    LogContext.set(actor_id=str(actor_id))
    with session_scope() as session:
        service = NFeImportService(
            SqlCatalogStore(session, actor_id),
            SqlAssetRepository(session, actor_id),
            config=config,
        )

        preview = service.preview(document)
        print(json.dumps(preview.to_dict(), indent=2, ensure_ascii=False))
        if args.preview_only:
            return 0

        try:
            plan = service.prepare(document, _selection(args, document))
        except AssetKernelError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 1

        print(f"Planned {plan.task_count} assets from invoice {plan.invoice_number!r}")
        for line in plan.lines:
            if line.selected_quantity or line.ignored_quantity:
                print(
                    f"  Line {line.line_index}: {line.selected_quantity} selected, "
                    f"{line.ignored_quantity} ignored, unit {line.unit_purchase_value}"
                )

        if args.metadata is None and args.category_id is None:
            print("ERROR: --metadata or --category-id is required to commit.", file=sys.stderr)
            return 1

        try:
            outcome = service.commit(plan, _metadata(args, plan.task_count))
        except ValidationError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            for err in e.errors[:10]:
                print(f"  {err.describe()}", file=sys.stderr)
            if len(e.errors) > 10:
                print(f"  ... and {len(e.errors) - 10} more errors.", file=sys.stderr)
            return 1
        except AssetKernelError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 1

    print(f"  Created: {len(outcome.created)}, Failed: {len(outcome.failures)}")
    for failure in outcome.failures[:5]:
        print(f"  Task {failure.task_index} ({failure.asset_tag}): {failure.message}")
    if len(outcome.failures) > 5:
        print(f"  ... and {len(outcome.failures) - 5} more failures.")
    return 0 if outcome.is_complete else 1


if __name__ == "__main__":
    sys.exit(main())
