#!/usr/bin/env python
"""Import VKM catalog entries from the portfolio CSV export.

Columns are positional: id, name, short description, description, content,
study credit, location, contact id, level, learning outcomes. Rows whose
``id`` was already imported are skipped, so the script can be re-run.

Usage:
    python -m kiescompass.scripts.seed_vkm ./data/vkm_portfolio.csv
    python -m kiescompass.scripts.seed_vkm ./data/vkm_portfolio.csv --limit 50 --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from kiescompass.db.connection import (
    create_all_tables,
    dispose_engine,
    get_database_type,
    get_session_context,
)
from kiescompass.db.repositories.vkm_repository import VkmRepository

DEFAULT_LOCATION = "Unknown"
DEFAULT_LEVEL = "NLQF5"


def parse_int(value: str | None) -> int | None:
    """Parse an integer cell, tolerating blanks and decimal commas."""
    if value is None:
        return None
    candidate = value.strip().replace(",", ".")
    if not candidate:
        return None
    try:
        return int(float(candidate))
    except ValueError:
        return None


def parse_vkm_row(row: Sequence[str]) -> dict[str, Any] | None:
    """Map one CSV row onto catalog fields, or ``None`` for an empty row."""

    cells = [cell.strip() for cell in row] + [""] * max(0, 10 - len(row))
    if not any(cells):
        return None

    return {
        "legacy_id": parse_int(cells[0]),
        "name": cells[1] or "Unnamed VKM",
        "short_description": cells[2],
        "description": cells[3],
        "content": cells[4],
        "study_credit": max(parse_int(cells[5]) or 0, 0),
        "location": cells[6] or DEFAULT_LOCATION,
        "contact_id": cells[7],
        "level": cells[8] or DEFAULT_LEVEL,
        "learning_outcomes": cells[9],
    }


def _positive_int(value: str) -> int:
    """argparse type for ``--limit``: a whole number of at least 1."""
    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return parsed


async def seed_vkms(
    csv_path: Path,
    *,
    limit: int | None = None,
    dry_run: bool = False,
) -> tuple[int, int]:
    """Load catalog entries from ``csv_path``.

    Returns:
        Tuple of (loaded_count, skipped_count)
    """
    if not csv_path.exists():
        print(f"❌ File not found: {csv_path}", file=sys.stderr)
        return 0, 0

    loaded_count = 0
    skipped_count = 0

    async with get_session_context() as session:
        repository = VkmRepository(session)

        with open(csv_path, encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)  # header

            for line_num, row in enumerate(reader, 2):
                if limit is not None and loaded_count >= limit:
                    break

                data = parse_vkm_row(row)
                if data is None:
                    continue

                legacy_id = data["legacy_id"]
                if legacy_id is not None and await repository.find_by_legacy_id(legacy_id):
                    print(f"⚠️  Line {line_num}: VKM {legacy_id} already imported, skipping")
                    skipped_count += 1
                    continue

                if dry_run:
                    print(f"✓ Would load: {data['name']} ({data['study_credit']} EC)")
                    loaded_count += 1
                    continue

                try:
                    async with session.begin_nested():
                        await repository.create(data)
                except Exception as e:
                    print(f"❌ Line {line_num}: Error loading VKM: {e}", file=sys.stderr)
                    skipped_count += 1
                    continue

                loaded_count += 1
                if loaded_count % 100 == 0:
                    await session.commit()
                    print(f"💾 Committed {loaded_count} VKMs...")

        if not dry_run and session.in_transaction():
            await session.commit()

    return loaded_count, skipped_count


async def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import VKM catalog entries from CSV")
    parser.add_argument("csv_path", type=Path, help="Path to the VKM portfolio CSV export")
    parser.add_argument("--limit", type=_positive_int, help="Maximum number of VKMs to load")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate data without inserting into database",
    )
    args = parser.parse_args(argv)

    if get_database_type() == "sqlite" and not args.dry_run:
        await create_all_tables()

    print(f"📥 Importing VKMs from {args.csv_path}")
    try:
        loaded, skipped = await seed_vkms(args.csv_path, limit=args.limit, dry_run=args.dry_run)
    finally:
        await dispose_engine()

    print()
    print("=" * 50)
    print(f"✅ Loaded: {loaded}")
    print(f"⚠️  Skipped: {skipped}")
    print("=" * 50)
    return 0 if loaded or not skipped else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
