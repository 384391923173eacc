"""Command line loader: nomina-load.

Usage:
    # Parse and persist a file into MySQL
    nomina-load /path/to/nomina.txt

    # Only parse and show what would be inserted
    nomina-load /path/to/nomina.txt --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from nomina.core.config import AppSettings
from nomina.core.exceptions import NominaError, PersistenceError
from nomina.core.logging_config import configure_logging
from nomina.models.batch import ParsedBatch
from nomina.parsing.assembler import parse_batch
from nomina.persistence import create_persistence
from nomina.services.batch_persistence import BatchPersistenceCoordinator
from nomina.services.uploads import read_upload


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nomina-load",
        description="Load a payroll disbursement TXT file into the nomina database.",
    )
    parser.add_argument("input_path", help="Path to the pipe-delimited TXT file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse the file and print the batch without writing to the database",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject malformed amounts, counts and dates",
    )
    return parser.parse_args(argv)


def describe(batch: ParsedBatch) -> str:
    header = batch.header
    return (
        f"Header: RNC {header.company_tax_id}, bank {header.destination_bank}, "
        f"date {header.payment_date}, total {header.total_amount}\n"
        f"Details: {len(batch.details)}, record_count: {batch.record_count}"
    )


async def _persist(batch: ParsedBatch, settings: AppSettings) -> int:
    store = create_persistence(settings)
    coordinator = BatchPersistenceCoordinator(
        store, atomic=settings.atomic_insert, timeout=settings.mysql.timeout,
    )
    try:
        result = await coordinator.persist(batch)
    finally:
        store.close()
    print(f"Batch {result.batch_id}: {result.inserted_count} details inserted")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    args = _parse_args(argv)
    settings = AppSettings()
    configure_logging(settings.log_level)

    path = Path(args.input_path)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 2

    try:
        batch = parse_batch(read_upload(path), strict=args.strict or settings.strict_parsing)
        print(describe(batch))
        if args.dry_run:
            return 0
        return asyncio.run(_persist(batch, settings))
    except PersistenceError as exc:
        suffix = f" (batch {exc.batch_id} was kept)" if exc.batch_id is not None else ""
        print(f"Error in {exc.phase}: {exc.message}{suffix}", file=sys.stderr)
        return 1
    except NominaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
