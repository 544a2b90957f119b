from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from pydantic import ValidationError

from application.reporting import ReportingService
from application.seeding import seed_default_categories
from domain.models import TransactionType
from domain.schemas import DateRange, ReportQuery
from infrastructure.ledger_store.memory_store import InMemoryLedgerStore
from infrastructure.ledger_store.sqlalchemy_store import SqlAlchemyLedgerStore
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)


def build_store(database_url: str | None = None) -> LedgerStore:
    database_url = database_url or os.getenv("LEDGER_DATABASE_URL")
    if not database_url:
        logger.info("No LEDGER_DATABASE_URL set, using in-memory ledger store")
        return InMemoryLedgerStore()

    store = SqlAlchemyLedgerStore(database_url)
    store.init_db()
    return store


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledger-reports", description="Ledger summaries and category breakdowns.")
    commands = parser.add_subparsers(dest="command", required=True)

    report = commands.add_parser("report", help="Print the summary and category statistics for an owner.")
    report.add_argument("owner_id")
    report.add_argument("--type", choices=[t.value for t in TransactionType], default=None)
    report.add_argument("--start", help="YYYY-MM-DD, inclusive")
    report.add_argument("--end", help="YYYY-MM-DD, inclusive")

    seed = commands.add_parser("seed", help="Create the default categories for an owner with none.")
    seed.add_argument("owner_id")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    store = build_store()

    if args.command == "seed":
        result = seed_default_categories(store, args.owner_id)
        print(result.model_dump_json(indent=2))
        return 0

    if bool(args.start) != bool(args.end):
        print("--start and --end must be given together", file=sys.stderr)
        return 2
    try:
        query = ReportQuery(
            type=TransactionType(args.type) if args.type else None,
            date_range=DateRange(start=args.start, end=args.end) if args.start else None,
        )
    except ValidationError as exc:
        print(f"Invalid date range: {exc}", file=sys.stderr)
        return 2
    report = asyncio.run(ReportingService(store).build_report(args.owner_id, query))
    print(report.model_dump_json(indent=2))
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
