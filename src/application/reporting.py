from __future__ import annotations

import asyncio
import logging
import os
import time
from collections import defaultdict

from aggregation.category_statistics import compute_category_statistics
from aggregation.summary import compute_summary
from domain.errors import LedgerStoreError
from domain.models import Category, Transaction, TransactionType
from domain.schemas import CategoryStatistics, ReportQuery, ReportResponse, Summary
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)


class ReportingService:
    """
    Fetches an owner's ledger data and runs the aggregators over it.

    The summary and the category statistics come from independent store reads
    issued concurrently. They are not taken from one snapshot, so a write
    landing between the two reads can show up in one and not the other.
    """

    def __init__(self, store: LedgerStore, recent_limit: int | None = None):
        self._store = store
        self._recent_limit = recent_limit or int(os.getenv("LEDGER_RECENT_LIMIT", "5"))

    async def build_report(self, owner_id: str, query: ReportQuery | None = None) -> ReportResponse:
        query = query or ReportQuery()
        logger.info(
            "Report start owner_id=%s type=%s date_range=%s",
            owner_id,
            query.type.value if query.type else "ALL",
            query.date_range.model_dump(mode="json") if query.date_range else None,
        )
        t0 = time.perf_counter()

        try:
            summary, statistics = await asyncio.gather(
                self._summary(owner_id, query),
                self._category_statistics(owner_id, query),
            )
        except LedgerStoreError as exc:
            logger.exception("Report failed owner_id=%s", owner_id)
            return ReportResponse(owner_id=owner_id, ok=False, query=query, errors=[str(exc) or exc.__class__.__name__])

        logger.info(
            "Report complete in %.2fs owner_id=%s transactions=%d category_groups=%d",
            time.perf_counter() - t0,
            owner_id,
            summary.transaction_count,
            len(statistics),
        )
        return ReportResponse(owner_id=owner_id, query=query, summary=summary, category_statistics=statistics)

    async def recent_transactions(self, owner_id: str, limit: int | None = None) -> list[Transaction]:
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        rows = await asyncio.to_thread(self._store.find_transactions, owner_id)
        return rows[: limit if limit is not None else self._recent_limit]

    async def _summary(self, owner_id: str, query: ReportQuery) -> Summary:
        t = time.perf_counter()
        try:
            rows = await asyncio.to_thread(self._store.find_transactions, owner_id, None, query.date_range)
        except LedgerStoreError as exc:
            raise LedgerStoreError(f"Failed to calculate summary: {exc}") from exc
        summary = compute_summary(rows)
        logger.info("Summary computed in %.2fs owner_id=%s rows=%d", time.perf_counter() - t, owner_id, len(rows))
        return summary

    async def _category_statistics(self, owner_id: str, query: ReportQuery) -> list[CategoryStatistics]:
        t = time.perf_counter()
        try:
            categories, grouped = await asyncio.to_thread(self._load_categories, owner_id, query)
        except LedgerStoreError as exc:
            raise LedgerStoreError(f"Failed to calculate category statistics: {exc}") from exc

        types = [query.type] if query.type else list(TransactionType)
        statistics = [
            compute_category_statistics([c for c in categories if c.type == txn_type], grouped, txn_type)
            for txn_type in types
        ]
        logger.info(
            "Category statistics computed in %.2fs owner_id=%s categories=%d",
            time.perf_counter() - t,
            owner_id,
            len(categories),
        )
        return statistics

    def _load_categories(
        self, owner_id: str, query: ReportQuery
    ) -> tuple[list[Category], dict[int, list[Transaction]]]:
        categories = self._store.find_categories(owner_id, query.type)
        wanted = {c.id for c in categories}
        grouped: dict[int, list[Transaction]] = defaultdict(list)
        if wanted:
            for txn in self._store.find_transactions(owner_id, date_range=query.date_range):
                if txn.category_id in wanted:
                    grouped[txn.category_id].append(txn)
        return categories, grouped
