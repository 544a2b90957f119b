from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Sequence

from aggregation._amounts import ZERO, checked_type, sum_amounts
from domain.errors import LedgerContractError
from domain.models import Category, Transaction, TransactionType
from domain.schemas import CategoryStatistic, CategoryStatistics

HUNDRED = Decimal("100")


def _percentage(total: Decimal, overall_total: Decimal) -> float:
    if overall_total <= ZERO:
        return 0.0
    return float(total / overall_total * HUNDRED)


def compute_category_statistics(
    categories: Sequence[Category],
    transactions_by_category: Mapping[int, Sequence[Transaction]],
    txn_type: TransactionType | None = None,
) -> CategoryStatistics:
    """
    Per-category totals, counts and share of the type's overall total.

    Every category is reported, including those with no transactions in the
    mapping. Categories must all share one type; the transactions filed under
    a category are grouped by that category's declared type.
    """
    declared: set[TransactionType] = set()
    for category in categories:
        declared.add(checked_type(category.type, owner=f"Category {category.id}"))
    if txn_type is not None:
        declared.add(txn_type)
    if len(declared) > 1:
        raise LedgerContractError(
            f"Category statistics need a single type, got {sorted(t.value for t in declared)}"
        )

    rows: list[tuple[Category, Decimal, int]] = []
    for category in categories:
        total, count = sum_amounts(transactions_by_category.get(category.id, ()))
        rows.append((category, total, count))

    overall_total = sum((total for _, total, _ in rows), ZERO)
    stats = [
        CategoryStatistic(
            id=category.id,
            name=category.name,
            color=category.color,
            icon=category.icon,
            total_amount=total,
            transaction_count=count,
            percentage=_percentage(total, overall_total),
        )
        for category, total, count in rows
    ]
    stats.sort(key=lambda s: s.name)

    return CategoryStatistics(
        type=next(iter(declared), None),
        categories=stats,
        overall_total=overall_total,
    )
