from __future__ import annotations

from typing import Iterable

from aggregation._amounts import ZERO, checked_amount, checked_type
from domain.models import Transaction, TransactionType
from domain.schemas import Summary


def compute_summary(transactions: Iterable[Transaction]) -> Summary:
    """
    Income/expense totals for an already filtered transaction set.

    Sums are exact Decimal sums, so the result does not depend on input order.
    A malformed type tag or non-positive amount raises LedgerContractError.
    """
    totals = {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
    counts = {TransactionType.INCOME: 0, TransactionType.EXPENSE: 0}

    for txn in transactions:
        txn_type = checked_type(txn.type, owner=f"Transaction {txn.id}")
        totals[txn_type] += checked_amount(txn)
        counts[txn_type] += 1

    total_income = totals[TransactionType.INCOME]
    total_expense = totals[TransactionType.EXPENSE]
    income_count = counts[TransactionType.INCOME]
    expense_count = counts[TransactionType.EXPENSE]
    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        income_count=income_count,
        expense_count=expense_count,
        transaction_count=income_count + expense_count,
    )
