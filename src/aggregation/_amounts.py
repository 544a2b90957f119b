from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from domain.errors import LedgerContractError
from domain.models import Transaction, TransactionType

ZERO = Decimal("0")


def checked_amount(txn: Transaction) -> Decimal:
    value = txn.amount
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, str)):
        # Floats are rejected too: a binary float would reintroduce drift.
        raise LedgerContractError(f"Transaction {txn.id} amount must be a Decimal, got {type(value).__name__}")
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise LedgerContractError(f"Transaction {txn.id} amount is not numeric: {value!r}") from exc
    if not amount.is_finite() or amount <= ZERO:
        raise LedgerContractError(f"Transaction {txn.id} amount must be positive, got {value!r}")
    return amount


def checked_type(value: Any, *, owner: str) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    raise LedgerContractError(f"{owner} has malformed type tag: {value!r}")


def sum_amounts(transactions: Iterable[Transaction]) -> tuple[Decimal, int]:
    total = ZERO
    count = 0
    for txn in transactions:
        total += checked_amount(txn)
        count += 1
    return total, count
