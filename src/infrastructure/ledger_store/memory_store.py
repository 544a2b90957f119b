from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from typing import Sequence

from domain.errors import LedgerStoreError
from domain.models import Category, CategoryTemplate, Transaction, TransactionType
from domain.schemas import DateRange
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)


class InMemoryLedgerStore(LedgerStore):
    """Process-local store. Records are copied in and out so callers never share state with it."""

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._categories: dict[int, Category] = {}
        self._transactions: dict[int, Transaction] = {}
        self._category_ids = itertools.count(1)
        self._transaction_ids = itertools.count(1)

    def find_transactions(
        self,
        owner_id: str,
        txn_type: TransactionType | None = None,
        date_range: DateRange | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        with self._lock:
            rows = [
                replace(txn)
                for txn in self._transactions.values()
                if txn.owner_id == owner_id
                and (txn_type is None or txn.type == txn_type)
                and (date_range is None or date_range.contains(txn.date))
                and (category_id is None or txn.category_id == category_id)
            ]
        rows.sort(key=lambda t: (t.date, t.id), reverse=True)
        return rows

    def find_categories(self, owner_id: str, txn_type: TransactionType | None = None) -> list[Category]:
        with self._lock:
            rows = [
                replace(cat)
                for cat in self._categories.values()
                if cat.owner_id == owner_id and (txn_type is None or cat.type == txn_type)
            ]
        rows.sort(key=lambda c: (c.name, c.id))
        return rows

    def count_categories(self, owner_id: str) -> int:
        with self._lock:
            return sum(1 for cat in self._categories.values() if cat.owner_id == owner_id)

    def bulk_insert_categories(self, owner_id: str, templates: Sequence[CategoryTemplate]) -> list[Category]:
        with self._lock:
            staged: list[Category] = []
            taken = {(c.name, c.type) for c in self._categories.values() if c.owner_id == owner_id}
            for template in templates:
                key = (template.name, template.type)
                if key in taken:
                    raise LedgerStoreError(
                        f"Duplicate category {template.name!r}/{template.type.value} for owner {owner_id}"
                    )
                taken.add(key)
                staged.append(self._new_category(owner_id, template))
            for category in staged:
                self._categories[category.id] = category
        logger.info("Memory store inserted categories owner_id=%s count=%d", owner_id, len(staged))
        return [replace(c) for c in staged]

    def get_category(self, owner_id: str, category_id: int) -> Category | None:
        with self._lock:
            category = self._categories.get(category_id)
            if category is None or category.owner_id != owner_id:
                return None
            return replace(category)

    def find_category_by_name(self, owner_id: str, name: str, txn_type: TransactionType) -> Category | None:
        with self._lock:
            for category in self._categories.values():
                if category.owner_id == owner_id and category.name == name and category.type == txn_type:
                    return replace(category)
        return None

    def add_category(self, owner_id: str, template: CategoryTemplate) -> Category:
        with self._lock:
            category = self._new_category(owner_id, template)
            self._categories[category.id] = category
            return replace(category)

    def save_category(self, category: Category) -> Category:
        with self._lock:
            if category.id not in self._categories:
                raise LedgerStoreError(f"Category {category.id} does not exist")
            self._categories[category.id] = replace(category)
        return category

    def delete_category(self, owner_id: str, category_id: int) -> bool:
        with self._lock:
            category = self._categories.get(category_id)
            if category is None or category.owner_id != owner_id:
                return False
            del self._categories[category_id]
            return True

    def category_has_transactions(self, category_id: int) -> bool:
        with self._lock:
            return any(txn.category_id == category_id for txn in self._transactions.values())

    def get_transaction(self, owner_id: str, transaction_id: int) -> Transaction | None:
        with self._lock:
            txn = self._transactions.get(transaction_id)
            if txn is None or txn.owner_id != owner_id:
                return None
            return replace(txn)

    def add_transaction(self, transaction: Transaction) -> Transaction:
        with self._lock:
            stored = replace(transaction, id=next(self._transaction_ids))
            self._transactions[stored.id] = stored
            return replace(stored)

    def save_transaction(self, transaction: Transaction) -> Transaction:
        with self._lock:
            if transaction.id not in self._transactions:
                raise LedgerStoreError(f"Transaction {transaction.id} does not exist")
            self._transactions[transaction.id] = replace(transaction)
        return transaction

    def delete_transaction(self, owner_id: str, transaction_id: int) -> bool:
        with self._lock:
            txn = self._transactions.get(transaction_id)
            if txn is None or txn.owner_id != owner_id:
                return False
            del self._transactions[transaction_id]
            return True

    def _new_category(self, owner_id: str, template: CategoryTemplate) -> Category:
        return Category(
            id=next(self._category_ids),
            owner_id=owner_id,
            name=template.name,
            type=template.type,
            color=template.color,
            icon=template.icon,
        )
