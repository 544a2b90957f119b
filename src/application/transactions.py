from __future__ import annotations

import logging

from domain.errors import InvalidCategoryError, NotFoundError
from domain.models import Transaction, TransactionType
from domain.schemas import DateRange, TransactionInput
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, store: LedgerStore):
        self._store = store

    def list_transactions(
        self,
        owner_id: str,
        date_range: DateRange | None = None,
        txn_type: TransactionType | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        return self._store.find_transactions(
            owner_id, txn_type=txn_type, date_range=date_range, category_id=category_id
        )

    def get_transaction(self, owner_id: str, transaction_id: int) -> Transaction:
        txn = self._store.get_transaction(owner_id, transaction_id)
        if txn is None:
            raise NotFoundError("Transaction not found")
        return txn

    def create_transaction(self, owner_id: str, data: TransactionInput) -> Transaction:
        self._check_category(owner_id, data)
        txn = self._store.add_transaction(
            Transaction(
                id=0,
                owner_id=owner_id,
                amount=data.amount,
                date=data.date,
                type=data.type,
                description=data.description,
                category_id=data.category_id,
            )
        )
        logger.info("Transaction created owner_id=%s id=%s type=%s", owner_id, txn.id, txn.type.value)
        return txn

    def update_transaction(self, owner_id: str, transaction_id: int, data: TransactionInput) -> Transaction:
        txn = self.get_transaction(owner_id, transaction_id)
        self._check_category(owner_id, data)
        txn.amount = data.amount
        txn.date = data.date
        txn.type = data.type
        txn.description = data.description
        txn.category_id = data.category_id
        return self._store.save_transaction(txn)

    def delete_transaction(self, owner_id: str, transaction_id: int) -> None:
        if not self._store.delete_transaction(owner_id, transaction_id):
            raise NotFoundError("Transaction not found")
        logger.info("Transaction deleted owner_id=%s id=%s", owner_id, transaction_id)

    def _check_category(self, owner_id: str, data: TransactionInput) -> None:
        if data.category_id is None:
            return
        category = self._store.get_category(owner_id, data.category_id)
        if category is None:
            raise InvalidCategoryError("Invalid category")
        # Category statistics group by the category's type, so the two must agree.
        if category.type != data.type:
            raise InvalidCategoryError(
                f"Category {category.name!r} is {category.type.value}, transaction is {data.type.value}"
            )
