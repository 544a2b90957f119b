from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from domain.models import Category, CategoryTemplate, Transaction, TransactionType
from domain.schemas import DateRange


class LedgerStore(ABC):
    """
    Storage contract for owner-scoped categories and transactions.

    Every method takes the owner explicitly. Adapters raise LedgerStoreError
    when the backing storage fails; an empty result is never an error.
    Categories come back ordered by name, transactions newest first.
    """

    name: str = "store"

    # ---- reporting reads ----
    @abstractmethod
    def find_transactions(
        self,
        owner_id: str,
        txn_type: TransactionType | None = None,
        date_range: DateRange | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        raise NotImplementedError

    @abstractmethod
    def find_categories(self, owner_id: str, txn_type: TransactionType | None = None) -> list[Category]:
        raise NotImplementedError

    @abstractmethod
    def count_categories(self, owner_id: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def bulk_insert_categories(self, owner_id: str, templates: Sequence[CategoryTemplate]) -> list[Category]:
        """Insert all templates or none of them."""
        raise NotImplementedError

    # ---- categories ----
    @abstractmethod
    def get_category(self, owner_id: str, category_id: int) -> Category | None:
        raise NotImplementedError

    @abstractmethod
    def find_category_by_name(self, owner_id: str, name: str, txn_type: TransactionType) -> Category | None:
        raise NotImplementedError

    @abstractmethod
    def add_category(self, owner_id: str, template: CategoryTemplate) -> Category:
        raise NotImplementedError

    @abstractmethod
    def save_category(self, category: Category) -> Category:
        raise NotImplementedError

    @abstractmethod
    def delete_category(self, owner_id: str, category_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def category_has_transactions(self, category_id: int) -> bool:
        raise NotImplementedError

    # ---- transactions ----
    @abstractmethod
    def get_transaction(self, owner_id: str, transaction_id: int) -> Transaction | None:
        raise NotImplementedError

    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction; the incoming id is ignored and a fresh one assigned."""
        raise NotImplementedError

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> Transaction:
        raise NotImplementedError

    @abstractmethod
    def delete_transaction(self, owner_id: str, transaction_id: int) -> bool:
        raise NotImplementedError
