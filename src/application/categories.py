from __future__ import annotations

import logging

from domain.errors import CategoryInUseError, DuplicateCategoryError, NotFoundError
from domain.models import Category, CategoryTemplate, TransactionType
from domain.schemas import CategoryInput
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A category with this name and type already exists"


class CategoryService:
    """Owner-scoped category management. Names are unique per owner and type."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def list_categories(self, owner_id: str, txn_type: TransactionType | None = None) -> list[Category]:
        return self._store.find_categories(owner_id, txn_type)

    def get_category(self, owner_id: str, category_id: int) -> Category:
        category = self._store.get_category(owner_id, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, owner_id: str, data: CategoryInput) -> Category:
        if self._store.find_category_by_name(owner_id, data.name, data.type) is not None:
            raise DuplicateCategoryError(DUPLICATE_MESSAGE)

        category = self._store.add_category(
            owner_id,
            CategoryTemplate(name=data.name, type=data.type, color=data.color, icon=data.icon),
        )
        logger.info("Category created owner_id=%s id=%s type=%s", owner_id, category.id, category.type.value)
        return category

    def update_category(self, owner_id: str, category_id: int, data: CategoryInput) -> Category:
        category = self.get_category(owner_id, category_id)
        duplicate = self._store.find_category_by_name(owner_id, data.name, data.type)
        if duplicate is not None and duplicate.id != category_id:
            raise DuplicateCategoryError(DUPLICATE_MESSAGE)
        if data.type != category.type and self._store.category_has_transactions(category_id):
            raise CategoryInUseError("The type of a category cannot change while transactions use it")

        category.name = data.name
        category.type = data.type
        category.color = data.color
        category.icon = data.icon
        return self._store.save_category(category)

    def delete_category(self, owner_id: str, category_id: int) -> None:
        self.get_category(owner_id, category_id)
        if self._store.category_has_transactions(category_id):
            raise CategoryInUseError(
                "This category cannot be deleted because it is being used in transactions"
            )
        self._store.delete_category(owner_id, category_id)
        logger.info("Category deleted owner_id=%s id=%s", owner_id, category_id)
