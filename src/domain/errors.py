from __future__ import annotations


class LedgerContractError(ValueError):
    """Raised when the aggregator receives data the store should never have let through."""


class LedgerStoreError(RuntimeError):
    pass


class LedgerError(Exception):
    pass


class NotFoundError(LedgerError):
    pass


class DuplicateCategoryError(LedgerError):
    pass


class CategoryInUseError(LedgerError):
    pass


class InvalidCategoryError(LedgerError):
    pass
