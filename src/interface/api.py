from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from application.categories import CategoryService
from application.reporting import ReportingService
from application.seeding import seed_default_categories
from application.transactions import TransactionService
from domain.errors import (
    CategoryInUseError, DuplicateCategoryError, InvalidCategoryError, LedgerError, NotFoundError,
)
from domain.models import Category, Transaction, TransactionType
from domain.schemas import (
    CategoryInput, CategoryRecord, DateRange, ReportQuery, TransactionInput, TransactionRecord,
)
from infrastructure.ledger_store.store import LedgerStore
from interface.cli import build_store

_STATUS_BY_ERROR: dict[type[LedgerError], int] = {
    NotFoundError: 404,
    DuplicateCategoryError: 409,
    CategoryInUseError: 409,
    InvalidCategoryError: 400,
}


def _category_json(category: Category) -> dict:
    return CategoryRecord.model_validate(category).model_dump(mode="json")


def _transaction_json(txn: Transaction) -> dict:
    # Same Decimal-as-string encoding the report uses.
    return TransactionRecord.model_validate(txn).model_dump(mode="json")


def _date_range(start: date | None, end: date | None) -> DateRange | None:
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise HTTPException(status_code=422, detail="start and end must be given together")
    try:
        return DateRange(start=start, end=end)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def create_app(store: LedgerStore | None = None) -> FastAPI:
    store = store or build_store()
    categories = CategoryService(store)
    transactions = TransactionService(store)
    reporting = ReportingService(store)

    app = FastAPI(title="Ledger Reports API")

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status = _STATUS_BY_ERROR.get(type(exc), 400)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # ---- categories ----
    @app.get("/owners/{owner_id}/categories")
    def list_categories(owner_id: str, type: Optional[TransactionType] = None) -> list[dict]:
        return [_category_json(c) for c in categories.list_categories(owner_id, type)]

    @app.post("/owners/{owner_id}/categories", status_code=201)
    def create_category(owner_id: str, payload: CategoryInput) -> dict:
        return _category_json(categories.create_category(owner_id, payload))

    @app.post("/owners/{owner_id}/categories/defaults")
    def create_default_categories(owner_id: str) -> dict:
        return seed_default_categories(store, owner_id).model_dump()

    @app.get("/owners/{owner_id}/categories/{category_id}")
    def get_category(owner_id: str, category_id: int) -> dict:
        return _category_json(categories.get_category(owner_id, category_id))

    @app.put("/owners/{owner_id}/categories/{category_id}")
    def update_category(owner_id: str, category_id: int, payload: CategoryInput) -> dict:
        return _category_json(categories.update_category(owner_id, category_id, payload))

    @app.delete("/owners/{owner_id}/categories/{category_id}")
    def delete_category(owner_id: str, category_id: int) -> dict:
        categories.delete_category(owner_id, category_id)
        return {"success": True}

    # ---- transactions ----
    @app.get("/owners/{owner_id}/transactions")
    def list_transactions(
        owner_id: str,
        type: Optional[TransactionType] = None,
        category_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        rows = transactions.list_transactions(
            owner_id, date_range=_date_range(start, end), txn_type=type, category_id=category_id
        )
        return [_transaction_json(t) for t in rows]

    @app.get("/owners/{owner_id}/transactions/recent")
    async def recent_transactions(owner_id: str, limit: Optional[int] = Query(default=None, gt=0)) -> list[dict]:
        return [_transaction_json(t) for t in await reporting.recent_transactions(owner_id, limit)]

    @app.post("/owners/{owner_id}/transactions", status_code=201)
    def create_transaction(owner_id: str, payload: TransactionInput) -> dict:
        return _transaction_json(transactions.create_transaction(owner_id, payload))

    @app.get("/owners/{owner_id}/transactions/{transaction_id}")
    def get_transaction(owner_id: str, transaction_id: int) -> dict:
        return _transaction_json(transactions.get_transaction(owner_id, transaction_id))

    @app.put("/owners/{owner_id}/transactions/{transaction_id}")
    def update_transaction(owner_id: str, transaction_id: int, payload: TransactionInput) -> dict:
        return _transaction_json(transactions.update_transaction(owner_id, transaction_id, payload))

    @app.delete("/owners/{owner_id}/transactions/{transaction_id}")
    def delete_transaction(owner_id: str, transaction_id: int) -> dict:
        transactions.delete_transaction(owner_id, transaction_id)
        return {"success": True}

    # ---- reports ----
    @app.get("/owners/{owner_id}/report")
    async def report(
        owner_id: str,
        type: Optional[TransactionType] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> JSONResponse:
        query = ReportQuery(type=type, date_range=_date_range(start, end))
        result = await reporting.build_report(owner_id, query)
        return JSONResponse(status_code=200 if result.ok else 503, content=result.model_dump(mode="json"))

    return app


app = create_app()
