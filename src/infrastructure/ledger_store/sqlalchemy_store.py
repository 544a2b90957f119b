from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence

from sqlalchemy import (
    Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text,
    UniqueConstraint, create_engine,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from domain.errors import LedgerStoreError
from domain.models import Category, CategoryTemplate, Transaction, TransactionType
from domain.schemas import DateRange
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)

Base = declarative_base()

transaction_type_enum = Enum(TransactionType, name="transaction_type")


class CategoryRow(Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("owner_id", "name", "type", name="uq_category_owner_name_type"),)

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), index=True, nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(transaction_type_enum, nullable=False)
    color = Column(String(32))
    icon = Column(String(64))


class TransactionRow(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), index=True, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(Text)
    date = Column(Date, index=True, nullable=False)
    type = Column(transaction_type_enum, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True)


def _to_category(row: CategoryRow) -> Category:
    return Category(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        type=row.type,
        color=row.color,
        icon=row.icon,
    )


def _to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        owner_id=row.owner_id,
        amount=row.amount,
        date=row.date,
        type=row.type,
        description=row.description,
        category_id=row.category_id,
    )


class SqlAlchemyLedgerStore(LedgerStore):
    """Relational store. One session per call; SQLAlchemy failures surface as LedgerStoreError."""

    name = "sqlalchemy"

    def __init__(self, database_url: str, echo: bool = False) -> None:
        engine_kwargs: dict = {"echo": echo, "future": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
                engine_kwargs["poolclass"] = StaticPool
        self._engine = create_engine(database_url, **engine_kwargs)
        self._sessions = sessionmaker(bind=self._engine, autoflush=False, expire_on_commit=False)

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        Base.metadata.create_all(bind=self._engine)

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._sessions()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as exc:
            logger.warning("SqlAlchemy store operation failed: %s", exc)
            raise LedgerStoreError(f"Ledger store failure: {exc}") from exc
        finally:
            session.close()

    def find_transactions(
        self,
        owner_id: str,
        txn_type: TransactionType | None = None,
        date_range: DateRange | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        with self._session() as session:
            query = session.query(TransactionRow).filter(TransactionRow.owner_id == owner_id)
            if txn_type is not None:
                query = query.filter(TransactionRow.type == txn_type)
            if date_range is not None:
                query = query.filter(TransactionRow.date >= date_range.start, TransactionRow.date <= date_range.end)
            if category_id is not None:
                query = query.filter(TransactionRow.category_id == category_id)
            rows = query.order_by(TransactionRow.date.desc(), TransactionRow.id.desc()).all()
            return [_to_transaction(row) for row in rows]

    def find_categories(self, owner_id: str, txn_type: TransactionType | None = None) -> list[Category]:
        with self._session() as session:
            query = session.query(CategoryRow).filter(CategoryRow.owner_id == owner_id)
            if txn_type is not None:
                query = query.filter(CategoryRow.type == txn_type)
            rows = query.all()
        # Sorted in Python so name order is ordinal regardless of the database collation.
        return sorted((_to_category(row) for row in rows), key=lambda c: (c.name, c.id))

    def count_categories(self, owner_id: str) -> int:
        with self._session() as session:
            return session.query(CategoryRow).filter(CategoryRow.owner_id == owner_id).count()

    def bulk_insert_categories(self, owner_id: str, templates: Sequence[CategoryTemplate]) -> list[Category]:
        with self._session() as session:
            rows = [self._category_row(owner_id, template) for template in templates]
            session.add_all(rows)
            session.flush()
            created = [_to_category(row) for row in rows]
        logger.info("SqlAlchemy store inserted categories owner_id=%s count=%d", owner_id, len(created))
        return created

    def get_category(self, owner_id: str, category_id: int) -> Category | None:
        with self._session() as session:
            row = session.query(CategoryRow).filter(
                CategoryRow.id == category_id, CategoryRow.owner_id == owner_id
            ).first()
            return _to_category(row) if row else None

    def find_category_by_name(self, owner_id: str, name: str, txn_type: TransactionType) -> Category | None:
        with self._session() as session:
            row = session.query(CategoryRow).filter(
                CategoryRow.owner_id == owner_id, CategoryRow.name == name, CategoryRow.type == txn_type
            ).first()
            return _to_category(row) if row else None

    def add_category(self, owner_id: str, template: CategoryTemplate) -> Category:
        with self._session() as session:
            row = self._category_row(owner_id, template)
            session.add(row)
            session.flush()
            return _to_category(row)

    def save_category(self, category: Category) -> Category:
        with self._session() as session:
            row = session.get(CategoryRow, category.id)
            if row is None:
                raise LedgerStoreError(f"Category {category.id} does not exist")
            row.name = category.name
            row.type = category.type
            row.color = category.color
            row.icon = category.icon
        return category

    def delete_category(self, owner_id: str, category_id: int) -> bool:
        with self._session() as session:
            deleted = session.query(CategoryRow).filter(
                CategoryRow.id == category_id, CategoryRow.owner_id == owner_id
            ).delete()
            return bool(deleted)

    def category_has_transactions(self, category_id: int) -> bool:
        with self._session() as session:
            return session.query(TransactionRow.id).filter(TransactionRow.category_id == category_id).first() is not None

    def get_transaction(self, owner_id: str, transaction_id: int) -> Transaction | None:
        with self._session() as session:
            row = session.query(TransactionRow).filter(
                TransactionRow.id == transaction_id, TransactionRow.owner_id == owner_id
            ).first()
            return _to_transaction(row) if row else None

    def add_transaction(self, transaction: Transaction) -> Transaction:
        with self._session() as session:
            row = TransactionRow(
                owner_id=transaction.owner_id,
                amount=transaction.amount,
                description=transaction.description,
                date=transaction.date,
                type=transaction.type,
                category_id=transaction.category_id,
            )
            session.add(row)
            session.flush()
            return _to_transaction(row)

    def save_transaction(self, transaction: Transaction) -> Transaction:
        with self._session() as session:
            row = session.get(TransactionRow, transaction.id)
            if row is None:
                raise LedgerStoreError(f"Transaction {transaction.id} does not exist")
            row.amount = transaction.amount
            row.description = transaction.description
            row.date = transaction.date
            row.type = transaction.type
            row.category_id = transaction.category_id
        return transaction

    def delete_transaction(self, owner_id: str, transaction_id: int) -> bool:
        with self._session() as session:
            deleted = session.query(TransactionRow).filter(
                TransactionRow.id == transaction_id, TransactionRow.owner_id == owner_id
            ).delete()
            return bool(deleted)

    def _category_row(self, owner_id: str, template: CategoryTemplate) -> CategoryRow:
        return CategoryRow(
            owner_id=owner_id,
            name=template.name,
            type=template.type,
            color=template.color,
            icon=template.icon,
        )
