from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


@dataclass
class Category:
    id: int
    owner_id: str
    name: str
    type: TransactionType
    color: str | None = None
    icon: str | None = None


@dataclass
class Transaction:
    id: int
    owner_id: str
    amount: Decimal
    date: date
    type: TransactionType
    description: str | None = None
    category_id: int | None = None


@dataclass(frozen=True)
class CategoryTemplate:
    name: str
    type: TransactionType
    color: str | None = None
    icon: str | None = None
