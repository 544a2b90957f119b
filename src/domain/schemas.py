from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.models import TransactionType


class DateRange(BaseModel):
    start: date = Field(description="Start date in YYYY-MM-DD format, e.g. 2026-01-31.")
    end: date = Field(description="End date in YYYY-MM-DD format, e.g. 2026-01-31.")

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            return value

        text = value.strip()
        if not text:
            return value

        # Canonical format first.
        for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m-%d-%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("date_range.start must be <= date_range.end")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class CategoryInput(BaseModel):
    name: str = Field(min_length=1)
    type: TransactionType
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def require_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Category name is required")
        return value


class TransactionInput(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2, description="Amount must be positive, in cents at most")
    description: Optional[str] = None
    date: date
    type: TransactionType
    category_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value


class CategoryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: str
    name: str
    type: TransactionType
    color: Optional[str] = None
    icon: Optional[str] = None


class TransactionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: str
    amount: Decimal
    date: date
    type: TransactionType
    description: Optional[str] = None
    category_id: Optional[int] = None


class ReportQuery(BaseModel):
    """
    Filters for a report request.

    - type: restricts the category statistics; None computes both types
    - date_range: inclusive day range applied to every fetch; None means all time
    """

    type: Optional[TransactionType] = None
    date_range: Optional[DateRange] = None


class Summary(BaseModel):
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    income_count: int = 0
    expense_count: int = 0
    transaction_count: int = 0


class CategoryStatistic(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    transaction_count: int = 0
    percentage: float = 0.0


class CategoryStatistics(BaseModel):
    type: Optional[TransactionType] = None
    categories: List[CategoryStatistic] = Field(default_factory=list)
    overall_total: Decimal = Decimal("0")


class ReportResponse(BaseModel):
    owner_id: str
    ok: bool = True
    query: ReportQuery = Field(default_factory=ReportQuery)
    summary: Optional[Summary] = None
    category_statistics: List[CategoryStatistics] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class SeedResult(BaseModel):
    created: bool
    message: str
