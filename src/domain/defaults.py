from __future__ import annotations

from domain.models import CategoryTemplate, TransactionType

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE

DEFAULT_CATEGORIES: tuple[CategoryTemplate, ...] = (
    CategoryTemplate(name="Salary", type=INCOME, color="#4CAF50", icon="wallet"),
    CategoryTemplate(name="Investments", type=INCOME, color="#2196F3", icon="trending-up"),
    CategoryTemplate(name="Gifts", type=INCOME, color="#9C27B0", icon="gift"),
    CategoryTemplate(name="Other Income", type=INCOME, color="#607D8B", icon="plus-circle"),
    CategoryTemplate(name="Food & Dining", type=EXPENSE, color="#FF9800", icon="utensils"),
    CategoryTemplate(name="Housing", type=EXPENSE, color="#795548", icon="home"),
    CategoryTemplate(name="Transportation", type=EXPENSE, color="#F44336", icon="car"),
    CategoryTemplate(name="Entertainment", type=EXPENSE, color="#673AB7", icon="film"),
    CategoryTemplate(name="Shopping", type=EXPENSE, color="#E91E63", icon="shopping-bag"),
    CategoryTemplate(name="Utilities", type=EXPENSE, color="#00BCD4", icon="power"),
    CategoryTemplate(name="Healthcare", type=EXPENSE, color="#8BC34A", icon="activity"),
    CategoryTemplate(name="Personal", type=EXPENSE, color="#3F51B5", icon="user"),
    CategoryTemplate(name="Education", type=EXPENSE, color="#009688", icon="book"),
    CategoryTemplate(name="Other Expenses", type=EXPENSE, color="#9E9E9E", icon="more-horizontal"),
)
