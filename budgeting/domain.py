from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

DateLike = Union[date, str]

BUDGET_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Bills & Utilities",
    "Healthcare",
    "Other",
)

EXTENDED_CATEGORIES = BUDGET_CATEGORIES + (
    "Education",
    "Travel",
    "Personal Care",
    "Gifts & Donations",
    "Business",
)

RECURRING_TYPES = ("weekly", "monthly", "yearly")


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class SpendStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Decimal          # magnitude, direction comes from type
    category: str
    type: TransactionType
    date: DateLike
    title: str = ""
    created_at: Optional[str] = None


# A spending cap for one category over an inclusive date window
@dataclass(frozen=True)
class Budget:
    id: str
    name: str
    category: str
    amount: Decimal
    start_date: DateLike
    end_date: DateLike
    is_recurring: bool = False
    recurring_type: Optional[str] = None  # weekly / monthly / yearly
    created_at: Optional[str] = None


@dataclass(frozen=True)
class BudgetStatus:
    budget_id: str
    total_spent: Decimal
    percentage: Decimal
    remaining: Decimal
    status: SpendStatus
    transaction_count: int
    transactions: tuple[Transaction, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: DateLike
    category: str = ""


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    income: Decimal
    expenses: Decimal
    net_savings: Decimal


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    month: str  # YYYY-MM
    income: Decimal
    expenses: Decimal
    net_savings: Decimal
