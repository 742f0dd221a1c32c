import json
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Tuple

from budgeting.domain import Budget, DateLike, SavingsGoal, Transaction, TransactionType
from budgeting.errors import MalformedDateError
from budgeting.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
DEFAULT_USER = "demo"

_MISSING = object()

SeedData = Tuple[
    Tuple[Transaction, ...],
    Tuple[Budget, ...],
    Tuple[SavingsGoal, ...],
]


def pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key, so snake_case and camelCase rows both load."""
    for key in keys:
        value = record.get(key, _MISSING)
        if value is not _MISSING:
            return value
    return default


def parse_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO string to a calendar date.

    Time of day is dropped; a budget window is compared date-only.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise MalformedDateError(value) from None
    raise MalformedDateError(value)


def parse_amount(value: Any) -> Decimal:
    """Parse a finite decimal amount; raise ValueError otherwise."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    try:
        if isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return amount


_TRUE_FLAGS = ("true", "yes", "on", "1")
_FALSE_FLAGS = ("false", "no", "off", "0", "")


def parse_flag(value: Any) -> bool:
    """Read a stored boolean; strings like "false" are not truthy here."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_FLAGS:
            return True
        if text in _FALSE_FLAGS:
            return False
    raise ValueError(f"Not a boolean: {value!r}")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    raw_type = pick(record, "type")
    if raw_type is None:
        raise ValueError(f"Transaction {record.get('id')!r} has no type")
    return Transaction(
        id=str(record["id"]),
        amount=parse_amount(record["amount"]),
        category=record["category"],
        type=TransactionType(raw_type),
        date=parse_date(record["date"]),
        title=pick(record, "title", "description", default=""),
        created_at=pick(record, "created_at", "createdAt"),
    )


def _date_or_raw(value: Any) -> Any:
    try:
        return parse_date(value)
    except MalformedDateError:
        return value


def budget_from_record(record: Mapping[str, Any]) -> Budget:
    # A stored amount or date that no longer parses is kept raw; aggregation
    # rejects that one budget.
    raw_amount = record["amount"]
    try:
        amount = parse_amount(raw_amount)
    except ValueError:
        amount = raw_amount
    try:
        is_recurring = parse_flag(pick(record, "is_recurring", "isRecurring"))
    except ValueError:
        logger.warning("Budget %s has an unreadable recurring flag", record.get("id"))
        is_recurring = False
    return Budget(
        id=str(record["id"]),
        name=record["name"],
        category=record["category"],
        amount=amount,
        start_date=_date_or_raw(pick(record, "start_date", "startDate")),
        end_date=_date_or_raw(pick(record, "end_date", "endDate")),
        is_recurring=is_recurring,
        recurring_type=pick(record, "recurring_type", "recurringType") if is_recurring else None,
        created_at=pick(record, "created_at", "createdAt"),
    )


def goal_from_record(record: Mapping[str, Any]) -> SavingsGoal:
    return SavingsGoal(
        id=str(record["id"]),
        name=pick(record, "name", "title"),
        target_amount=parse_amount(pick(record, "target_amount", "targetAmount")),
        current_amount=parse_amount(pick(record, "current_amount", "currentAmount", default=0)),
        target_date=parse_date(pick(record, "target_date", "targetDate", "deadline")),
        category=record.get("category", ""),
    )


def _user_seed(data: Mapping[str, Any]) -> SeedData:
    transactions = tuple(transaction_from_record(t) for t in data.get("transactions", ()))
    budgets = tuple(budget_from_record(b) for b in data.get("budgets", ()))
    goals = tuple(goal_from_record(g) for g in data.get("goals", ()))
    return transactions, budgets, goals


def load_seed(path: str) -> Dict[str, SeedData]:
    """Load a JSON seed file keyed by user id.

    A document without a "users" mapping is treated as the DEFAULT_USER's data.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    users = data["users"] if "users" in data else {DEFAULT_USER: data}
    seeded = {str(user_id): _user_seed(user_data) for user_id, user_data in users.items()}
    logger.debug("Loaded seed %s for %d user(s)", path, len(seeded))
    return seeded


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def replace_by_id(items: Tuple[Any, ...], item: Any) -> Tuple[Any, ...]:
    return tuple(item if existing.id == item.id else existing for existing in items)


def remove_by_id(items: Tuple[Any, ...], item_id: str) -> Tuple[Any, ...]:
    return tuple(filter(lambda existing: existing.id != item_id, items))
