from typing import Any, List, Mapping, Optional, Sequence
from uuid import uuid4

from budgeting.domain import BUDGET_CATEGORIES, RECURRING_TYPES, Budget
from budgeting.errors import MalformedDateError, ValidationError
from budgeting.transforms import parse_amount, parse_date, parse_flag, pick


def _parsed_date(value: Any):
    if value is None or value == "":
        return None
    try:
        return parse_date(value)
    except MalformedDateError:
        return None


def _positive_amount(value: Any) -> bool:
    try:
        return parse_amount(value) > 0
    except ValueError:
        return False


def _recurring_flag(data: Mapping[str, Any]) -> Optional[bool]:
    try:
        return parse_flag(pick(data, "is_recurring", "isRecurring"))
    except ValueError:
        return None


def validate_budget(
    data: Mapping[str, Any], categories: Sequence[str] = BUDGET_CATEGORIES
) -> List[str]:
    """Collect every problem with a budget form; an empty list means valid.

    Keys may be snake_case or camelCase. Nothing short-circuits, so the
    caller can show all problems at once.
    """
    errors: List[str] = []

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Budget name is required and must be a non-empty string")

    if data.get("category") not in categories:
        errors.append(f"Category must be one of: {', '.join(categories)}")

    if not _positive_amount(data.get("amount")):
        errors.append("Amount must be a positive number")

    start = _parsed_date(pick(data, "start_date", "startDate"))
    end = _parsed_date(pick(data, "end_date", "endDate"))
    if start is None:
        errors.append("Start date is required and must be a valid date")
    if end is None:
        errors.append("End date is required and must be a valid date")
    if start is not None and end is not None and start >= end:
        errors.append("End date must be after start date")

    is_recurring = _recurring_flag(data)
    if is_recurring is None:
        errors.append("Recurring flag must be true or false")
    elif is_recurring:
        if pick(data, "recurring_type", "recurringType") not in RECURRING_TYPES:
            errors.append(f"Recurring type must be one of: {', '.join(RECURRING_TYPES)}")

    return errors


def build_budget(
    data: Mapping[str, Any],
    budget_id: Optional[str] = None,
    categories: Sequence[str] = BUDGET_CATEGORIES,
    created_at: Optional[str] = None,
) -> Budget:
    """Validate form input and normalise it into a Budget.

    Raises ValidationError with the full list of violations.
    """
    errors = validate_budget(data, categories)
    if errors:
        raise ValidationError(errors)

    is_recurring = bool(_recurring_flag(data))
    return Budget(
        id=budget_id or str(uuid4()),
        name=data["name"].strip(),
        category=data["category"],
        amount=parse_amount(data["amount"]),
        start_date=parse_date(pick(data, "start_date", "startDate")),
        end_date=parse_date(pick(data, "end_date", "endDate")),
        is_recurring=is_recurring,
        recurring_type=pick(data, "recurring_type", "recurringType") if is_recurring else None,
        created_at=created_at,
    )


def validate_goal(data: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []
    name = pick(data, "name", "title")
    if not isinstance(name, str) or not name.strip():
        errors.append("Goal name is required")
    if not _positive_amount(pick(data, "target_amount", "targetAmount")):
        errors.append("Target amount must be a positive number")
    if _parsed_date(pick(data, "target_date", "targetDate", "deadline")) is None:
        errors.append("Target date is required and must be a valid date")
    return errors
