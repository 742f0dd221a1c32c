from dataclasses import replace
from decimal import Decimal

from budgeting.domain import SavingsGoal
from budgeting.transforms import parse_amount, round_money

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def goal_progress(goal: SavingsGoal) -> Decimal:
    """Percent of the target saved, capped at 100."""
    target = parse_amount(goal.target_amount)
    if target <= 0:
        return ZERO
    return round_money(min(HUNDRED, parse_amount(goal.current_amount) / target * HUNDRED))


def contribute(goal: SavingsGoal, amount) -> SavingsGoal:
    """Add (or, with a negative amount, withdraw) savings; never below zero."""
    current = parse_amount(goal.current_amount) + parse_amount(amount)
    return replace(goal, current_amount=max(ZERO, current))


def is_goal_reached(goal: SavingsGoal) -> bool:
    return parse_amount(goal.current_amount) >= parse_amount(goal.target_amount)
