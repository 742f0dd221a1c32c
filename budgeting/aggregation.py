from decimal import Decimal
from typing import Iterable

from budgeting.domain import Budget, BudgetStatus, SpendStatus, Transaction
from budgeting.errors import InvalidBudgetError, InvalidTransactionError
from budgeting.filters import all_of, by_category, by_date_range, expenses, iter_transactions
from budgeting.transforms import parse_amount, round_money

WARNING_THRESHOLD = Decimal("80")
EXCEEDED_THRESHOLD = Decimal("100")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def classify_status(percentage: Decimal) -> SpendStatus:
    if percentage >= EXCEEDED_THRESHOLD:
        return SpendStatus.EXCEEDED
    if percentage >= WARNING_THRESHOLD:
        return SpendStatus.WARNING
    return SpendStatus.GOOD


def budget_limit(budget: Budget) -> Decimal:
    """The budget's amount as a positive Decimal, or InvalidBudgetError."""
    try:
        limit = parse_amount(budget.amount)
    except ValueError:
        raise InvalidBudgetError(budget.id, budget.amount) from None
    if limit <= 0:
        raise InvalidBudgetError(budget.id, budget.amount)
    return limit


def spent_amount(t: Transaction) -> Decimal:
    try:
        return abs(parse_amount(t.amount))
    except ValueError:
        raise InvalidTransactionError(t.id, t.amount) from None


def matching_transactions(
    budget: Budget, transactions: Iterable[Transaction]
) -> tuple[Transaction, ...]:
    """Expenses in the budget's category dated inside its inclusive window."""
    pred = all_of(
        expenses,
        by_category(budget.category),
        by_date_range(budget.start_date, budget.end_date),
    )
    return tuple(iter_transactions(transactions, pred))


def compute_spend(budget: Budget, transactions: Iterable[Transaction]) -> BudgetStatus:
    """Project how much of one budget's cap the transactions consume.

    Amounts are summed as magnitudes, so rows stored with a negative sign
    for expenses count the same as positive ones. The status is classified
    from the unrounded percentage; only the reported figures are rounded.

    Raises InvalidBudgetError for a non-positive amount,
    MalformedDateError when a relevant date cannot be parsed and
    InvalidTransactionError when a matching amount cannot be parsed.
    """
    limit = budget_limit(budget)
    matched = matching_transactions(budget, transactions)

    spent = sum((spent_amount(t) for t in matched), ZERO)
    raw_percentage = spent / limit * HUNDRED
    total_spent = round_money(spent)
    percentage = round_money(raw_percentage)
    remaining = round_money(max(ZERO, limit - spent))

    return BudgetStatus(
        budget_id=budget.id,
        total_spent=total_spent,
        percentage=percentage,
        remaining=remaining,
        status=classify_status(raw_percentage),
        transaction_count=len(matched),
        transactions=matched,
    )
