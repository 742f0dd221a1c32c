import asyncio
from typing import Iterable, Sequence, Tuple

from budgeting.aggregation import compute_spend
from budgeting.domain import Budget, BudgetStatus, Transaction
from budgeting.errors import BudgetError, InvalidBudgetError, InvalidTransactionError, MalformedDateError
from budgeting.functional import Either, attempt
from budgeting.logging import get_logger

logger = get_logger(__name__)

ProjectionResult = Tuple[str, Either[BudgetError, BudgetStatus]]

# Per-budget failures that are reported instead of aborting the batch
ISOLATED_ERRORS = (InvalidBudgetError, InvalidTransactionError, MalformedDateError)


def project_budget(budget: Budget, transactions: Sequence[Transaction]) -> ProjectionResult:
    outcome = attempt(compute_spend, budget, transactions, catch=ISOLATED_ERRORS)
    if outcome.is_left():
        logger.warning(
            "Budget %s skipped: %s", budget.id, outcome.get_error(),
            extra={"budget_id": budget.id},
        )
    return budget.id, outcome


def project_budgets(
    budgets: Iterable[Budget], transactions: Iterable[Transaction]
) -> Tuple[ProjectionResult, ...]:
    """Compute every budget's status, one result per budget in input order.

    Budgets sharing a category are still reported separately.
    """
    snapshot = tuple(transactions)
    return tuple(project_budget(b, snapshot) for b in budgets)


async def project_budgets_async(
    budgets: Iterable[Budget], transactions: Iterable[Transaction]
) -> Tuple[ProjectionResult, ...]:
    """Same contract as project_budgets with one task per budget.

    asyncio.gather returns results in submission order, so the output
    lines up with the input whatever order the tasks finish in.
    """
    snapshot = tuple(transactions)

    async def one(b: Budget) -> ProjectionResult:
        await asyncio.sleep(0)  # cooperate
        return project_budget(b, snapshot)

    results = await asyncio.gather(*(one(b) for b in budgets))
    return tuple(results)


def successful_statuses(results: Iterable[ProjectionResult]) -> Tuple[BudgetStatus, ...]:
    return tuple(outcome.unwrap() for _, outcome in results if outcome.is_right())


def failed_budgets(results: Iterable[ProjectionResult]) -> Tuple[Tuple[str, BudgetError], ...]:
    return tuple((bid, outcome.get_error()) for bid, outcome in results if outcome.is_left())
