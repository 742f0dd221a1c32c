from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Sequence

from budgeting.aggregation import compute_spend
from budgeting.domain import BUDGET_CATEGORIES, Budget, BudgetStatus, CategoryTotal, MonthlySummary, MonthlyTotals
from budgeting.errors import BudgetNotFoundError, MalformedDateError, ValidationError
from budgeting.functional import Maybe, find_first
from budgeting.logging import get_logger
from budgeting.projection import project_budgets
from budgeting.reports import expenses_by_category, monthly_summary, monthly_totals
from budgeting.repository import BudgetRepository, TransactionSource
from budgeting.transforms import parse_date
from budgeting.validation import build_budget, validate_budget

logger = get_logger(__name__)

Validator = Callable[[Mapping[str, Any]], Sequence[str]]


def windows_overlap(a: Budget, b: Budget) -> bool:
    """False when either window holds a date that no longer parses."""
    try:
        return parse_date(a.start_date) <= parse_date(b.end_date) and parse_date(a.end_date) >= parse_date(b.start_date)
    except MalformedDateError:
        return False


class BudgetService:
    """Facade for budget CRUD and status reports over injected repositories.

    extra_validators: functions taking the raw form mapping -> Sequence[str];
    their messages are appended to the built-in budget validation.
    """

    def __init__(
        self,
        transactions: TransactionSource,
        budgets: BudgetRepository,
        categories: Sequence[str] = BUDGET_CATEGORIES,
        extra_validators: Sequence[Validator] = (),
    ):
        self.transactions = transactions
        self.budgets = budgets
        self.categories = tuple(categories)
        self.extra_validators = tuple(extra_validators)

    def validate(self, data: Mapping[str, Any]) -> List[str]:
        errors = validate_budget(data, self.categories)
        for v in self.extra_validators:
            errors.extend(v(data))
        return errors

    def _build(self, data: Mapping[str, Any], budget_id=None, created_at=None) -> Budget:
        errors = self.validate(data)
        if errors:
            raise ValidationError(errors)
        return build_budget(data, budget_id=budget_id, categories=self.categories, created_at=created_at)

    def get_budgets(self, user_id: str) -> Sequence[Budget]:
        return self.budgets.list_budgets(user_id)

    def create_budget(self, user_id: str, data: Mapping[str, Any]) -> Budget:
        budget = self._build(data, created_at=datetime.now().isoformat())

        overlapping = [
            b for b in self.budgets.list_budgets(user_id)
            if b.category == budget.category and windows_overlap(b, budget)
        ]
        if overlapping:
            # allowed, but worth flagging
            logger.warning(
                "Found %d overlapping budget(s) for category %r",
                len(overlapping), budget.category,
                extra={"user_id": user_id, "category": budget.category},
            )

        self.budgets.add_budget(user_id, budget)
        logger.info("Budget created", extra={"user_id": user_id, "budget_id": budget.id})
        return budget

    def update_budget(self, user_id: str, budget_id: str, data: Mapping[str, Any]) -> Budget:
        if not budget_id:
            raise ValueError("Budget ID is required")
        existing = find_first(self.budgets.list_budgets(user_id), lambda b: b.id == budget_id)
        if existing.is_none():
            raise BudgetNotFoundError(budget_id)

        budget = self._build(data, budget_id=budget_id, created_at=existing.get_or_else(None).created_at)
        self.budgets.replace_budget(user_id, budget)
        logger.info("Budget updated", extra={"user_id": user_id, "budget_id": budget_id})
        return budget

    def delete_budget(self, user_id: str, budget_id: str) -> None:
        if not budget_id:
            raise ValueError("Budget ID is required")
        self.budgets.remove_budget(user_id, budget_id)
        logger.info("Budget deleted", extra={"user_id": user_id, "budget_id": budget_id})

    def budget_status(self, user_id: str, budget_id: str) -> Maybe[BudgetStatus]:
        """Drill-down for one budget. Aggregation errors propagate."""
        transactions = tuple(self.transactions.list_transactions(user_id))
        return find_first(
            self.budgets.list_budgets(user_id), lambda b: b.id == budget_id
        ).map(lambda b: compute_spend(b, transactions))

    def budget_report(self, user_id: str) -> Dict[str, Any]:
        """Statuses for all of a user's budgets plus the ones that failed."""
        results = project_budgets(
            self.budgets.list_budgets(user_id),
            self.transactions.list_transactions(user_id),
        )
        report: Dict[str, Any] = {"user_id": user_id, "statuses": [], "errors": []}
        for budget_id, outcome in results:
            if outcome.is_right():
                report["statuses"].append(outcome.unwrap())
            else:
                report["errors"].append({"budget_id": budget_id, "error": str(outcome.get_error())})
        return report


class ReportService:
    """Summaries over one user's transactions for the overview screens."""

    def __init__(self, transactions: TransactionSource):
        self.transactions = transactions

    def monthly_summary(self, user_id: str, year: int, month: int) -> MonthlySummary:
        return monthly_summary(self.transactions.list_transactions(user_id), year, month)

    def category_breakdown(self, user_id: str) -> Sequence[CategoryTotal]:
        return expenses_by_category(self.transactions.list_transactions(user_id))

    def monthly_trend(self, user_id: str) -> Sequence[MonthlyTotals]:
        return monthly_totals(self.transactions.list_transactions(user_id))
