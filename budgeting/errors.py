from typing import Any, Sequence


class BudgetError(Exception):
    """Base class for every error raised by the budgeting core."""


class ValidationError(BudgetError):
    """Malformed budget or goal input. Carries every violation found."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("Validation failed: " + ", ".join(self.errors))


class InvalidBudgetError(BudgetError):
    """A stored budget cannot be aggregated because its amount is not positive."""

    def __init__(self, budget_id: str, amount: Any):
        self.budget_id = budget_id
        self.amount = amount
        super().__init__(f"Budget {budget_id} has invalid amount {amount!r}")


class InvalidTransactionError(BudgetError, ValueError):
    """A transaction matched a budget but its amount does not parse."""

    def __init__(self, transaction_id: str, amount: Any):
        self.transaction_id = transaction_id
        self.amount = amount
        super().__init__(f"Transaction {transaction_id} has invalid amount {amount!r}")


class MalformedDateError(BudgetError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Cannot parse date {value!r}")


class BudgetNotFoundError(BudgetError, KeyError):
    def __init__(self, budget_id: str):
        self.budget_id = budget_id
        super().__init__(f"Budget {budget_id} not found or not owned by user")

    def __str__(self) -> str:
        return self.args[0]
