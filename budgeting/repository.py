from typing import Dict, Protocol, Sequence, Tuple

from budgeting.domain import Budget, SavingsGoal, Transaction
from budgeting.errors import BudgetNotFoundError
from budgeting.transforms import add_transaction, load_seed, remove_by_id, replace_by_id


class TransactionSource(Protocol):
    def list_transactions(self, user_id: str) -> Sequence[Transaction]:
        ...


class BudgetRepository(Protocol):
    def list_budgets(self, user_id: str) -> Sequence[Budget]:
        ...

    def add_budget(self, user_id: str, budget: Budget) -> Budget:
        ...

    def replace_budget(self, user_id: str, budget: Budget) -> Budget:
        ...

    def remove_budget(self, user_id: str, budget_id: str) -> None:
        ...


class InMemoryRepository:
    """Per-user store backing both repository protocols.

    Collections are tuples replaced on every write, so a list handed out
    earlier is a stable snapshot.
    """

    def __init__(self):
        self._transactions: Dict[str, Tuple[Transaction, ...]] = {}
        self._budgets: Dict[str, Tuple[Budget, ...]] = {}
        self._goals: Dict[str, Tuple[SavingsGoal, ...]] = {}

    @classmethod
    def from_seed(cls, path: str) -> "InMemoryRepository":
        repo = cls()
        for user_id, (transactions, budgets, goals) in load_seed(path).items():
            repo._transactions[user_id] = transactions
            repo._budgets[user_id] = budgets
            repo._goals[user_id] = goals
        return repo

    def list_transactions(self, user_id: str) -> Tuple[Transaction, ...]:
        return self._transactions.get(user_id, ())

    def add_transaction(self, user_id: str, t: Transaction) -> Transaction:
        self._transactions[user_id] = add_transaction(self.list_transactions(user_id), t)
        return t

    def list_budgets(self, user_id: str) -> Tuple[Budget, ...]:
        return self._budgets.get(user_id, ())

    def add_budget(self, user_id: str, budget: Budget) -> Budget:
        self._budgets[user_id] = self.list_budgets(user_id) + (budget,)
        return budget

    def _require_budget(self, user_id: str, budget_id: str) -> None:
        if not any(b.id == budget_id for b in self.list_budgets(user_id)):
            raise BudgetNotFoundError(budget_id)

    def replace_budget(self, user_id: str, budget: Budget) -> Budget:
        self._require_budget(user_id, budget.id)
        self._budgets[user_id] = replace_by_id(self.list_budgets(user_id), budget)
        return budget

    def remove_budget(self, user_id: str, budget_id: str) -> None:
        self._require_budget(user_id, budget_id)
        self._budgets[user_id] = remove_by_id(self.list_budgets(user_id), budget_id)

    def list_goals(self, user_id: str) -> Tuple[SavingsGoal, ...]:
        return self._goals.get(user_id, ())

    def save_goal(self, user_id: str, goal: SavingsGoal) -> SavingsGoal:
        goals = self.list_goals(user_id)
        if any(g.id == goal.id for g in goals):
            self._goals[user_id] = replace_by_id(goals, goal)
        else:
            self._goals[user_id] = goals + (goal,)
        return goal
