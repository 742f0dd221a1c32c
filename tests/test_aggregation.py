from decimal import Decimal

import pytest

from budgeting.aggregation import classify_status, compute_spend, matching_transactions
from budgeting.domain import Budget, SpendStatus, Transaction, TransactionType
from budgeting.errors import InvalidBudgetError, InvalidTransactionError, MalformedDateError


def make_tx(id, amount, category="Food & Dining", type=TransactionType.EXPENSE, date="2024-01-10"):
    return Transaction(id=id, amount=Decimal(str(amount)), category=category, type=type, date=date)


def make_budget(amount=200, category="Food & Dining", start="2024-01-01", end="2024-01-31", id="b1"):
    return Budget(
        id=id,
        name="Food",
        category=category,
        amount=Decimal(str(amount)),
        start_date=start,
        end_date=end,
    )


def test_food_and_dining_scenario():
    budget = make_budget()
    transactions = (
        make_tx("t1", 50, date="2024-01-05"),
        make_tx("t2", 100, date="2024-01-20"),
        make_tx("t3", 30, category="Transportation", date="2024-01-10"),
        make_tx("t4", 1000, type=TransactionType.INCOME, date="2024-01-15"),
    )

    status = compute_spend(budget, transactions)

    assert status.budget_id == "b1"
    assert status.total_spent == Decimal("150.00")
    assert status.percentage == Decimal("75.00")
    assert status.remaining == Decimal("50.00")
    assert status.status == SpendStatus.GOOD
    assert status.transaction_count == 2
    assert [t.id for t in status.transactions] == ["t1", "t2"]


def test_compute_spend_is_idempotent():
    budget = make_budget()
    transactions = (make_tx("t1", "33.333"), make_tx("t2", "66.667"))

    first = compute_spend(budget, transactions)
    second = compute_spend(budget, transactions)

    assert first == second
    assert first.total_spent == Decimal("100.00")


def test_window_boundaries_are_inclusive():
    budget = make_budget()
    transactions = (
        make_tx("start", 10, date="2024-01-01"),
        make_tx("end", 20, date="2024-01-31"),
        make_tx("before", 40, date="2023-12-31"),
        make_tx("after", 80, date="2024-02-01"),
    )

    status = compute_spend(budget, transactions)

    assert {t.id for t in status.transactions} == {"start", "end"}
    assert status.total_spent == Decimal("30.00")


def test_income_and_other_categories_never_count():
    budget = make_budget()
    transactions = (
        make_tx("income", 500, type=TransactionType.INCOME),
        make_tx("transport", 500, category="Transportation"),
        make_tx("shopping", 500, category="Shopping", date="2024-01-01"),
    )

    status = compute_spend(budget, transactions)

    assert status.total_spent == Decimal("0.00")
    assert status.transaction_count == 0
    assert status.status == SpendStatus.GOOD
    assert status.remaining == Decimal("200.00")


@pytest.mark.parametrize(
    "spent, expected",
    [
        ("79.99", SpendStatus.GOOD),
        ("80.00", SpendStatus.WARNING),
        ("99.99", SpendStatus.WARNING),
        ("100.00", SpendStatus.EXCEEDED),
        ("150.00", SpendStatus.EXCEEDED),
    ],
)
def test_status_thresholds(spent, expected):
    budget = make_budget(amount=100)
    status = compute_spend(budget, (make_tx("t1", spent),))

    assert status.percentage == Decimal(spent)
    assert status.status == expected


def test_remaining_never_negative_when_overspent():
    budget = make_budget(amount=100)
    status = compute_spend(budget, (make_tx("t1", 150),))

    assert status.percentage == Decimal("150.00")
    assert status.remaining == Decimal("0.00")
    assert status.status == SpendStatus.EXCEEDED


def test_signed_expense_amounts_count_as_magnitude():
    budget = make_budget()
    status = compute_spend(budget, (make_tx("t1", -50), make_tx("t2", 25)))

    assert status.total_spent == Decimal("75.00")


def test_rounds_half_up_to_cents():
    budget = make_budget(amount=300)
    status = compute_spend(budget, (make_tx("t1", "0.005"), make_tx("t2", "10")))

    assert status.total_spent == Decimal("10.01")


def test_percentage_is_unbounded():
    budget = make_budget(amount=10)
    status = compute_spend(budget, (make_tx("t1", 55),))

    assert status.percentage == Decimal("550.00")


@pytest.mark.parametrize("amount", [0, -5, "abc", "NaN"])
def test_non_positive_amount_raises_invalid_budget(amount):
    budget = Budget(
        id="bad",
        name="Broken",
        category="Food & Dining",
        amount=amount,
        start_date="2024-01-01",
        end_date="2024-01-31",
    )

    with pytest.raises(InvalidBudgetError) as exc:
        compute_spend(budget, (make_tx("t1", 10),))
    assert exc.value.budget_id == "bad"


def test_malformed_budget_date_raises():
    budget = make_budget(start="not-a-date")

    with pytest.raises(MalformedDateError):
        compute_spend(budget, ())


def test_malformed_date_only_matters_for_matching_transactions():
    budget = make_budget()
    other_category = make_tx("t1", 10, category="Shopping", date="31/01/2024")

    status = compute_spend(budget, (other_category, make_tx("t2", 10)))
    assert status.transaction_count == 1

    with pytest.raises(MalformedDateError):
        compute_spend(budget, (make_tx("t3", 10, date="31/01/2024"),))


def test_accepts_date_objects_and_datetimes():
    from datetime import date, datetime

    budget = make_budget(start=date(2024, 1, 1), end=date(2024, 1, 31))
    transactions = (
        make_tx("t1", 10, date=date(2024, 1, 31)),
        make_tx("t2", 10, date=datetime(2024, 1, 31, 23, 59)),
        make_tx("t3", 10, date="2024-01-31T18:30:00"),
    )

    assert compute_spend(budget, transactions).transaction_count == 3


def test_classify_status_boundaries():
    assert classify_status(Decimal("0")) == SpendStatus.GOOD
    assert classify_status(Decimal("79.99")) == SpendStatus.GOOD
    assert classify_status(Decimal("80")) == SpendStatus.WARNING
    assert classify_status(Decimal("100")) == SpendStatus.EXCEEDED


def test_matching_transactions_keeps_input_order():
    budget = make_budget()
    transactions = (
        make_tx("late", 1, date="2024-01-30"),
        make_tx("early", 1, date="2024-01-02"),
    )

    assert [t.id for t in matching_transactions(budget, transactions)] == ["late", "early"]


def test_status_uses_unrounded_percentage():
    budget = make_budget(amount=100000)
    status = compute_spend(budget, (make_tx("t1", 99996),))

    # 99.996 % is shown as 100.00 but has not reached the cap yet
    assert status.percentage == Decimal("100.00")
    assert status.status == SpendStatus.WARNING


def test_unparseable_transaction_amount_raises():
    budget = make_budget()
    broken = Transaction(id="t9", amount=None, category="Food & Dining", type=TransactionType.EXPENSE, date="2024-01-10")

    with pytest.raises(InvalidTransactionError) as exc:
        compute_spend(budget, (broken,))
    assert exc.value.transaction_id == "t9"
