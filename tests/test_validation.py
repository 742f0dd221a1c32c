from datetime import date
from decimal import Decimal

import pytest

from budgeting.domain import EXTENDED_CATEGORIES
from budgeting.errors import ValidationError
from budgeting.validation import build_budget, validate_budget, validate_goal


def valid_form(**overrides):
    form = {
        "name": "  Groceries  ",
        "category": "Food & Dining",
        "amount": "200",
        "start_date": "2024-01-01",
        "end_date": "2024-01-31",
        "is_recurring": False,
    }
    form.update(overrides)
    return form


def test_valid_budget_has_no_errors():
    assert validate_budget(valid_form()) == []


def test_camel_case_keys_are_accepted():
    form = {
        "name": "Food",
        "category": "Food & Dining",
        "amount": 150,
        "startDate": "2024-01-01",
        "endDate": "2024-02-01",
        "isRecurring": True,
        "recurringType": "monthly",
    }
    assert validate_budget(form) == []


def test_all_violations_are_collected():
    form = {
        "name": "   ",
        "category": "Pets",
        "amount": "-3",
        "start_date": "yesterday",
        "end_date": None,
        "is_recurring": True,
        "recurring_type": "daily",
    }

    errors = validate_budget(form)

    assert len(errors) == 6
    assert any("name" in e for e in errors)
    assert any("Category" in e for e in errors)
    assert any("Amount" in e for e in errors)
    assert any("Start date" in e for e in errors)
    assert any("End date is required" in e for e in errors)
    assert any("Recurring type" in e for e in errors)


@pytest.mark.parametrize("amount", [0, "0", "-1", "abc", "inf", "NaN", None, True])
def test_amount_must_be_finite_and_positive(amount):
    assert validate_budget(valid_form(amount=amount)) == ["Amount must be a positive number"]


@pytest.mark.parametrize("end", ["2024-01-01", "2023-12-31"])
def test_start_must_be_strictly_before_end(end):
    assert validate_budget(valid_form(end_date=end)) == ["End date must be after start date"]


def test_recurring_type_ignored_when_not_recurring():
    assert validate_budget(valid_form(is_recurring=False, recurring_type="daily")) == []


def test_extended_categories_are_opt_in():
    form = valid_form(category="Travel")

    assert len(validate_budget(form)) == 1
    assert validate_budget(form, EXTENDED_CATEGORIES) == []


def test_validation_has_no_side_effects():
    form = valid_form()
    snapshot = dict(form)
    validate_budget(form)
    assert form == snapshot


def test_build_budget_normalises_input():
    budget = build_budget(valid_form(is_recurring=False, recurring_type="weekly"), budget_id="b1")

    assert budget.id == "b1"
    assert budget.name == "Groceries"
    assert budget.amount == Decimal("200")
    assert budget.start_date == date(2024, 1, 1)
    assert budget.end_date == date(2024, 1, 31)
    assert budget.recurring_type is None


def test_build_budget_generates_id():
    assert build_budget(valid_form()).id


def test_build_budget_raises_with_every_error():
    with pytest.raises(ValidationError) as exc:
        build_budget(valid_form(name="", amount=0))

    assert len(exc.value.errors) == 2
    assert "Validation failed" in str(exc.value)


def test_validate_goal():
    assert validate_goal({"name": "Car", "target_amount": 5000, "target_date": "2025-06-01"}) == []
    errors = validate_goal({"name": "", "target_amount": 0, "deadline": "soon"})
    assert len(errors) == 3


def test_recurring_flag_strings_are_parsed():
    assert validate_budget(valid_form(is_recurring="false", recurring_type="daily")) == []
    assert validate_budget(valid_form(is_recurring="true", recurring_type="daily")) == [
        "Recurring type must be one of: weekly, monthly, yearly"
    ]
    assert validate_budget(valid_form(is_recurring="maybe")) == ["Recurring flag must be true or false"]


def test_build_budget_with_false_string_is_not_recurring():
    budget = build_budget(valid_form(is_recurring="false", recurring_type="weekly"))
    assert budget.is_recurring is False
    assert budget.recurring_type is None
