from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Iterator

from budgeting.domain import CategoryTotal, MonthlySummary, MonthlyTotals, Transaction, TransactionType
from budgeting.filters import by_month, expenses, iter_transactions
from budgeting.transforms import parse_amount, parse_date, round_money

ZERO = Decimal("0")


def _magnitude(t: Transaction) -> Decimal:
    return abs(parse_amount(t.amount))


def monthly_summary(trans: Iterable[Transaction], year: int, month: int) -> MonthlySummary:
    """Income, expenses and net savings for one calendar month."""
    income = expense = ZERO
    for t in iter_transactions(trans, by_month(year, month)):
        if t.type == TransactionType.INCOME:
            income += _magnitude(t)
        else:
            expense += _magnitude(t)
    return MonthlySummary(
        year=year,
        month=month,
        income=round_money(income),
        expenses=round_money(expense),
        net_savings=round_money(income - expense),
    )


def expenses_by_category(trans: Iterable[Transaction]) -> tuple[CategoryTotal, ...]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in iter_transactions(trans, expenses):
        totals[t.category] += _magnitude(t)

    grand_total = sum(totals.values(), ZERO)
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return tuple(
        CategoryTotal(
            category=category,
            amount=round_money(amount),
            percentage=round_money(amount / grand_total * 100) if grand_total else ZERO,
        )
        for category, amount in ordered
    )


def top_categories(trans: Iterable[Transaction], k: int) -> Iterator[CategoryTotal]:
    for item in expenses_by_category(trans)[: max(0, k)]:
        yield item


def monthly_totals(trans: Iterable[Transaction]) -> tuple[MonthlyTotals, ...]:
    """Per-month income and expense series, oldest month first."""
    income: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in trans:
        key = parse_date(t.date).strftime("%Y-%m")
        bucket = income if t.type == TransactionType.INCOME else expense
        bucket[key] += _magnitude(t)

    months = sorted(set(income) | set(expense))
    return tuple(
        MonthlyTotals(
            month=m,
            income=round_money(income[m]),
            expenses=round_money(expense[m]),
            net_savings=round_money(income[m] - expense[m]),
        )
        for m in months
    )
