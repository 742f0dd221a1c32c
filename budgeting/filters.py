from typing import Callable, Iterable, Iterator

from budgeting.domain import DateLike, Transaction, TransactionType
from budgeting.transforms import parse_date

Predicate = Callable[[Transaction], bool]


def iter_transactions(
    trans: Iterable[Transaction], pred: Predicate
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def by_type(kind: TransactionType) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == kind

    return _filter


def by_category(category: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_date_range(start: DateLike, end: DateLike) -> Predicate:
    """Inclusive on both ends. Raises MalformedDateError for a bad date."""
    start_day, end_day = parse_date(start), parse_date(end)

    def _filter(t: Transaction) -> bool:
        return start_day <= parse_date(t.date) <= end_day

    return _filter


def by_month(year: int, month: int) -> Predicate:
    def _filter(t: Transaction) -> bool:
        day = parse_date(t.date)
        return day.year == year and day.month == month

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    """Combine predicates; evaluation stops at the first one that fails."""
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


expenses = by_type(TransactionType.EXPENSE)
incomes = by_type(TransactionType.INCOME)
