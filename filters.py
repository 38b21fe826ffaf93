"""Transaction filtering shared by the store and in-memory callers.

Dates are compared as ISO-8601 strings and never parsed.
"""

from typing import Callable, Iterable, Optional

from periods import shift_year, spans_year_boundary
from schemas import DateRange, TransactionFilters, TransactionRecord


Predicate = Callable[[TransactionRecord, TransactionFilters], bool]


def in_date_range(value: str, date_range: DateRange) -> bool:
    """Inclusive membership test for an ISO date or date-time string.

    The upper bound is compared at its own precision, so ``2025-03-31T18:00``
    falls inside a range ending ``2025-03-31``. A winter-encoded range is read
    as running from ``start`` into the following year's ``end``.
    """

    start, end = date_range.start, date_range.end
    if spans_year_boundary(date_range):
        end = shift_year(end)
    return value >= start and value[: len(end)] <= end


def _match_archived(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    return filters.include_archived or not txn.is_archived


def _match_date_range(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    return filters.date_range is None or in_date_range(txn.date, filters.date_range)


def _match_categories(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    if not filters.categories:
        return True
    selected = txn.category in filters.categories
    if filters.categories_mode == "exclude":
        return not selected
    return selected


def _match_cards(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    return not filters.cards or txn.card in filters.cards


def _match_income(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    return filters.is_income is None or txn.is_income == filters.is_income


def _match_amount(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    if filters.amount_range is None:
        return True
    return filters.amount_range.min <= txn.amount <= filters.amount_range.max


def _match_search(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    if not filters.search_query:
        return True
    term = filters.search_query.lower()
    if term in (txn.description or "").lower():
        return True
    return bool(txn.comment) and term in txn.comment.lower()


# Archived exclusion runs first; every predicate is ANDed.
PREDICATES: tuple[Predicate, ...] = (
    _match_archived,
    _match_date_range,
    _match_categories,
    _match_cards,
    _match_income,
    _match_amount,
    _match_search,
)


def matches_filters(txn: TransactionRecord, filters: TransactionFilters) -> bool:
    return all(predicate(txn, filters) for predicate in PREDICATES)


def sort_newest_first(
    transactions: Iterable[TransactionRecord],
) -> list[TransactionRecord]:
    # sorted() is stable, so equal dates keep their storage order.
    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


def query_transactions(
    transactions: Iterable[TransactionRecord],
    filters: Optional[TransactionFilters] = None,
) -> list[TransactionRecord]:
    """Order a snapshot newest first and keep the transactions ``filters`` admits."""

    filters = filters or TransactionFilters()
    return [txn for txn in sort_newest_first(transactions) if matches_filters(txn, filters)]


def _active_in_range(
    transactions: Iterable[TransactionRecord], date_range: Optional[DateRange]
) -> list[TransactionRecord]:
    return [
        txn
        for txn in transactions
        if not txn.is_archived
        and (date_range is None or in_date_range(txn.date, date_range))
    ]


def get_all_cards_for_date_range(
    transactions: Iterable[TransactionRecord], date_range: Optional[DateRange]
) -> list[str]:
    """Distinct cards of active transactions in ``date_range``.

    Only the date predicate applies, so the facet lists every card the user
    could still pick regardless of the card or category filters in force.
    """

    return sorted({txn.card for txn in _active_in_range(transactions, date_range) if txn.card})


def get_all_categories_for_date_range(
    transactions: Iterable[TransactionRecord], date_range: Optional[DateRange]
) -> list[str]:
    return sorted(
        {txn.category for txn in _active_in_range(transactions, date_range) if txn.category}
    )


def active_filters_count(filters: TransactionFilters) -> int:
    count = 0
    if filters.categories:
        count += 1
    if filters.cards:
        count += 1
    if filters.is_income is not None:
        count += 1
    if filters.search_query:
        count += 1
    if filters.date_range is not None and (filters.date_range.start or filters.date_range.end):
        count += 1
    if filters.amount_range is not None:
        count += 1
    return count
