from datetime import date

import pytest

from filter_params import filters_to_query_params, query_params_to_filters
from periods import TimePeriod
from schemas import AmountRange, DateRange, TransactionFilters


APRIL_15 = date(2026, 4, 15)


def test_round_trip_keeps_every_filter() -> None:
    filters = TransactionFilters(
        date_range=DateRange(start="2026-04-01", end="2026-04-30"),
        categories=["Food", "Rent"],
        categories_mode="exclude",
        cards=["Visa"],
        is_income=False,
        amount_range=AmountRange(min=100, max=50_000),
        search_query="coffee",
    )

    params = filters_to_query_params(filters)
    assert params == {
        "start": "2026-04-01",
        "end": "2026-04-30",
        "categories": "Food,Rent",
        "categoriesMode": "exclude",
        "cards": "Visa",
        "type": "expense",
        "search": "coffee",
        "minAmount": "100",
        "maxAmount": "50000",
    }

    restored = query_params_to_filters(params, today=APRIL_15)
    assert restored.filters == filters
    assert restored.selected_period is TimePeriod.month


def test_empty_params_mean_no_filters() -> None:
    restored = query_params_to_filters({}, today=APRIL_15)
    assert restored.filters == TransactionFilters()
    assert restored.selected_period is None
    assert filters_to_query_params(TransactionFilters()) == {}


def test_winter_range_restores_winter_period() -> None:
    restored = query_params_to_filters(
        {"start": "2025-12-01", "end": "2025-02-28", "type": "income"}, today=APRIL_15
    )
    assert restored.selected_period is TimePeriod.winter
    assert restored.filters.is_income is True


def test_unrecognised_range_is_custom() -> None:
    restored = query_params_to_filters(
        {"start": "2026-03-03", "end": "2026-03-09"}, today=APRIL_15
    )
    assert restored.selected_period is TimePeriod.custom


def test_unknown_enumerated_values_are_ignored() -> None:
    restored = query_params_to_filters(
        {"categoriesMode": "sometimes", "type": "transfer", "categories": ",,"},
        today=APRIL_15,
    )
    assert restored.filters == TransactionFilters()


def test_half_open_ranges_are_ignored() -> None:
    restored = query_params_to_filters(
        {"start": "2026-04-01", "minAmount": "10"}, today=APRIL_15
    )
    assert restored.filters.date_range is None
    assert restored.filters.amount_range is None


def test_non_integer_amount_is_rejected() -> None:
    with pytest.raises(ValueError, match="minAmount"):
        query_params_to_filters({"minAmount": "abc", "maxAmount": "10"})
