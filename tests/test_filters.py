from filters import (
    active_filters_count,
    get_all_cards_for_date_range,
    get_all_categories_for_date_range,
    in_date_range,
    matches_filters,
    query_transactions,
)
from schemas import AmountRange, DateRange, TransactionFilters, TransactionRecord


def _txn(id: str, date: str, **overrides) -> TransactionRecord:
    values = {
        "id": id,
        "date": date,
        "card": "Mono Black",
        "amount": 1000,
        "currency": "UAH",
        "description": "Coffee",
        "category": "Food",
    }
    values.update(overrides)
    return TransactionRecord(**values)


WINTER = DateRange(start="2025-12-01", end="2025-02-28")


def test_winter_range_includes_january_of_the_following_year() -> None:
    assert in_date_range("2026-01-15", WINTER)
    # Read naively the same range is empty.
    assert not (WINTER.start <= "2026-01-15" <= WINTER.end)


def test_winter_range_bounds() -> None:
    assert in_date_range("2025-12-01", WINTER)
    assert in_date_range("2026-02-28", WINTER)
    assert in_date_range("2026-02-28T23:59:00", WINTER)
    assert not in_date_range("2025-11-30", WINTER)
    assert not in_date_range("2026-03-01", WINTER)
    assert not in_date_range("2025-01-15", WINTER)


def test_plain_range_is_inclusive() -> None:
    march = DateRange(start="2026-03-01", end="2026-03-31")
    assert in_date_range("2026-03-01", march)
    assert in_date_range("2026-03-31", march)
    assert in_date_range("2026-03-31T18:30:00", march)
    assert not in_date_range("2026-02-28T23:59:59", march)
    assert not in_date_range("2026-04-01", march)


def test_same_year_reversed_range_wraps_into_next_year() -> None:
    reversed_range = DateRange(start="2026-05-01", end="2026-01-01")
    assert in_date_range("2026-06-01", reversed_range)
    assert in_date_range("2027-01-01", reversed_range)
    assert not in_date_range("2026-03-01", reversed_range)
    assert not in_date_range("2027-01-02", reversed_range)


def test_reversed_range_across_years_matches_nothing() -> None:
    reversed_range = DateRange(start="2026-05-01", end="2025-01-01")
    assert not in_date_range("2026-06-01", reversed_range)
    assert not in_date_range("2025-06-01", reversed_range)


def test_category_include_and_exclude() -> None:
    food = _txn("1", "2026-03-01", category="Food")
    rent = _txn("2", "2026-03-02", category="Rent")

    include = TransactionFilters(categories=["Food"])
    assert matches_filters(food, include)
    assert not matches_filters(rent, include)

    exclude = TransactionFilters(categories=["Food"], categories_mode="exclude")
    assert not matches_filters(food, exclude)
    assert matches_filters(rent, exclude)

    assert matches_filters(rent, TransactionFilters(categories=[]))


def test_card_income_and_amount_predicates() -> None:
    txn = _txn("1", "2026-03-01", card="Visa", amount=2500, is_income=True)

    assert matches_filters(txn, TransactionFilters(cards=["Visa", "Mono"]))
    assert not matches_filters(txn, TransactionFilters(cards=["Mono"]))
    assert matches_filters(txn, TransactionFilters(is_income=True))
    assert not matches_filters(txn, TransactionFilters(is_income=False))
    assert matches_filters(txn, TransactionFilters(amount_range=AmountRange(min=2500, max=2500)))
    assert not matches_filters(
        txn, TransactionFilters(amount_range=AmountRange(min=0, max=2499))
    )


def test_search_matches_description_or_comment_case_insensitive() -> None:
    with_comment = _txn("1", "2026-03-01", description="ATB market", comment="Birthday CAKE")
    without_comment = _txn("2", "2026-03-01", description="Silpo", comment=None)

    assert matches_filters(with_comment, TransactionFilters(search_query="atb"))
    assert matches_filters(with_comment, TransactionFilters(search_query="cake"))
    assert not matches_filters(without_comment, TransactionFilters(search_query="cake"))


def test_archived_transactions_are_hidden_unless_requested() -> None:
    archived = _txn("1", "2026-03-01", is_archived=True)
    assert not matches_filters(archived, TransactionFilters())
    assert matches_filters(archived, TransactionFilters(include_archived=True))


def test_query_orders_newest_first_and_keeps_storage_order_for_ties() -> None:
    rows = [
        _txn("a", "2026-03-01"),
        _txn("b", "2026-03-05"),
        _txn("c", "2026-03-01"),
        _txn("d", "2026-03-03", is_archived=True),
    ]
    result = query_transactions(rows)
    assert [t.id for t in result] == ["b", "a", "c"]


def test_query_combines_predicates() -> None:
    rows = [
        _txn("1", "2026-01-10", card="Visa", category="Food"),
        _txn("2", "2026-01-12", card="Mono", category="Food"),
        _txn("3", "2025-12-20", card="Mono", category="Rent", amount=900000),
        _txn("4", "2026-04-01", card="Mono", category="Food"),
    ]
    filters = TransactionFilters(date_range=WINTER, cards=["Mono"], categories=["Food"])
    assert [t.id for t in query_transactions(rows, filters)] == ["2"]


def test_card_facet_ignores_other_filters_and_archived_rows() -> None:
    rows = [
        _txn("1", "2026-01-10", card="Visa"),
        _txn("2", "2026-01-12", card="Mono"),
        _txn("3", "2026-01-12", card="Mono"),
        _txn("4", "2026-01-13", card="Privat", is_archived=True),
        _txn("5", "2026-05-01", card="Amex"),
        _txn("6", "2026-01-14", card=""),
    ]
    assert get_all_cards_for_date_range(rows, WINTER) == ["Mono", "Visa"]
    assert get_all_cards_for_date_range(rows, None) == ["Amex", "Mono", "Visa"]


def test_category_facet() -> None:
    rows = [
        _txn("1", "2026-01-10", category="Rent"),
        _txn("2", "2026-01-12", category="Food"),
        _txn("3", "2026-06-12", category="Travel"),
    ]
    assert get_all_categories_for_date_range(rows, WINTER) == ["Food", "Rent"]


def test_active_filters_count() -> None:
    assert active_filters_count(TransactionFilters()) == 0
    filters = TransactionFilters(
        date_range=WINTER,
        categories=["Food"],
        cards=[],
        is_income=False,
        search_query="coffee",
    )
    assert active_filters_count(filters) == 4
