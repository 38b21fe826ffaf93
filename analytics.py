"""Aggregate a transaction set into totals, category breakdowns and trends.

The input is expected to be already filtered (archived rows removed by the
caller). Nothing here raises on empty or sparse data: an empty input yields
zero totals and empty series.
"""

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from models import DEFAULT_CATEGORY
from schemas import AnalyticsData, CategoryData, MonthlyTrendData, TransactionRecord


# Colors are assigned by position within a breakdown, so the same category
# may be drawn in different colors across breakdowns.
CATEGORY_COLORS: tuple[str, ...] = (
    "#0353a4",
    "#023e7d",
    "#001845",
    "#002855",
    "#003d82",
    "#4361ee",
    "#7209b7",
    "#f72585",
    "#4cc9f0",
    "#4895ef",
    "#4361ee",
    "#3f37c9",
    "#7209b7",
    "#560bad",
    "#480ca8",
)

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

TOP_CATEGORIES_LIMIT = 5
TREND_MONTHS = 6


def category_of(txn: TransactionRecord) -> str:
    return (txn.category or "").strip() or DEFAULT_CATEGORY


def calculate_totals(transactions: Iterable[TransactionRecord]) -> tuple[int, int]:
    income = 0
    expenses = 0
    for txn in transactions:
        if txn.is_income:
            income += txn.amount
        else:
            expenses += txn.amount
    return income, expenses


def build_category_breakdown(
    transactions: Iterable[TransactionRecord],
) -> list[CategoryData]:
    buckets: dict[str, dict[str, int]] = defaultdict(lambda: {"amount": 0, "count": 0})
    for txn in transactions:
        bucket = buckets[category_of(txn)]
        bucket["amount"] += abs(txn.amount)
        bucket["count"] += 1

    total = sum(bucket["amount"] for bucket in buckets.values())
    ordered = sorted(buckets.items(), key=lambda item: item[1]["amount"], reverse=True)
    return [
        CategoryData(
            category=category,
            amount=values["amount"],
            percentage=(values["amount"] / total) * 100 if total > 0 else 0.0,
            count=values["count"],
            color=CATEGORY_COLORS[index % len(CATEGORY_COLORS)],
        )
        for index, (category, values) in enumerate(ordered)
    ]


def _month_key(value: str) -> Optional[tuple[int, int]]:
    year, month = value[:4], value[5:7]
    if not (year.isdigit() and month.isdigit()) or not 1 <= int(month) <= 12:
        return None
    return int(year), int(month)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year:04d}"


def calculate_monthly_trends(
    transactions: Iterable[TransactionRecord], *, months: int = TREND_MONTHS
) -> list[MonthlyTrendData]:
    """Income/expense per calendar month, oldest first, last ``months`` only.

    Buckets are ordered by their numeric ``(year, month)`` key before being
    labelled ``"MMM yyyy"``, which does not sort as text.
    """

    buckets: dict[tuple[int, int], dict[str, int]] = defaultdict(
        lambda: {"income": 0, "expenses": 0}
    )
    for txn in transactions:
        key = _month_key(txn.date)
        if key is None:
            continue
        if txn.is_income:
            buckets[key]["income"] += txn.amount
        else:
            buckets[key]["expenses"] += abs(txn.amount)

    keys = sorted(buckets)[-months:] if months > 0 else []
    return [
        MonthlyTrendData(
            month=month_label(*key),
            income=buckets[key]["income"],
            expenses=buckets[key]["expenses"],
            net=buckets[key]["income"] - buckets[key]["expenses"],
        )
        for key in keys
    ]


def calculate_analytics(transactions: Sequence[TransactionRecord]) -> AnalyticsData:
    if not transactions:
        return AnalyticsData()

    income, expenses = calculate_totals(transactions)
    overall = build_category_breakdown(transactions)
    income_breakdown = build_category_breakdown(t for t in transactions if t.is_income)
    expense_breakdown = build_category_breakdown(
        t for t in transactions if not t.is_income
    )

    return AnalyticsData(
        total_income=income,
        total_expenses=expenses,
        net_income=income - expenses,
        transaction_count=len(transactions),
        category_breakdown=overall,
        income_category_breakdown=income_breakdown,
        expense_category_breakdown=expense_breakdown,
        monthly_trends=calculate_monthly_trends(transactions),
        top_categories=overall[:TOP_CATEGORIES_LIMIT],
        top_income_categories=income_breakdown[:TOP_CATEGORIES_LIMIT],
        top_expense_categories=expense_breakdown[:TOP_CATEGORIES_LIMIT],
    )
