"""Plain-language observations derived from :class:`schemas.AnalyticsData`.

Each rule is independent: its trigger is checked and, when it holds, its
messages are appended. Rules run in the fixed order of :data:`RULES`.
Thresholds are strict comparisons.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from config import get_settings
from currency_utils import format_currency
from schemas import AnalyticsData


@dataclass(frozen=True)
class InsightRule:
    name: str
    applies: Callable[[AnalyticsData], bool]
    render: Callable[[AnalyticsData, str], list[str]]


def _has_income_and_expenses(data: AnalyticsData) -> bool:
    return data.total_income > 0 and data.total_expenses > 0


def savings_rate(data: AnalyticsData) -> float:
    return (data.total_income - data.total_expenses) / data.total_income * 100


def expense_ratio(data: AnalyticsData) -> float:
    return data.total_expenses / data.total_income * 100


def average_transaction(data: AnalyticsData) -> float:
    return (data.total_income + data.total_expenses) / data.transaction_count


def _cash_flow(data: AnalyticsData, currency: str) -> list[str]:
    if data.net_income > 0:
        return [f"Positive cash flow of {format_currency(data.net_income, currency)}"]
    if data.net_income < 0:
        return [
            f"Negative cash flow of {format_currency(abs(data.net_income), currency)}"
        ]
    return ["Income and expenses are balanced for this period"]


def _top_expense_categories(data: AnalyticsData, currency: str) -> list[str]:
    top = data.expense_category_breakdown[0]
    messages = [
        f"Top spending category: {top.category} "
        f"({top.percentage:.1f}%, {format_currency(top.amount, currency)})"
    ]
    if len(data.expense_category_breakdown) > 1:
        second = data.expense_category_breakdown[1]
        messages.append(
            f"Second largest spending category: {second.category} "
            f"({second.percentage:.1f}%, {format_currency(second.amount, currency)})"
        )
    return messages


def _monthly_trend(data: AnalyticsData, currency: str) -> list[str]:
    previous, last = data.monthly_trends[-2], data.monthly_trends[-1]
    delta = last.net - previous.net
    if delta > 0:
        return [
            f"Net income improved by {format_currency(delta, currency)} "
            f"in {last.month} compared to {previous.month}"
        ]
    if delta < 0:
        return [
            f"Net income decreased by {format_currency(abs(delta), currency)} "
            f"in {last.month} compared to {previous.month}"
        ]
    return [f"Net income remained consistent between {previous.month} and {last.month}"]


def _savings_rate(data: AnalyticsData, currency: str) -> list[str]:
    rate = savings_rate(data)
    if rate > 20:
        return [f"Savings rate of {rate:.1f}% is above the recommended 20% threshold"]
    if rate > 10:
        return [f"Savings rate of {rate:.1f}% is above 10% but below the optimal 20%"]
    if rate > 0:
        return [
            f"Savings rate of {rate:.1f}% is positive but below the typical "
            "recommendation of 10-20%"
        ]
    return []


def _average_transaction(data: AnalyticsData, currency: str) -> list[str]:
    average = average_transaction(data)
    formatted = format_currency(round(average), currency)
    if average > 1000:
        return [f"High-value transactions: {formatted} on average"]
    if average < 100:
        return [f"Frequent small transactions: {formatted} on average"]
    return []


def _spending_concentration(data: AnalyticsData, currency: str) -> list[str]:
    top = data.expense_category_breakdown[0]
    return [
        f"Spending is highly concentrated: {top.category} accounts for "
        f"{top.percentage:.1f}% of expenses"
    ]


def _transaction_volume(data: AnalyticsData, currency: str) -> list[str]:
    count = data.transaction_count
    if count > 50:
        return [f"High transaction volume: {count} transactions in this period"]
    if count < 10:
        return [f"Low transaction volume: {count} transactions in this period"]
    return []


def _expense_ratio(data: AnalyticsData, currency: str) -> list[str]:
    ratio = expense_ratio(data)
    if ratio > 90:
        return [f"High expense ratio: {ratio:.1f}% of income is spent"]
    if ratio < 50:
        return [f"Low expense ratio: only {ratio:.1f}% of income is spent"]
    return []


RULES: tuple[InsightRule, ...] = (
    InsightRule(
        "cash_flow",
        lambda d: d.net_income != 0 or d.transaction_count > 0,
        _cash_flow,
    ),
    InsightRule(
        "top_expense_categories",
        lambda d: bool(d.expense_category_breakdown),
        _top_expense_categories,
    ),
    InsightRule("monthly_trend", lambda d: len(d.monthly_trends) >= 2, _monthly_trend),
    InsightRule("savings_rate", _has_income_and_expenses, _savings_rate),
    InsightRule(
        "average_transaction", lambda d: d.transaction_count > 0, _average_transaction
    ),
    InsightRule(
        "spending_concentration",
        lambda d: bool(d.expense_category_breakdown)
        and d.expense_category_breakdown[0].percentage > 50,
        _spending_concentration,
    ),
    InsightRule(
        "transaction_volume", lambda d: d.transaction_count > 0, _transaction_volume
    ),
    InsightRule("expense_ratio", _has_income_and_expenses, _expense_ratio),
)


def generate_insights(
    data: AnalyticsData,
    currency: Optional[str] = None,
    *,
    rules: tuple[InsightRule, ...] = RULES,
) -> list[str]:
    currency = currency or get_settings().default_currency
    insights: list[str] = []
    for rule in rules:
        if rule.applies(data):
            insights.extend(rule.render(data, currency))
    return insights
