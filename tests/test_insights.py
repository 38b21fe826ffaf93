from insights import RULES, InsightRule, generate_insights
from schemas import AnalyticsData, CategoryData, MonthlyTrendData


def _category(name: str, amount: int, percentage: float) -> CategoryData:
    return CategoryData(
        category=name, amount=amount, percentage=percentage, count=1, color="#0353a4"
    )


def _trend(month: str, income: int, expenses: int) -> MonthlyTrendData:
    return MonthlyTrendData(
        month=month, income=income, expenses=expenses, net=income - expenses
    )


def test_empty_analytics_produce_no_insights() -> None:
    assert generate_insights(AnalyticsData(), "USD") == []


def test_full_report_in_rule_order() -> None:
    data = AnalyticsData(
        total_income=500000,
        total_expenses=300000,
        net_income=200000,
        transaction_count=12,
        expense_category_breakdown=[
            _category("Rent", 200000, 200000 / 300000 * 100),
            _category("Food", 100000, 100000 / 300000 * 100),
        ],
        monthly_trends=[
            _trend("Jan 2026", 250000, 200000),
            _trend("Feb 2026", 250000, 100000),
        ],
    )

    assert generate_insights(data, "USD") == [
        "Positive cash flow of $2,000.00",
        "Top spending category: Rent (66.7%, $2,000.00)",
        "Second largest spending category: Food (33.3%, $1,000.00)",
        "Net income improved by $1,000.00 in Feb 2026 compared to Jan 2026",
        "Savings rate of 40.0% is above the recommended 20% threshold",
        "High-value transactions: $666.67 on average",
        "Spending is highly concentrated: Rent accounts for 66.7% of expenses",
    ]


def test_balanced_period_with_transactions() -> None:
    data = AnalyticsData(
        total_income=5000, total_expenses=5000, net_income=0, transaction_count=2
    )
    insights = generate_insights(data, "USD")
    assert insights[0] == "Income and expenses are balanced for this period"


def test_negative_cash_flow_and_falling_trend() -> None:
    data = AnalyticsData(
        total_income=0,
        total_expenses=4500,
        net_income=-4500,
        transaction_count=3,
        monthly_trends=[_trend("Nov 2025", 0, 1000), _trend("Dec 2025", 0, 3500)],
    )
    insights = generate_insights(data, "EUR")
    assert insights[0] == "Negative cash flow of €45.00"
    assert "Net income decreased by €25.00 in Dec 2025 compared to Nov 2025" in insights
    assert insights[-1] == "Low transaction volume: 3 transactions in this period"


def test_unchanged_trend_is_reported_as_consistent() -> None:
    data = AnalyticsData(
        transaction_count=20,
        monthly_trends=[_trend("Jan 2026", 1000, 400), _trend("Feb 2026", 900, 300)],
    )
    assert (
        "Net income remained consistent between Jan 2026 and Feb 2026"
        in generate_insights(data, "USD")
    )


def test_savings_rate_thresholds_are_strict() -> None:
    data = AnalyticsData(
        total_income=100000,
        total_expenses=80000,
        net_income=20000,
        transaction_count=20,
    )
    insights = generate_insights(data, "USD")
    assert "Savings rate of 20.0% is above 10% but below the optimal 20%" in insights
    assert not any("recommended 20% threshold" in message for message in insights)


def test_low_savings_and_high_expense_ratio() -> None:
    data = AnalyticsData(
        total_income=100000,
        total_expenses=95000,
        net_income=5000,
        transaction_count=60,
    )
    insights = generate_insights(data, "USD")
    assert (
        "Savings rate of 5.0% is positive but below the typical recommendation of 10-20%"
        in insights
    )
    assert "High transaction volume: 60 transactions in this period" in insights
    assert insights[-1] == "High expense ratio: 95.0% of income is spent"


def test_small_average_and_low_expense_ratio() -> None:
    data = AnalyticsData(
        total_income=600,
        total_expenses=200,
        net_income=400,
        transaction_count=20,
    )
    insights = generate_insights(data, "UAH")
    assert "Frequent small transactions: 0.40₴ on average" in insights
    assert insights[-1] == "Low expense ratio: only 33.3% of income is spent"


def test_no_concentration_insight_at_exactly_half() -> None:
    data = AnalyticsData(
        total_expenses=2000,
        net_income=-2000,
        transaction_count=20,
        expense_category_breakdown=[
            _category("Rent", 1000, 50.0),
            _category("Food", 1000, 50.0),
        ],
    )
    insights = generate_insights(data, "USD")
    assert not any(message.startswith("Spending is highly") for message in insights)


def test_custom_rule_pipeline() -> None:
    rules = (
        InsightRule("always", lambda d: True, lambda d, currency: [f"in {currency}"]),
        *RULES[:1],
    )
    data = AnalyticsData(transaction_count=1)
    assert generate_insights(data, "GBP", rules=rules) == [
        "in GBP",
        "Income and expenses are balanced for this period",
    ]
