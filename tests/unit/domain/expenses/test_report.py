# domain/expenses/test_report.py

import pytest

from tabular_integrity.domain.expenses.models import SavingsFactors, SpendingData
from tabular_integrity.domain.expenses.report import (
    format_currency,
    format_optimisation_report,
)

pytestmark = pytest.mark.unit


def _data(groceries: list | None = None) -> SpendingData:
    return SpendingData(
        monthly=[
            {
                "month": "2024-01",
                "total_expenses": 100.5,
                "largest_expense": 80,
                "transaction_count": 4,
            },
        ],
        subscriptions=[
            {"name": "NETFLIX", "amount": 15.99, "frequency": 3, "total_spent": 47.97},
        ],
        small_purchases=[
            {
                "category": "Coffee Shops",
                "transaction_count": 6,
                "total_spent": 33.0,
                "avg_amount": 5.5,
            },
        ],
        groceries=groceries or [],
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1000, "$1,000"), (1234.56, "$1,234.56"), (80.0, "$80"), (None, "$0")],
)
def test_format_currency(value: object, expected: str) -> None:
    """
    ARRANGE: monetary value
    ACT:     format_currency
    ASSERT:  dollar sign, separators and cents only when needed
    """
    actual = format_currency(value)

    assert actual == expected


def test_report_starts_with_heading() -> None:
    """
    ARRANGE: sample spending data
    ACT:     format_optimisation_report
    ASSERT:  report heading first
    """
    actual = format_optimisation_report(_data())

    assert actual.startswith("## 💰 Expense Optimization Report")


def test_report_monthly_table_row() -> None:
    """
    ARRANGE: one month of spending
    ACT:     format_optimisation_report
    ASSERT:  table row with formatted amounts
    """
    actual = format_optimisation_report(_data())

    assert "| 2024-01 | $100.50 | $80 | 4 |" in actual


def test_report_subscription_section() -> None:
    """
    ARRANGE: one recurring charge
    ACT:     format_optimisation_report
    ASSERT:  savings estimate and charge breakdown
    """
    actual = format_optimisation_report(_data())

    assert (
        "**1. Subscription Audit** - Potential savings: $5/month" in actual
        and "• NETFLIX: $15.99 × 3 times = $47.97" in actual
    )


def test_report_coffee_section() -> None:
    """
    ARRANGE: coffee purchases totalling $33 over three months
    ACT:     format_optimisation_report
    ASSERT:  monthly coffee spend and savings estimate
    """
    actual = format_optimisation_report(_data())

    assert (
        "**2. Coffee & Treats** - Potential savings: $8/month" in actual
        and "• Coffee shops: 6 visits = $11/month" in actual
    )


def test_report_omits_absent_sections() -> None:
    """
    ARRANGE: no dining or grocery data
    ACT:     format_optimisation_report
    ASSERT:  dining and grocery sections absent
    """
    actual = format_optimisation_report(_data())

    assert "Dining Out" not in actual and "Grocery Optimization" not in actual


def test_report_grocery_section() -> None:
    """
    ARRANGE: one month of grocery trips
    ACT:     format_optimisation_report
    ASSERT:  trips and average per trip listed
    """
    groceries = [
        {
            "month": "2024-01",
            "grocery_trips": 2,
            "total_grocery_spend": 140.0,
            "avg_per_trip": 70.0,
        },
    ]

    actual = format_optimisation_report(_data(groceries))

    assert (
        "**4. Grocery Optimization** - Potential savings: $21/month" in actual
        and "2024-01: 2 trips, $70 avg/trip" in actual
    )


def test_report_total_savings() -> None:
    """
    ARRANGE: subscriptions and coffee purchases
    ACT:     format_optimisation_report
    ASSERT:  total combines subscription, treat and small purchase savings
    """
    actual = format_optimisation_report(_data())

    assert "### 📈 **Total Monthly Savings Potential: $15+**" in actual


def test_report_uses_custom_factors() -> None:
    """
    ARRANGE: factors assuming a one-month period
    ACT:     format_optimisation_report
    ASSERT:  coffee spend not divided across months
    """
    actual = format_optimisation_report(_data(), SavingsFactors(period_months=1))

    assert "• Coffee shops: 6 visits = $33/month" in actual
