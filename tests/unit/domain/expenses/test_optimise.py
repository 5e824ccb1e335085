# domain/expenses/test_optimise.py

import duckdb
import pytest

from tabular_integrity.domain.expenses.optimise import (
    ExpenseColumns,
    collect_spending_data,
    optimise_expenses,
)
from tabular_integrity.storage import AnalysisSession, QueryExecutionError

pytestmark = pytest.mark.unit


def _transactions() -> AnalysisSession:
    """
    Create a session with a small card transaction history.

    Returns:
        AnalysisSession: Session with table "transactions".
    """
    session = AnalysisSession(duckdb.connect(":memory:"))
    session.execute(
        """
        CREATE TABLE transactions AS
        SELECT "Name", CAST("Amount" AS DOUBLE) AS "Amount", "Date"
        FROM (VALUES
            ('NETFLIX', -15.99, DATE '2024-01-05'),
            ('NETFLIX', -15.99, DATE '2024-02-05'),
            ('NETFLIX', -15.99, DATE '2024-03-05'),
            ('STARBUCKS', -5.50, DATE '2024-01-08'),
            ('STARBUCKS', -5.50, DATE '2024-01-09'),
            ('STARBUCKS', -5.50, DATE '2024-01-10'),
            ('KROGER', -80.00, DATE '2024-01-12'),
            ('KROGER', -60.00, DATE '2024-02-12'),
            ('PAYROLL', 2000.00, DATE '2024-01-31')
        ) AS v("Name", "Amount", "Date")
        """,
    )
    return session


def _data():
    return collect_spending_data(
        _transactions(),
        "transactions",
        ExpenseColumns.quoted("Amount", "Name", "Date"),
    )


def test_monthly_totals_exclude_income() -> None:
    """
    ARRANGE: January with expenses and a payroll credit
    ACT:     collect_spending_data
    ASSERT:  January total counts only negative amounts
    """
    actual = _data().monthly[0]

    assert (actual["month"], actual["total_expenses"], actual["largest_expense"]) == (
        "2024-01",
        112.49,
        80,
    )


def test_monthly_rows_are_ordered() -> None:
    """
    ARRANGE: transactions across three months
    ACT:     collect_spending_data
    ASSERT:  months in ascending order
    """
    actual = [row["month"] for row in _data().monthly]

    assert actual == ["2024-01", "2024-02", "2024-03"]


def test_recurring_charges_detected() -> None:
    """
    ARRANGE: identical charges from the same merchant
    ACT:     collect_spending_data
    ASSERT:  most frequent, highest spend first
    """
    actual = [(row["name"], row["frequency"]) for row in _data().subscriptions]

    assert actual == [("NETFLIX", 3), ("STARBUCKS", 3)]


def test_varying_grocery_amounts_are_not_recurring() -> None:
    """
    ARRANGE: grocery trips with different amounts
    ACT:     collect_spending_data
    ASSERT:  grocery merchant absent from recurring charges
    """
    actual = {row["name"] for row in _data().subscriptions}

    assert "KROGER" not in actual


def test_small_purchases_are_categorised() -> None:
    """
    ARRANGE: three coffee purchases under $50
    ACT:     collect_spending_data
    ASSERT:  coffee shop category present with three transactions
    """
    rows = {row["category"]: row for row in _data().small_purchases}

    actual = rows["Coffee Shops"]["transaction_count"]

    assert actual == 3


def test_grocery_trips_grouped_by_month() -> None:
    """
    ARRANGE: grocery trips in January and February
    ACT:     collect_spending_data
    ASSERT:  one row per month
    """
    actual = [(row["month"], row["grocery_trips"]) for row in _data().groceries]

    assert actual == [("2024-01", 1), ("2024-02", 1)]


def test_optimise_expenses_renders_report() -> None:
    """
    ARRANGE: transaction history
    ACT:     optimise_expenses
    ASSERT:  report lists the recurring charge
    """
    actual = optimise_expenses(_transactions(), "transactions")

    assert "• NETFLIX: $15.99 × 3 times = $47.97" in actual


def test_optimise_expenses_unknown_column_raises() -> None:
    """
    ARRANGE: transaction history
    ACT:     optimise_expenses naming a missing amount column
    ASSERT:  raises QueryExecutionError
    """
    with pytest.raises(QueryExecutionError):
        optimise_expenses(_transactions(), "transactions", amount_column="Total")
