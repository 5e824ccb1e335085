# expenses/optimise.py

import logging
from dataclasses import dataclass

from tabular_integrity.storage import (
    AnalysisSession,
    quote_identifier,
    quote_table_name,
)

from .models import SpendingData
from .report import format_optimisation_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseColumns:
    """
    Quoted column references used by the expense queries.
    """

    amount: str
    name: str
    date: str

    @classmethod
    def quoted(cls, amount: str, name: str, date: str) -> "ExpenseColumns":
        """
        Quote raw column names.

        Returns:
            ExpenseColumns: Columns ready for SQL interpolation.
        """
        return cls(quote_identifier(amount), quote_identifier(name), quote_identifier(date))


def optimise_expenses(
    session: AnalysisSession,
    table_name: str,
    amount_column: str = "Amount",
    name_column: str = "Name",
    date_column: str = "Date",
) -> str:
    """
    Analyse card transactions and render savings opportunities.

    Expenses are rows with a negative amount. The report covers monthly
    totals, recurring charges, small discretionary purchases and grocery
    trips, with savings estimates over a three-month window.

    Args:
        session: Session holding the transactions.
        table_name: Transactions table.
        amount_column: Signed transaction amount column.
        name_column: Merchant or description column.
        date_column: Transaction date column.

    Returns:
        str: The rendered optimisation report.
    """
    data = collect_spending_data(
        session,
        table_name,
        ExpenseColumns.quoted(amount_column, name_column, date_column),
    )
    logger.info(
        "Expense analysis for %s: %d months, %d recurring charges",
        table_name,
        len(data.monthly),
        len(data.subscriptions),
    )
    return format_optimisation_report(data)


def collect_spending_data(
    session: AnalysisSession,
    table_name: str,
    columns: ExpenseColumns,
) -> SpendingData:
    """
    Run the four spending queries.

    Args:
        session: Session holding the transactions.
        table_name: Transactions table.
        columns: Quoted column references.

    Returns:
        SpendingData: Results of every query.
    """
    table = quote_table_name(table_name)
    return SpendingData(
        monthly=session.execute(_monthly_query(table, columns)),
        subscriptions=session.execute(_subscription_query(table, columns)),
        small_purchases=session.execute(_small_purchase_query(table, columns)),
        groceries=session.execute(_grocery_query(table, columns)),
    )


def _month(columns: ExpenseColumns) -> str:
    """
    Build the SQL expression that buckets the date column by calendar month.

    Args:
        columns: Quoted column references.

    Returns:
        str: An expression yielding "YYYY-MM" text.
    """
    return f"strftime(CAST({columns.date} AS DATE), '%Y-%m')"


def _monthly_query(table: str, columns: ExpenseColumns) -> str:
    """Monthly transaction counts, totals and largest expense."""
    amount = columns.amount
    return f"""
        SELECT
            {_month(columns)} AS month,
            COUNT(*) AS transaction_count,
            ROUND(SUM(CASE WHEN {amount} < 0 THEN ABS({amount}) ELSE 0 END), 2)
                AS total_expenses,
            ROUND(MAX(CASE WHEN {amount} < 0 THEN ABS({amount}) ELSE 0 END), 2)
                AS largest_expense
        FROM {table}
        GROUP BY {_month(columns)}
        ORDER BY month
    """


def _subscription_query(table: str, columns: ExpenseColumns) -> str:
    """Same merchant and amount charged at least twice, under $100."""
    amount, name, date = columns.amount, columns.name, columns.date
    return f"""
        SELECT
            {name} AS name,
            ROUND(ABS({amount}), 2) AS amount,
            COUNT(*) AS frequency,
            ROUND(SUM(ABS({amount})), 2) AS total_spent,
            MIN({date}) AS first_charge,
            MAX({date}) AS last_charge
        FROM {table}
        WHERE {amount} < 0
        GROUP BY {name}, ROUND(ABS({amount}), 2)
        HAVING COUNT(*) >= 2 AND ROUND(ABS({amount}), 2) < 100
        ORDER BY frequency DESC, total_spent DESC
        LIMIT 10
    """


def _small_purchase_query(table: str, columns: ExpenseColumns) -> str:
    """Purchases under $50 grouped by merchant type or size bucket."""
    amount = columns.amount
    merchant = f"UPPER({columns.name})"
    return f"""
        SELECT
            CASE
                WHEN {merchant} LIKE '%COFFEE%' OR {merchant} LIKE '%STARBUCKS%'
                    OR {merchant} LIKE '%DUNKIN%' THEN 'Coffee Shops'
                WHEN {merchant} LIKE '%CUSTARD%' OR {merchant} LIKE '%ICE CREAM%'
                    THEN 'Ice Cream/Desserts'
                WHEN {merchant} LIKE '%RESTAURANT%' OR {merchant} LIKE '%GRILL%'
                    OR {merchant} LIKE '%PIZZA%' OR {merchant} LIKE '%TACO%'
                    OR {merchant} LIKE '%CULVERS%' THEN 'Restaurants'
                WHEN {merchant} LIKE '%GAS%' OR {merchant} LIKE '%FUEL%'
                    OR {merchant} LIKE '%SHELL%' THEN 'Gas Stations'
                WHEN ABS({amount}) < 10 THEN 'Small Purchases (<$10)'
                WHEN ABS({amount}) BETWEEN 10 AND 25 THEN 'Medium Purchases ($10-25)'
                ELSE 'Other'
            END AS category,
            COUNT(*) AS transaction_count,
            ROUND(SUM(ABS({amount})), 2) AS total_spent,
            ROUND(AVG(ABS({amount})), 2) AS avg_amount
        FROM {table}
        WHERE {amount} < 0 AND ABS({amount}) < 50
        GROUP BY category
        HAVING COUNT(*) >= 3
        ORDER BY total_spent DESC
    """


def _grocery_query(table: str, columns: ExpenseColumns) -> str:
    """Monthly grocery trips and spend at the recognised grocers."""
    amount = columns.amount
    merchant = f"UPPER({columns.name})"
    return f"""
        SELECT
            {_month(columns)} AS month,
            COUNT(*) AS grocery_trips,
            ROUND(SUM(ABS({amount})), 2) AS total_grocery_spend,
            ROUND(AVG(ABS({amount})), 2) AS avg_per_trip,
            ROUND(MIN(ABS({amount})), 2) AS min_spend,
            ROUND(MAX(ABS({amount})), 2) AS max_spend
        FROM {table}
        WHERE {amount} < 0 AND ({merchant} LIKE '%KROGER%' OR {merchant} LIKE '%TARGET%')
        GROUP BY {_month(columns)}
        ORDER BY month
    """
