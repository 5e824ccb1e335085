# expenses/models.py

from dataclasses import dataclass

from tabular_integrity.storage import Row


@dataclass(frozen=True)
class SavingsFactors:
    """
    Assumptions behind the savings estimates.
    """

    # Months covered by the transaction history
    period_months: int = 3
    # Share of recurring charges assumed avoidable
    subscriptions: float = 0.3
    # Share of coffee and treat spending assumed avoidable
    coffee_and_treats: float = 0.7
    # Share of restaurant spending assumed avoidable
    dining: float = 0.4
    # Share of grocery spending assumed avoidable
    groceries: float = 0.15
    # Share of small purchase spending assumed avoidable
    small_purchases: float = 0.2


@dataclass(frozen=True)
class SpendingData:
    """
    Query results feeding the optimisation report.
    """

    monthly: list[Row]
    subscriptions: list[Row]
    small_purchases: list[Row]
    groceries: list[Row]
