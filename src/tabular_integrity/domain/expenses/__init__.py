# expenses/__init__.py

from .models import SavingsFactors, SpendingData
from .optimise import collect_spending_data, optimise_expenses
from .report import format_currency, format_optimisation_report

__all__ = [
    "SavingsFactors",
    "SpendingData",
    "collect_spending_data",
    "format_currency",
    "format_optimisation_report",
    "optimise_expenses",
]
