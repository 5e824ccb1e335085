# expenses/report.py

from collections.abc import Sequence

from tabular_integrity.storage import Row, as_count, as_float

from .models import SavingsFactors, SpendingData


def format_optimisation_report(
    data: SpendingData,
    factors: SavingsFactors | None = None,
) -> str:
    """
    Render spending query results as a savings report.

    Args:
        data: Results of the spending queries.
        factors: Savings assumptions; defaults to SavingsFactors().

    Returns:
        str: Markdown-flavoured report.
    """
    active = factors or SavingsFactors()
    months = active.period_months

    coffee = _category(data.small_purchases, "Coffee Shops")
    treats = _category(data.small_purchases, "Ice Cream/Desserts")
    dining = _category(data.small_purchases, "Restaurants")

    subscription_total = _total(data.subscriptions, "total_spent")
    small_total = _total(data.small_purchases, "total_spent")

    lines = ["## 💰 Expense Optimization Report", ""]
    lines.extend(_monthly_table(data.monthly))
    lines.extend(("### 🎯 HIGH-IMPACT Opportunities (Save $100+ monthly)", ""))

    if data.subscriptions:
        savings = round(subscription_total / months * active.subscriptions)
        lines.append(
            f"**1. Subscription Audit** - Potential savings: ${savings}/month"
        )
        lines.append("```")
        lines.extend(
            f"• {row['name']}: {format_currency(row['amount'])}"
            f" × {as_count(row['frequency'])} times"
            f" = {format_currency(row['total_spent'])}"
            for row in data.subscriptions[:5]
        )
        lines.append("```")
        lines.append(
            "**Actions**: Cancel unused services, switch to annual plans for discounts"
        )
        lines.append("")

    if coffee or treats:
        coffee_monthly = _spent(coffee) / months
        treat_monthly = _spent(treats) / months
        savings = round((coffee_monthly + treat_monthly) * active.coffee_and_treats)
        lines.append(f"**2. Coffee & Treats** - Potential savings: ${savings}/month")
        if coffee:
            lines.append(
                f"• Coffee shops: {as_count(coffee['transaction_count'])} visits"
                f" = ${round(coffee_monthly)}/month"
            )
        if treats:
            lines.append(
                f"• Treats/desserts: {as_count(treats['transaction_count'])} visits"
                f" = ${round(treat_monthly)}/month"
            )
        lines.append("**Actions**: Make coffee at home, limit treats to weekends")
        lines.append("")

    if dining:
        dining_monthly = _spent(dining) / months
        lines.append(
            "**3. Dining Out** - Potential savings:"
            f" ${round(dining_monthly * active.dining)}/month"
        )
        lines.append(
            f"• {as_count(dining['transaction_count'])} restaurant visits"
            f" = ${round(dining_monthly)}/month"
        )
        lines.append("**Actions**: Limit to 1-2 restaurant visits per week, meal prep")
        lines.append("")

    lines.extend(("### 🔍 MEDIUM-IMPACT Opportunities (Save $25-100 monthly)", ""))

    if data.groceries:
        average = _total(data.groceries, "total_grocery_spend") / len(data.groceries)
        lines.append(
            "**4. Grocery Optimization** - Potential savings:"
            f" ${round(average * active.groceries)}/month"
        )
        lines.append("```")
        lines.extend(
            f"{row['month']}: {as_count(row['grocery_trips'])} trips,"
            f" ${round(as_float(row['avg_per_trip']) or 0)} avg/trip"
            for row in data.groceries
        )
        lines.append("```")
        lines.append(
            "**Actions**: Plan weekly meals, set $75 budget per trip,"
            " use store apps for coupons"
        )
        lines.append("")

    if small_total > 0:
        lines.append(
            "**5. Small Purchase Optimization** - Potential savings:"
            f" ${round(small_total * active.small_purchases / months)}/month"
        )
        lines.append("```")
        lines.extend(
            f"• {row['category']}: {as_count(row['transaction_count'])} purchases"
            f" = {format_currency(row['total_spent'])}"
            for row in data.small_purchases[:4]
        )
        lines.append("```")
        lines.append(
            "**Actions**: Use 24-hour rule for non-essentials, batch small purchases"
        )
        lines.append("")

    total_savings = round(
        subscription_total * active.subscriptions / months
        + (_spent(coffee) + _spent(treats)) * active.coffee_and_treats / months
        + _spent(dining) * active.dining / months
        + small_total * active.small_purchases / months
    )

    lines.extend(
        (
            f"### 📈 **Total Monthly Savings Potential: ${total_savings}+**",
            "",
            "**Implementation Priority**:",
            "1. **Subscription audit** (easiest, immediate impact)",
            "2. **Coffee routine change** (highest ROI)",
            "3. **Meal planning** (reduces grocery + restaurant costs)",
            "4. **Small purchase discipline** (builds long-term habits)",
            "",
            "💡 **Tip**: Start with one category per month to build sustainable habits.",
        ),
    )
    return "\n".join(lines)


def format_currency(value: object) -> str:
    """
    Format a monetary value with a dollar sign and thousands separators.

    Args:
        value: Numeric amount; missing values render as $0.

    Returns:
        str: e.g. "$1,000" or "$1,234.56".
    """
    amount = as_float(value) or 0.0
    if amount.is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def _monthly_table(monthly: Sequence[Row]) -> list[str]:
    """
    Render the monthly overview table.

    Returns:
        list[str]: Heading, table and trailing blank line.
    """
    lines = [
        "### 📊 Monthly Spending Overview",
        "| Month | Total Expenses | Largest Purchase | Transactions |",
        "|-------|---------------|------------------|-------------|",
    ]
    lines.extend(
        f"| {row['month']} | {format_currency(row['total_expenses'])}"
        f" | {format_currency(row['largest_expense'])}"
        f" | {as_count(row['transaction_count'])} |"
        for row in monthly
    )
    lines.append("")
    return lines


def _category(rows: Sequence[Row], name: str) -> Row | None:
    """
    Find a purchase category row by name.

    Returns:
        Row | None: The row, or None when the category is absent.
    """
    return next((row for row in rows if row.get("category") == name), None)


def _spent(row: Row | None) -> float:
    """
    Total spent for an optional category row.

    Returns:
        float: The amount, 0.0 when the row is missing.
    """
    return (as_float(row.get("total_spent")) or 0.0) if row else 0.0


def _total(rows: Sequence[Row], key: str) -> float:
    """
    Sum a numeric column across rows, treating missing values as zero.

    Returns:
        float: The sum.
    """
    return sum(as_float(row.get(key)) or 0.0 for row in rows)
