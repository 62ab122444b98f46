from datetime import date
from decimal import Decimal

from creditmind.domain.models import CATEGORIES, Account, CategorySpend, SpendSummary, Transaction
from creditmind.engine.selectors import rank_accounts_by_due_proximity


def total_debt(accounts: list[Account]) -> Decimal:
    return sum((account.balance for account in accounts), Decimal("0"))


def category_spend(transactions: list[Transaction]) -> list[CategorySpend]:
    """Spend per known category, keeping only categories with a positive total."""
    totals = {category: Decimal("0") for category in CATEGORIES}
    for txn in transactions:
        if txn.category in totals:
            totals[txn.category] += txn.amount
    return [CategorySpend(name=name, value=value) for name, value in totals.items() if value > 0]


def spend_summary(
    accounts: list[Account],
    transactions: list[Transaction],
    today: date | None = None,
) -> SpendSummary:
    ranked = rank_accounts_by_due_proximity(accounts, today)
    return SpendSummary(
        total_debt=total_debt(accounts),
        category_data=category_spend(transactions),
        due_soonest=ranked[0].name if ranked else None,
    )
