from datetime import date
from decimal import Decimal

from creditmind.domain.models import (
    Account,
    AccountRewardEvaluation,
    RewardType,
    SpendScenario,
    Transaction,
)
from creditmind.engine.rewards import evaluate_reward, month_to_date_reward

# Days added when the due day has already passed this month.
CYCLE_APPROXIMATION_DAYS = 30


def due_date_distance(due_day: int, today: date | None = None) -> int:
    today = today or date.today()
    distance = due_day - today.day
    if distance < 0:
        distance += CYCLE_APPROXIMATION_DAYS
    return distance


def rank_accounts_by_due_proximity(accounts: list[Account], today: date | None = None) -> list[Account]:
    today = today or date.today()
    return sorted(accounts, key=lambda account: due_date_distance(account.due_day, today))


def rank_accounts_for_spend(
    accounts: list[Account],
    scenario: SpendScenario,
    transactions: list[Transaction] | None = None,
    today: date | None = None,
) -> list[AccountRewardEvaluation]:
    """Rank accounts by the reward a spend would earn on each.

    Cashback accounts come before points accounts; within each group the
    larger reward wins. Month-to-date rewards are taken from ``transactions``
    when given, so exhausted caps are respected.
    """
    evaluations = []
    for account in accounts:
        earned = (
            month_to_date_reward(transactions, account, today) if transactions else Decimal("0")
        )
        estimate = evaluate_reward(scenario, account.benefits, earned)
        evaluations.append(
            AccountRewardEvaluation(
                account_id=account.id,
                account_name=account.name,
                reward_type=estimate.reward_type,
                reward=estimate.reward,
                reasoning=estimate.reasoning,
            )
        )
    evaluations.sort(
        key=lambda item: (item.reward_type is RewardType.CASHBACK, item.reward),
        reverse=True,
    )
    return evaluations
