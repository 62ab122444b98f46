import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from creditmind.domain.models import (
    Account,
    Benefits,
    RewardEstimate,
    RewardType,
    SpendScenario,
    Transaction,
)
from creditmind.utils.formatting import try_parse_date

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _category_rate(benefits: Benefits, category: str | None) -> tuple[Decimal, str]:
    table = benefits.rate_table()
    if category is not None and category in table:
        return table[category], f"matched category '{category}'"
    return benefits.base_rate, "fallback to base rate"


def evaluate_reward(
    transaction: Transaction | SpendScenario,
    benefits: Benefits,
    month_to_date_reward_earned: Decimal = ZERO,
) -> RewardEstimate:
    rate, reason = _category_rate(benefits, transaction.category)
    amount = Decimal(transaction.amount)

    if amount <= 0:
        return RewardEstimate(
            reward_type=benefits.reward_type,
            rate=rate,
            raw_reward=ZERO,
            reward=ZERO,
            capped=False,
            reasoning=f"amount={amount} is not a purchase, no reward",
        )

    if amount < benefits.min_spend:
        return RewardEstimate(
            reward_type=benefits.reward_type,
            rate=rate,
            raw_reward=ZERO,
            reward=ZERO,
            capped=False,
            reasoning=f"amount={amount} below minimum spend {benefits.min_spend}",
        )

    if benefits.reward_type is RewardType.CASHBACK:
        raw_reward = amount * rate / HUNDRED
    else:
        raw_reward = amount * rate

    reward = raw_reward
    capped = False
    cap = benefits.monthly_cap
    if cap > 0 and month_to_date_reward_earned + raw_reward > cap:
        reward = max(ZERO, cap - month_to_date_reward_earned)
        capped = True

    reasoning = f"rate={rate} ({reason}), {benefits.reward_type.value}={raw_reward}"
    if capped:
        reasoning += f", clamped to {reward} by monthly cap {cap}"

    return RewardEstimate(
        reward_type=benefits.reward_type,
        rate=rate,
        raw_reward=raw_reward,
        reward=reward,
        capped=capped,
        reasoning=reasoning,
    )


def compute_reward(
    transaction: Transaction | SpendScenario,
    benefits: Benefits,
    month_to_date_reward_earned: Decimal = ZERO,
) -> Decimal:
    return evaluate_reward(transaction, benefits, month_to_date_reward_earned).reward


def month_to_date_reward(
    transactions: Iterable[Transaction],
    account: Account,
    as_of: date | None = None,
) -> Decimal:
    """Reward already earned by ``account`` in the calendar month of ``as_of``.

    The ledger is most-recent-first, so transactions are replayed in reverse
    to apply the monthly cap in the order the spend happened.
    """
    as_of = as_of or date.today()
    earned = ZERO
    for txn in reversed(list(transactions)):
        if txn.account_id != account.id:
            continue
        txn_date = try_parse_date(txn.date)
        if txn_date is None:
            logger.warning("Skipping transaction %s with unreadable date %r", txn.id, txn.date)
            continue
        if (txn_date.year, txn_date.month) != (as_of.year, as_of.month) or txn_date > as_of:
            continue
        earned += compute_reward(txn, account.benefits, earned)
    return earned
