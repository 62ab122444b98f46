from datetime import date
from decimal import Decimal

from creditmind.domain.models import Account, RewardType, SpendScenario
from creditmind.engine.selectors import (
    due_date_distance,
    rank_accounts_by_due_proximity,
    rank_accounts_for_spend,
)
from creditmind.repository.defaults import default_snapshot


def _account(account_id: int, due_day: int) -> Account:
    return Account(id=account_id, name=f"Card {account_id}", due_day=due_day)


def test_due_distance_wraps_with_thirty_day_cycle() -> None:
    today = date(2024, 3, 20)

    assert due_date_distance(25, today) == 5
    assert due_date_distance(20, today) == 0
    assert due_date_distance(10, today) == 20
    assert due_date_distance(5, today) == 15


def test_rank_accounts_by_due_proximity() -> None:
    accounts = [_account(1, 10), _account(2, 5), _account(3, 25)]

    ranked = rank_accounts_by_due_proximity(accounts, today=date(2024, 3, 20))

    assert [account.due_day for account in ranked] == [25, 5, 10]


def test_rank_accounts_by_due_proximity_is_stable() -> None:
    accounts = [_account(1, 10), _account(2, 28), _account(3, 10), _account(4, 28)]

    ranked = rank_accounts_by_due_proximity(accounts, today=date(2024, 3, 20))

    assert [account.id for account in ranked] == [2, 4, 1, 3]


def test_rank_accounts_for_spend_prefers_cashback_by_reward() -> None:
    accounts = default_snapshot().accounts

    ranked = rank_accounts_for_spend(accounts, SpendScenario(amount=Decimal("100"), category="Dining"))

    assert [item.account_id for item in ranked] == [1, 3, 2]
    assert ranked[0].reward == Decimal("5")
    assert ranked[-1].reward_type is RewardType.POINTS
    assert ranked[-1].reward == Decimal("100")


def test_rank_accounts_for_spend_respects_exhausted_cap() -> None:
    snapshot = default_snapshot()
    big_spend = snapshot.transactions[0].model_copy(
        update={"id": 900, "date": "2024-03-29", "amount": Decimal("2000"), "category": "Dining", "account_id": 1}
    )

    ranked = rank_accounts_for_spend(
        snapshot.accounts,
        SpendScenario(amount=Decimal("100"), category="Dining"),
        transactions=[big_spend, *snapshot.transactions],
        today=date(2024, 3, 30),
    )

    assert [item.account_id for item in ranked] == [3, 1, 2]
    assert ranked[1].reward == Decimal("0")
