from decimal import Decimal

from creditmind.domain.models import SpendScenario
from creditmind.engine.selectors import rank_accounts_for_spend
from creditmind.integrations.telegram_bot import _format_best, parse_spend_message
from creditmind.repository.defaults import default_snapshot


def test_parse_spend_message_normalises_category() -> None:
    scenario = parse_spend_message("RM45.90 dining")

    assert scenario == SpendScenario(amount=Decimal("45.90"), category="Dining")


def test_parse_spend_message_defaults_category() -> None:
    assert parse_spend_message("120").category == "General"
    assert parse_spend_message("200 Online").category == "Online"
    assert parse_spend_message("which card for dinner?") is None


def test_format_best_reply() -> None:
    scenario = SpendScenario(amount=Decimal("100"), category="Dining")
    ranked = rank_accounts_for_spend(default_snapshot().accounts, scenario)

    reply = _format_best(scenario, ranked)

    assert reply.splitlines()[0] == "Best account: Maybank 2 Cards Gold"
    assert "Reward: RM5.00" in reply
