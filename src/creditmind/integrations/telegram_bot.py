import logging
import re
from decimal import Decimal

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from creditmind.config import settings
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    AccountRewardEvaluation,
    RewardType,
    SpendScenario,
)
from creditmind.services.dashboard import DashboardService, build_service
from creditmind.utils.formatting import fmt

logger = logging.getLogger(__name__)

SPEND_PATTERN = re.compile(r"^\s*(?:RM)?\s*(\d+(?:\.\d{1,2})?)\s*(.*)$", re.IGNORECASE)

_service: DashboardService | None = None


def get_service() -> DashboardService:
    global _service
    if _service is None:
        _service = build_service()
    return _service


def parse_spend_message(text: str) -> SpendScenario | None:
    """Parse messages like ``"120 dining"`` or ``"RM45.90 Groceries"``."""
    match = SPEND_PATTERN.match(text)
    if not match:
        return None
    amount, category = match.groups()
    category = category.strip()
    canonical = next((name for name in CATEGORIES if name.lower() == category.lower()), None)
    return SpendScenario(amount=Decimal(amount), category=canonical or category or DEFAULT_CATEGORY)


def _format_best(scenario: SpendScenario, ranked: list[AccountRewardEvaluation]) -> str:
    best = ranked[0]
    reward = (
        fmt(best.reward, settings.currency)
        if best.reward_type is RewardType.CASHBACK
        else f"{best.reward:.0f} points"
    )
    lines = [
        f"Best account: {best.account_name}",
        f"Reward: {reward}",
        f"Spend: {fmt(scenario.amount, settings.currency)} / {scenario.category}",
        f"Why: {best.reasoning}",
    ]
    return "\n".join(lines)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        "Send a spend like '120 Dining' to find the best card. Commands: /due, /summary"
    )


async def due(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    ranking = get_service().due_ranking()
    if not ranking:
        await update.message.reply_text("No accounts yet.")
        return
    lines = [
        f"{account.name}: due in {distance} day(s), balance {fmt(account.balance, settings.currency)}"
        for account, distance in ranking
    ]
    await update.message.reply_text("\n".join(lines))


async def summary(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    data = get_service().summary()
    lines = [f"Total debt: {fmt(data.total_debt, settings.currency)}"]
    lines.extend(f"- {item.name}: {fmt(item.value, settings.currency)}" for item in data.category_data)
    if data.due_soonest:
        lines.append(f"Due soonest: {data.due_soonest}")
    await update.message.reply_text("\n".join(lines))


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = update.message.text or ""
    scenario = parse_spend_message(text)
    if scenario is None:
        await update.message.reply_text("Could not read that. Try '120 Dining'.")
        return
    try:
        ranked = get_service().best_accounts_for(scenario)
    except CreditMindError as exc:
        logger.warning("Recommendation failed for %r: %s", text, exc)
        await update.message.reply_text(f"Failed: {exc}")
        return
    if not ranked:
        await update.message.reply_text("No accounts available.")
        return
    await update.message.reply_text(_format_best(scenario, ranked))


def main() -> None:
    if not settings.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN is required.")

    app = Application.builder().token(settings.telegram_bot_token).build()
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("due", due))
    app.add_handler(CommandHandler("summary", summary))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    app.run_polling()


if __name__ == "__main__":
    main()
