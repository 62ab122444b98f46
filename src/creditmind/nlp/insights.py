import json
import logging

from openai import OpenAI, OpenAIError

from creditmind.config import settings
from creditmind.domain.errors import ImportAdapterError
from creditmind.domain.models import Account, Transaction
from creditmind.nlp.statement_parser import build_client

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI analysis currently unavailable."


def _build_prompt(transactions: list[Transaction], accounts: list[Account]) -> str:
    card_rules = [
        {
            "name": account.name,
            "rules": [rule.model_dump(mode="json") for rule in account.benefits.rules],
        }
        for account in accounts
    ]
    spend = [
        {"category": txn.category, "amount": str(txn.amount), "description": txn.description}
        for txn in transactions
    ]
    return (
        f"Analyze these {len(transactions)} transactions: {json.dumps(spend)} "
        f"and these card rewards: {json.dumps(card_rules)}.\n"
        "Provide:\n"
        "1. Top 3 categories where the user is spending most.\n"
        "2. Recommendation on which card is best for their top categories.\n"
        "3. One habit change to save money.\n"
        "Be concise and use bullet points."
    )


def generate_spending_insights(
    transactions: list[Transaction],
    accounts: list[Account],
    client: OpenAI | None = None,
    model: str | None = None,
) -> str:
    try:
        client = client or build_client()
        response = client.chat.completions.create(
            model=model or settings.openai_model,
            messages=[{"role": "user", "content": _build_prompt(transactions, accounts)}],
        )
    except (ImportAdapterError, OpenAIError) as exc:
        logger.warning("Spending insights unavailable: %s", exc)
        return UNAVAILABLE_MESSAGE

    return response.choices[0].message.content or UNAVAILABLE_MESSAGE
