import json
import logging
import threading
from typing import Any, Callable

from openai import OpenAI, OpenAIError
from pydantic import ValidationError as PydanticValidationError

from creditmind.config import settings
from creditmind.domain.errors import ImportAdapterError, ImportInProgressError, ValidationError
from creditmind.domain.models import CATEGORIES, ExtractedTransaction, StatementInfo

logger = logging.getLogger(__name__)

OUTPUT_CONTRACT = (
    "Return JSON only with keys: transactions, statementBalance, dueDate. "
    "transactions is an array of {date, description, amount, category}. "
    "date and dueDate use YYYY-MM-DD. amount and statementBalance are plain numbers. "
    f"category must be one of: {', '.join(CATEGORIES)}. "
    "statementBalance is the total outstanding amount (closing balance); omit it if not shown."
)

IMAGE_PROMPT = (
    "Extract all transactions from these bank statement screenshots. "
    "These are multiple pages. If a transaction starts on one page and ends on another, merge it. "
    "Remove exact duplicates if found on page overlaps. "
    "Always provide a category for each transaction from the allowed list. "
    "Also find the total amount due (Closing Balance) and the Payment Due Date."
)

TEXT_PROMPT = (
    "Parse this raw text from a bank statement into structured JSON. "
    "Extract all transactions with categories, total balance due, and due date."
)


def build_client(api_key: str | None = None) -> OpenAI:
    api_key = (api_key if api_key is not None else settings.openai_api_key).strip()
    if not api_key:
        raise ImportAdapterError("OPENAI_API_KEY is missing for statement extraction.")
    return OpenAI(api_key=api_key)


def parse_statement_payload(data: Any) -> StatementInfo:
    """Build a StatementInfo from raw extractor output, skipping unusable line items."""
    if not isinstance(data, dict):
        raise ImportAdapterError("Extractor returned an unexpected payload.")

    raw_transactions = data.get("transactions") or []
    if not isinstance(raw_transactions, list):
        raise ImportAdapterError("Extractor returned transactions in an unexpected shape.")

    transactions: list[ExtractedTransaction] = []
    for index, item in enumerate(raw_transactions):
        try:
            transactions.append(ExtractedTransaction.model_validate(item))
        except PydanticValidationError as exc:
            logger.warning("Skipping extracted transaction #%d: %s", index, exc)

    balance = data.get("statementBalance", data.get("statement_balance"))
    if balance is not None:
        try:
            balance = StatementInfo.model_validate({"statementBalance": balance}).statement_balance
        except PydanticValidationError as exc:
            logger.warning("Dropping unreadable statement balance %r: %s", balance, exc)
            balance = None

    try:
        return StatementInfo.model_validate(
            {
                "transactions": transactions,
                "statementBalance": balance,
                "dueDate": data.get("dueDate", data.get("due_date")),
            }
        )
    except PydanticValidationError as exc:
        raise ImportAdapterError(f"Extractor returned an invalid statement: {exc}") from exc


class StatementExtractor:
    def __init__(
        self,
        client: OpenAI | None = None,
        model: str | None = None,
        vision_model: str | None = None,
    ):
        self._client = client
        self.model = model or settings.openai_model
        self.vision_model = vision_model or settings.openai_vision_model

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = build_client()
        return self._client

    def _complete(self, model: str, user_content: Any) -> StatementInfo:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=model,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": OUTPUT_CONTRACT},
                    {"role": "user", "content": user_content},
                ],
            )
        except OpenAIError as exc:
            logger.exception("Statement extraction request failed")
            raise ImportAdapterError(f"Statement extraction failed: {exc}") from exc

        content = response.choices[0].message.content
        if not content:
            raise ImportAdapterError("LLM returned empty content.")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.error("Extractor returned non-JSON content: %.200s", content)
            raise ImportAdapterError("Extractor returned malformed JSON.") from exc

        return parse_statement_payload(data)

    def extract_from_images(self, images: list[str]) -> StatementInfo:
        """Extract a statement from base64 encoded JPEG pages."""
        if not images:
            raise ValidationError("At least one statement image is required.")
        parts: list[dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image}"}}
            for image in images
        ]
        parts.append({"type": "text", "text": IMAGE_PROMPT})
        return self._complete(self.vision_model, parts)

    def extract_from_text(self, raw_text: str) -> StatementInfo:
        if not raw_text or not raw_text.strip():
            raise ValidationError("Statement text is empty.")
        return self._complete(self.model, f"{TEXT_PROMPT}\nText: {raw_text}")


class ImportSession:
    """Holds the extracted statement awaiting confirmation.

    Only one extraction may run at a time; a second submission while one is
    in flight is rejected rather than queued.
    """

    def __init__(self, extractor: StatementExtractor):
        self.extractor = extractor
        self.preview: StatementInfo | None = None
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def _run(self, extract: Callable[[], StatementInfo]) -> StatementInfo:
        if not self._in_flight.acquire(blocking=False):
            raise ImportInProgressError("A statement import is already in progress.")
        try:
            result = extract()
        finally:
            self._in_flight.release()
        self.preview = result
        logger.info("Extracted %d transaction(s) for preview", len(result.transactions))
        return result

    def submit_images(self, images: list[str]) -> StatementInfo:
        return self._run(lambda: self.extractor.extract_from_images(images))

    def submit_text(self, raw_text: str) -> StatementInfo:
        return self._run(lambda: self.extractor.extract_from_text(raw_text))

    def take_preview(self) -> StatementInfo:
        if self.preview is None:
            raise ValidationError("No extracted statement to confirm.")
        preview, self.preview = self.preview, None
        return preview

    def discard(self) -> None:
        self.preview = None
