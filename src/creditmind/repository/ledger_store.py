import json
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from creditmind.domain.errors import BackupFormatError
from creditmind.domain.models import Account, LedgerSnapshot, Transaction, rekey_fractional_ids
from creditmind.repository.defaults import default_snapshot

logger = logging.getLogger(__name__)

ACCOUNTS_KEY = "accounts"
TRANSACTIONS_KEY = "transactions"

_accounts_adapter = TypeAdapter(list[Account])
_transactions_adapter = TypeAdapter(list[Transaction])


def _dump(snapshot: LedgerSnapshot) -> dict[str, Any]:
    return snapshot.model_dump(mode="json", by_alias=True)


class LedgerStore:
    """JSON file with two slots, ``accounts`` and ``transactions``."""

    def __init__(self, data_file: str):
        self.data_file = Path(data_file)

    def _read_raw(self) -> dict[str, Any]:
        if not self.data_file.exists():
            return {}
        try:
            with self.data_file.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read %s, using defaults: %s", self.data_file, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> LedgerSnapshot:
        raw = self._read_raw()
        defaults = default_snapshot()

        accounts = defaults.accounts
        if raw.get(ACCOUNTS_KEY):
            try:
                accounts = _accounts_adapter.validate_python(raw[ACCOUNTS_KEY])
            except PydanticValidationError as exc:
                logger.warning("Stored accounts are invalid, using defaults: %s", exc)

        # An empty transaction list is a valid state; only a missing slot falls back.
        transactions = defaults.transactions
        if raw.get(TRANSACTIONS_KEY) is not None:
            try:
                transactions = _transactions_adapter.validate_python(rekey_fractional_ids(raw[TRANSACTIONS_KEY]))
            except PydanticValidationError as exc:
                logger.warning("Stored transactions are invalid, using defaults: %s", exc)

        return LedgerSnapshot(accounts=accounts, transactions=transactions)

    def save(self, snapshot: LedgerSnapshot) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".json",
            prefix="ledger_",
            dir=self.data_file.parent,
            delete=False,
            encoding="utf-8",
        ) as fp:
            temp_path = fp.name
            try:
                json.dump(_dump(snapshot), fp, ensure_ascii=False, indent=2)
            except Exception:
                fp.close()
                os.unlink(temp_path)
                raise
        os.replace(temp_path, self.data_file)


def backup_filename(today: date | None = None) -> str:
    return f"creditmind_backup_{(today or date.today()).isoformat()}.json"


def export_backup(snapshot: LedgerSnapshot, today: date | None = None) -> tuple[str, dict[str, Any]]:
    return backup_filename(today), _dump(snapshot)


def parse_backup(document: str | bytes | dict[str, Any]) -> LedgerSnapshot:
    """Validate a backup document. Both collections must be present."""
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise BackupFormatError("Invalid backup file.") from exc

    if not isinstance(document, dict):
        raise BackupFormatError("Invalid backup file.")

    missing = [key for key in (ACCOUNTS_KEY, TRANSACTIONS_KEY) if document.get(key) is None]
    if missing:
        raise BackupFormatError(f"Backup is missing: {', '.join(missing)}")

    try:
        return LedgerSnapshot.model_validate(
            {ACCOUNTS_KEY: document[ACCOUNTS_KEY], TRANSACTIONS_KEY: document[TRANSACTIONS_KEY]}
        )
    except PydanticValidationError as exc:
        raise BackupFormatError(f"Invalid backup file: {exc}") from exc
