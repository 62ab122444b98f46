import logging
import time
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

from creditmind.domain.errors import NotFoundError, ValidationError
from creditmind.domain.models import (
    DEFAULT_CATEGORY,
    Account,
    ExtractedTransaction,
    LedgerSnapshot,
    ManualTransactionInput,
    StatementInfo,
    Transaction,
)
from creditmind.utils.formatting import try_parse_date

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown"


def normalize_transaction(
    extracted: ExtractedTransaction,
    account_id: int,
    transaction_id: int,
    today: date,
) -> Transaction:
    """Turn a best-effort extracted record into a ledger transaction for ``account_id``."""
    return Transaction(
        id=transaction_id,
        date=extracted.date or today.isoformat(),
        description=extracted.description or UNKNOWN_DESCRIPTION,
        amount=extracted.amount if extracted.amount is not None else Decimal("0"),
        category=extracted.category or DEFAULT_CATEGORY,
        account_id=account_id,
    )


class Ledger:
    """Accounts and transactions of one user session.

    Mutations build the new collections first and swap both in a single
    assignment, so a failed call leaves the ledger untouched. Transactions
    are kept most-recent-first.
    """

    def __init__(
        self,
        accounts: list[Account] | None = None,
        transactions: list[Transaction] | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.accounts = [account.model_copy(deep=True) for account in accounts or []]
        self.transactions = list(transactions or [])
        self._clock = clock
        self._last_issued_id = 0

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot, clock: Callable[[], date] = date.today) -> "Ledger":
        return cls(snapshot.accounts, snapshot.transactions, clock=clock)

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            accounts=[account.model_copy(deep=True) for account in self.accounts],
            transactions=list(self.transactions),
        )

    def get_account(self, account_id: int) -> Account:
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise NotFoundError(f"Account {account_id} not found.")

    def _new_transaction_id(self) -> int:
        taken = {txn.id for txn in self.transactions}
        candidate = max(int(time.time() * 1000), self._last_issued_id + 1)
        while candidate in taken:
            candidate += 1
        self._last_issued_id = candidate
        return candidate

    def _with_account(self, updated: Account) -> list[Account]:
        return [updated if account.id == updated.id else account for account in self.accounts]

    def apply_manual_transaction(
        self,
        account_id: int | None,
        fields: ManualTransactionInput | Mapping[str, Any],
    ) -> tuple[Transaction, Account]:
        if not isinstance(fields, ManualTransactionInput):
            try:
                fields = ManualTransactionInput.model_validate(fields)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid transaction fields: {exc}") from exc

        description = (fields.description or "").strip()
        if not description:
            raise ValidationError("Description is required.")
        if fields.amount is None or fields.amount == 0:
            raise ValidationError("Amount must be a non-zero number.")

        target_id = account_id if account_id is not None else fields.account_id
        if target_id is None:
            raise ValidationError("Account is required.")
        try:
            account = self.get_account(target_id)
        except NotFoundError as exc:
            raise ValidationError(f"Account {target_id} does not exist.") from exc

        txn_date = self._clock()
        if fields.date:
            txn_date = try_parse_date(fields.date)
            if txn_date is None:
                raise ValidationError(f"Unreadable date: {fields.date!r}")

        transaction = Transaction(
            id=self._new_transaction_id(),
            date=txn_date.isoformat(),
            description=description,
            amount=fields.amount,
            category=fields.category or DEFAULT_CATEGORY,
            account_id=account.id,
        )
        updated = account.model_copy(update={"balance": account.balance + transaction.amount})

        self.accounts, self.transactions = self._with_account(updated), [transaction, *self.transactions]
        logger.info(
            "Added transaction %s (%s) to account %s, balance now %s",
            transaction.id,
            transaction.amount,
            updated.id,
            updated.balance,
        )
        return transaction, updated

    def delete_transaction(self, transaction_id: int) -> "Ledger":
        transaction = next((txn for txn in self.transactions if txn.id == transaction_id), None)
        if transaction is None:
            raise NotFoundError(f"Transaction {transaction_id} not found.")

        accounts = self.accounts
        try:
            account = self.get_account(transaction.account_id)
        except NotFoundError:
            logger.warning(
                "Transaction %s references missing account %s, no balance reversed",
                transaction_id,
                transaction.account_id,
            )
        else:
            accounts = self._with_account(
                account.model_copy(update={"balance": account.balance - transaction.amount})
            )

        self.accounts = accounts
        self.transactions = [txn for txn in self.transactions if txn.id != transaction_id]
        logger.info("Deleted transaction %s from account %s", transaction_id, transaction.account_id)
        return self

    def apply_imported_statement(
        self,
        account_id: int,
        statement_info: StatementInfo | Mapping[str, Any],
    ) -> "Ledger":
        """Merge an extracted statement into ``account_id``.

        When the statement reports a closing balance it replaces the account
        balance outright; otherwise the balance is left as it was and the
        imported line items are not summed into it.
        """
        if not isinstance(statement_info, StatementInfo):
            try:
                statement_info = StatementInfo.model_validate(statement_info)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid statement data: {exc}") from exc

        account = self.get_account(account_id)
        today = self._clock()
        imported = [
            normalize_transaction(extracted, account.id, self._new_transaction_id(), today)
            for extracted in statement_info.transactions
        ]

        update: dict[str, Any] = {"last_sync_date": today.isoformat()}
        if statement_info.statement_balance is not None:
            update["balance"] = statement_info.statement_balance
        updated = account.model_copy(update=update)

        self.accounts, self.transactions = self._with_account(updated), [*imported, *self.transactions]
        logger.info(
            "Imported %d transaction(s) into account %s, balance %s",
            len(imported),
            account.id,
            updated.balance,
        )
        return self

    def update_account(self, account: Account) -> Account:
        self.get_account(account.id)
        replacement = account.model_copy(deep=True)
        self.accounts = self._with_account(replacement)
        logger.info("Updated account %s", account.id)
        return replacement

    def replace(self, snapshot: LedgerSnapshot) -> "Ledger":
        accounts = [account.model_copy(deep=True) for account in snapshot.accounts]
        self.accounts, self.transactions = accounts, list(snapshot.transactions)
        return self
