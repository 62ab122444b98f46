import logging
import threading
from datetime import date
from typing import Any, Callable

from creditmind.config import settings
from creditmind.domain.models import (
    Account,
    AccountRewardEvaluation,
    LedgerSnapshot,
    ManualTransactionInput,
    RewardEstimate,
    SpendScenario,
    SpendSummary,
    StatementInfo,
    Transaction,
)
from creditmind.engine.rewards import evaluate_reward, month_to_date_reward
from creditmind.engine.selectors import (
    due_date_distance,
    rank_accounts_by_due_proximity,
    rank_accounts_for_spend,
)
from creditmind.ledger.analytics import spend_summary
from creditmind.ledger.reconcile import Ledger
from creditmind.nlp.insights import generate_spending_insights
from creditmind.nlp.statement_parser import ImportSession, StatementExtractor
from creditmind.repository.ledger_store import LedgerStore, export_backup, parse_backup
from creditmind.utils.formatting import google_calendar_link

logger = logging.getLogger(__name__)


class DashboardService:
    """Single writer over the ledger. Every mutation is persisted as one snapshot."""

    def __init__(
        self,
        store: LedgerStore,
        extractor: StatementExtractor | None = None,
        clock: Callable[[], date] = date.today,
        insights: Callable[[list[Transaction], list[Account]], str] = generate_spending_insights,
    ):
        self.store = store
        self.clock = clock
        self.ledger = Ledger.from_snapshot(store.load(), clock=clock)
        self.import_session = ImportSession(extractor or StatementExtractor())
        self._insights = insights
        self._write_lock = threading.Lock()

    def _persist(self) -> None:
        try:
            self.store.save(self.ledger.snapshot())
        except OSError:
            logger.exception("Failed to persist ledger to %s", self.store.data_file)

    # Reads

    def list_accounts(self) -> list[Account]:
        return list(self.ledger.accounts)

    def list_transactions(self) -> list[Transaction]:
        return list(self.ledger.transactions)

    def due_ranking(self) -> list[tuple[Account, int]]:
        today = self.clock()
        return [
            (account, due_date_distance(account.due_day, today))
            for account in rank_accounts_by_due_proximity(self.ledger.accounts, today)
        ]

    def summary(self) -> SpendSummary:
        return spend_summary(self.ledger.accounts, self.ledger.transactions, self.clock())

    def insights(self) -> str:
        return self._insights(self.ledger.transactions, self.ledger.accounts)

    def estimate_reward(self, account_id: int, scenario: SpendScenario) -> RewardEstimate:
        account = self.ledger.get_account(account_id)
        earned = month_to_date_reward(self.ledger.transactions, account, self.clock())
        return evaluate_reward(scenario, account.benefits, earned)

    def best_accounts_for(self, scenario: SpendScenario) -> list[AccountRewardEvaluation]:
        return rank_accounts_for_spend(
            self.ledger.accounts, scenario, self.ledger.transactions, self.clock()
        )

    def calendar_link(self, account_id: int) -> str:
        account = self.ledger.get_account(account_id)
        return google_calendar_link(
            account.name, account.balance, account.due_day, self.clock(), settings.currency
        )

    def export_backup(self) -> tuple[str, dict[str, Any]]:
        return export_backup(self.ledger.snapshot(), self.clock())

    # Mutations

    def add_transaction(self, fields: ManualTransactionInput) -> tuple[Transaction, Account]:
        with self._write_lock:
            result = self.ledger.apply_manual_transaction(fields.account_id, fields)
            self._persist()
        return result

    def delete_transaction(self, transaction_id: int) -> None:
        with self._write_lock:
            self.ledger.delete_transaction(transaction_id)
            self._persist()

    def update_account(self, account: Account) -> Account:
        with self._write_lock:
            updated = self.ledger.update_account(account)
            self._persist()
        return updated

    def extract_statement(self, images: list[str] | None = None, text: str | None = None) -> StatementInfo:
        if images:
            return self.import_session.submit_images(images)
        return self.import_session.submit_text(text or "")

    def confirm_import(self, account_id: int, statement: StatementInfo | None = None) -> Account:
        with self._write_lock:
            self.ledger.get_account(account_id)
            if statement is None:
                statement = self.import_session.take_preview()
            self.ledger.apply_imported_statement(account_id, statement)
            self.import_session.discard()
            self._persist()
        return self.ledger.get_account(account_id)

    def restore_backup(self, document: str | bytes | dict[str, Any]) -> LedgerSnapshot:
        snapshot = parse_backup(document)
        with self._write_lock:
            self.ledger.replace(snapshot)
            self._persist()
        logger.info(
            "Restored backup with %d account(s) and %d transaction(s)",
            len(snapshot.accounts),
            len(snapshot.transactions),
        )
        return snapshot


def build_service(data_file: str | None = None) -> DashboardService:
    return DashboardService(LedgerStore(data_file or settings.data_file))
