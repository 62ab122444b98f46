from datetime import date
from types import SimpleNamespace

import pytest

from creditmind.domain.models import StatementInfo
from creditmind.ledger.reconcile import Ledger
from creditmind.repository.defaults import default_snapshot
from creditmind.repository.ledger_store import LedgerStore
from creditmind.services.dashboard import DashboardService

TODAY = date(2024, 3, 29)


class FakeExtractor:
    def __init__(self, statement: StatementInfo | None = None):
        self.statement = statement or StatementInfo()
        self.calls: list[tuple[str, object]] = []

    def extract_from_images(self, images: list[str]) -> StatementInfo:
        self.calls.append(("images", images))
        return self.statement

    def extract_from_text(self, raw_text: str) -> StatementInfo:
        self.calls.append(("text", raw_text))
        return self.statement


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content: str | None = None, error: Exception | None = None) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content, error)))


@pytest.fixture
def ledger() -> Ledger:
    return Ledger.from_snapshot(default_snapshot(), clock=lambda: TODAY)


@pytest.fixture
def statement() -> StatementInfo:
    return StatementInfo.model_validate(
        {
            "transactions": [
                {"date": "2024-03-20", "description": "Grab Ride", "amount": 25.5, "category": "Transport"},
                {"date": "2024-03-21", "description": "Tealive", "amount": 12, "category": "Dining"},
                {"date": "2024-03-22", "description": "Lazada", "amount": 310, "category": "Shopping"},
            ],
            "statementBalance": 875.30,
            "dueDate": "2024-04-10",
        }
    )


@pytest.fixture
def extractor(statement: StatementInfo) -> FakeExtractor:
    return FakeExtractor(statement)


@pytest.fixture
def service(tmp_path, extractor: FakeExtractor) -> DashboardService:
    return DashboardService(
        LedgerStore(str(tmp_path / "ledger.json")),
        extractor=extractor,
        clock=lambda: TODAY,
        insights=lambda transactions, accounts: f"{len(transactions)} transactions reviewed",
    )
