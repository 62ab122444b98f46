import json
from datetime import date
from decimal import Decimal

import pytest

from creditmind.domain.errors import BackupFormatError
from creditmind.domain.models import AccountType, LedgerSnapshot, RewardType
from creditmind.repository.defaults import default_snapshot
from creditmind.repository.ledger_store import LedgerStore, export_backup, parse_backup

LEGACY_BACKUP = {
    "accounts": [
        {
            "id": 2,
            "name": "ShopeePayLater",
            "type": "bnpl",
            "limit": 3000,
            "statementDay": 1,
            "dueDay": 10,
            "benefits": {"type": "points", "baseRate": 1, "rules": [], "cap": 0, "minSpend": 0},
            "balance": 1200.5,
            "color": "bg-orange-500",
        }
    ],
    "transactions": [
        {"id": 5, "date": "2024-03-26", "description": "Shopee", "amount": 240, "category": "Shopping", "accountId": 2},
        {"id": 1711234567890.4187, "date": "2024-03-27", "description": "Lazada", "amount": 80, "accountId": 2},
        {"id": 5.0, "date": "2024-03-28", "description": "Zalora", "amount": 60, "accountId": 2},
    ],
}


def test_missing_file_loads_defaults(tmp_path) -> None:
    snapshot = LedgerStore(str(tmp_path / "absent.json")).load()

    assert snapshot == default_snapshot()


def test_save_then_load(tmp_path) -> None:
    store = LedgerStore(str(tmp_path / "nested" / "ledger.json"))
    snapshot = default_snapshot()
    snapshot.accounts[0].balance = Decimal("99.99")
    snapshot = LedgerSnapshot(accounts=snapshot.accounts[:1], transactions=[])

    store.save(snapshot)
    loaded = store.load()

    assert loaded.accounts[0].balance == Decimal("99.99")
    assert len(loaded.accounts) == 1
    assert loaded.transactions == []


def test_store_writes_camel_case_slots(tmp_path) -> None:
    store = LedgerStore(str(tmp_path / "ledger.json"))
    store.save(default_snapshot())

    raw = json.loads((tmp_path / "ledger.json").read_text(encoding="utf-8"))

    assert set(raw) == {"accounts", "transactions"}
    assert raw["transactions"][0]["accountId"] == 1
    assert raw["accounts"][0]["benefits"]["monthlyCap"] == "50"


def test_failed_save_leaves_no_temp_file(tmp_path, monkeypatch) -> None:
    def boom(*args, **kwargs):
        raise TypeError("not serializable")

    monkeypatch.setattr("creditmind.repository.ledger_store.json.dump", boom)
    store = LedgerStore(str(tmp_path / "ledger.json"))

    with pytest.raises(TypeError):
        store.save(default_snapshot())

    assert list(tmp_path.iterdir()) == []


def test_corrupt_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_text("{not json", encoding="utf-8")

    assert LedgerStore(str(path)).load() == default_snapshot()


def test_empty_accounts_slot_uses_default_accounts(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"accounts": [], "transactions": []}), encoding="utf-8")

    snapshot = LedgerStore(str(path)).load()

    assert len(snapshot.accounts) == 3
    assert snapshot.transactions == []


def test_parse_backup_accepts_legacy_document() -> None:
    snapshot = parse_backup(json.dumps(LEGACY_BACKUP))

    account = snapshot.accounts[0]
    assert account.account_type is AccountType.BNPL
    assert account.credit_limit == Decimal("3000")
    assert account.benefits.reward_type is RewardType.POINTS
    assert account.balance == Decimal("1200.5")
    assert snapshot.transactions[0].account_id == 2


def test_legacy_fractional_ids_are_rekeyed() -> None:
    snapshot = parse_backup(json.dumps(LEGACY_BACKUP))

    ids = [txn.id for txn in snapshot.transactions]
    assert ids[0] == 5
    assert all(isinstance(txn_id, int) for txn_id in ids)
    assert len(set(ids)) == len(ids)


def test_load_rekeys_fractional_ids(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(LEGACY_BACKUP), encoding="utf-8")

    snapshot = LedgerStore(str(path)).load()

    assert [txn.description for txn in snapshot.transactions] == ["Shopee", "Lazada", "Zalora"]
    assert len({txn.id for txn in snapshot.transactions}) == 3


@pytest.mark.parametrize(
    "document",
    [
        {"accounts": LEGACY_BACKUP["accounts"]},
        {"transactions": []},
        "{broken",
        b"\xff\xfe",
        "[1, 2]",
        {"accounts": [{"id": "x"}], "transactions": []},
    ],
)
def test_parse_backup_rejects_bad_documents(document) -> None:
    with pytest.raises(BackupFormatError):
        parse_backup(document)


def test_export_backup_names_file_by_date() -> None:
    filename, document = export_backup(default_snapshot(), today=date(2024, 3, 29))

    assert filename == "creditmind_backup_2024-03-29.json"
    assert parse_backup(document) == default_snapshot()
