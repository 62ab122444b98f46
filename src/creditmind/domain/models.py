from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

CATEGORIES = [
    "Groceries",
    "Shopping",
    "Transport",
    "Dining",
    "Utilities",
    "Entertainment",
    "Health",
    "General",
]

DEFAULT_CATEGORY = "General"


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase keys, dumps camelCase with ``by_alias=True``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _rename_legacy_keys(data: Any, legacy: dict[str, str]) -> Any:
    # Older backups used short names ("type", "limit", "cap").
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for old, new in legacy.items():
        if old in data and new not in data:
            data[new] = data.pop(old)
    return data


def _strip_currency(value: Any) -> Any:
    if isinstance(value, str):
        cleaned = value.replace("RM", "").replace("$", "").replace(",", "").strip()
        return cleaned or None
    return value


def rekey_fractional_ids(transactions: Any) -> Any:
    # Older imports used ``Date.now() + Math.random()`` ids; give those fresh integer ids.
    if not isinstance(transactions, list):
        return transactions
    taken = {
        item["id"]
        for item in transactions
        if isinstance(item, dict) and isinstance(item.get("id"), int)
    }
    next_id = max(taken, default=0) + 1
    rekeyed = []
    for item in transactions:
        if isinstance(item, dict) and isinstance(item.get("id"), float):
            item = dict(item)
            whole = int(item["id"])
            if item["id"].is_integer() and whole not in taken:
                item["id"] = whole
            else:
                while next_id in taken:
                    next_id += 1
                item["id"] = next_id
            taken.add(item["id"])
        rekeyed.append(item)
    return rekeyed


class AccountType(str, Enum):
    CREDIT = "credit"
    BNPL = "bnpl"


class RewardType(str, Enum):
    CASHBACK = "cashback"
    POINTS = "points"


class RewardRule(CamelModel):
    category: str
    rate: Decimal


class Benefits(CamelModel):
    reward_type: RewardType = RewardType.CASHBACK
    base_rate: Decimal = Decimal("0")
    rules: list[RewardRule] = Field(default_factory=list)
    monthly_cap: Decimal = Field(default=Decimal("0"), ge=0)
    min_spend: Decimal = Field(default=Decimal("0"), ge=0)

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        return _rename_legacy_keys(data, {"type": "rewardType", "cap": "monthlyCap"})

    def rate_table(self) -> dict[str, Decimal]:
        """Category -> rate lookup. The first rule defined for a category wins."""
        table: dict[str, Decimal] = {}
        for rule in self.rules:
            table.setdefault(rule.category, rule.rate)
        return table


class Account(CamelModel):
    id: int
    name: str = Field(min_length=1)
    account_type: AccountType = AccountType.CREDIT
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0)
    statement_day: int = Field(default=1, ge=1, le=31)
    due_day: int = Field(default=1, ge=1, le=31)
    balance: Decimal = Decimal("0")
    benefits: Benefits = Field(default_factory=Benefits)
    color: str = "bg-slate-500"
    last_sync_date: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        return _rename_legacy_keys(data, {"type": "accountType", "limit": "creditLimit"})


class Transaction(CamelModel):
    id: int
    date: str
    description: str
    amount: Decimal
    category: str = DEFAULT_CATEGORY
    account_id: int


class ExtractedTransaction(CamelModel):
    """A transaction as reported by statement extraction. Every field may be missing."""

    date: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    category: str | None = None
    account_id: int | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _strip_currency(cls, value: Any) -> Any:
        return _strip_currency(value)


class StatementInfo(CamelModel):
    transactions: list[ExtractedTransaction] = Field(default_factory=list)
    statement_balance: Decimal | None = None
    due_date: str | None = None

    @field_validator("statement_balance", mode="before")
    @classmethod
    def _strip_currency(cls, value: Any) -> Any:
        return _strip_currency(value)


class ManualTransactionInput(CamelModel):
    date: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    category: str | None = None
    account_id: int | None = None


class SpendScenario(CamelModel):
    amount: Decimal
    category: str = DEFAULT_CATEGORY


class LedgerSnapshot(CamelModel):
    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)

    @field_validator("transactions", mode="before")
    @classmethod
    def _rekey_ids(cls, value: Any) -> Any:
        return rekey_fractional_ids(value)


class RewardEstimate(CamelModel):
    reward_type: RewardType
    rate: Decimal
    raw_reward: Decimal
    reward: Decimal
    capped: bool
    reasoning: str


class AccountRewardEvaluation(CamelModel):
    account_id: int
    account_name: str
    reward_type: RewardType
    reward: Decimal
    reasoning: str


class CategorySpend(CamelModel):
    name: str
    value: Decimal


class SpendSummary(CamelModel):
    total_debt: Decimal
    category_data: list[CategorySpend]
    due_soonest: str | None = None
