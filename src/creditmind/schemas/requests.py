from decimal import Decimal

from creditmind.domain.models import DEFAULT_CATEGORY, CamelModel, StatementInfo


class ImportExtractRequest(CamelModel):
    images: list[str] = []
    text: str | None = None


class ImportConfirmRequest(CamelModel):
    account_id: int
    statement: StatementInfo | None = None


class RewardEstimateRequest(CamelModel):
    amount: Decimal
    category: str = DEFAULT_CATEGORY
    account_id: int | None = None
