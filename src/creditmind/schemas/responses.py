from creditmind.domain.models import (
    Account,
    AccountRewardEvaluation,
    CamelModel,
    RewardEstimate,
    Transaction,
)


class TransactionCreatedResponse(CamelModel):
    transaction: Transaction
    account: Account


class DueAccount(CamelModel):
    account: Account
    days_until_due: int


class RewardEstimateResponse(CamelModel):
    estimate: RewardEstimate | None = None
    ranked_accounts: list[AccountRewardEvaluation] = []


class InsightsResponse(CamelModel):
    text: str


class CalendarLinkResponse(CamelModel):
    url: str
