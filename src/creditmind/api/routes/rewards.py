from fastapi import APIRouter, Depends

from creditmind.api.dependencies import get_service, to_http_error
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import SpendScenario
from creditmind.schemas.requests import RewardEstimateRequest
from creditmind.schemas.responses import RewardEstimateResponse
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.post("/estimate", response_model=RewardEstimateResponse)
def estimate_reward(
    request: RewardEstimateRequest,
    service: DashboardService = Depends(get_service),
) -> RewardEstimateResponse:
    scenario = SpendScenario(amount=request.amount, category=request.category)
    if request.account_id is None:
        return RewardEstimateResponse(ranked_accounts=service.best_accounts_for(scenario))
    try:
        return RewardEstimateResponse(estimate=service.estimate_reward(request.account_id, scenario))
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
