from fastapi import APIRouter, Depends

from creditmind.api.dependencies import get_service
from creditmind.domain.models import SpendSummary
from creditmind.schemas.responses import InsightsResponse
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=SpendSummary)
def summary(service: DashboardService = Depends(get_service)) -> SpendSummary:
    return service.summary()


@router.get("/insights", response_model=InsightsResponse)
def insights(service: DashboardService = Depends(get_service)) -> InsightsResponse:
    return InsightsResponse(text=service.insights())
