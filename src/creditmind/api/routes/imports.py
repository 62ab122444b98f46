from fastapi import APIRouter, Depends

from creditmind.api.dependencies import get_service, to_http_error
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import Account, StatementInfo
from creditmind.schemas.requests import ImportConfirmRequest, ImportExtractRequest
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("/extract", response_model=StatementInfo)
def extract_statement(
    request: ImportExtractRequest,
    service: DashboardService = Depends(get_service),
) -> StatementInfo:
    try:
        return service.extract_statement(images=request.images, text=request.text)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc


@router.post("/confirm", response_model=Account)
def confirm_import(
    request: ImportConfirmRequest,
    service: DashboardService = Depends(get_service),
) -> Account:
    try:
        return service.confirm_import(request.account_id, request.statement)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
