from fastapi import APIRouter, Depends, HTTPException

from creditmind.api.dependencies import get_service, to_http_error
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import Account
from creditmind.schemas.responses import CalendarLinkResponse, DueAccount
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=list[Account])
def list_accounts(service: DashboardService = Depends(get_service)) -> list[Account]:
    return service.list_accounts()


@router.get("/due", response_model=list[DueAccount])
def accounts_by_due_date(service: DashboardService = Depends(get_service)) -> list[DueAccount]:
    return [
        DueAccount(account=account, days_until_due=distance)
        for account, distance in service.due_ranking()
    ]


@router.put("/{account_id}", response_model=Account)
def update_account(
    account_id: int,
    account: Account,
    service: DashboardService = Depends(get_service),
) -> Account:
    if account.id != account_id:
        raise HTTPException(status_code=422, detail="Account id cannot be changed.")
    try:
        return service.update_account(account)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc


@router.get("/{account_id}/calendar-link", response_model=CalendarLinkResponse)
def calendar_link(account_id: int, service: DashboardService = Depends(get_service)) -> CalendarLinkResponse:
    try:
        return CalendarLinkResponse(url=service.calendar_link(account_id))
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
