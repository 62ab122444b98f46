from fastapi import APIRouter, Depends, Response

from creditmind.api.dependencies import get_service, to_http_error
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import ManualTransactionInput, Transaction
from creditmind.schemas.responses import TransactionCreatedResponse
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[Transaction])
def list_transactions(service: DashboardService = Depends(get_service)) -> list[Transaction]:
    return service.list_transactions()


@router.post("", response_model=TransactionCreatedResponse, status_code=201)
def add_transaction(
    request: ManualTransactionInput,
    service: DashboardService = Depends(get_service),
) -> TransactionCreatedResponse:
    try:
        transaction, account = service.add_transaction(request)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
    return TransactionCreatedResponse(transaction=transaction, account=account)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: int, service: DashboardService = Depends(get_service)) -> Response:
    try:
        service.delete_transaction(transaction_id)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)
