from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from creditmind.api.dependencies import get_service, to_http_error
from creditmind.domain.errors import CreditMindError
from creditmind.domain.models import LedgerSnapshot
from creditmind.services.dashboard import DashboardService

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("")
def export_backup(service: DashboardService = Depends(get_service)) -> JSONResponse:
    filename, document = service.export_backup()
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/restore", response_model=LedgerSnapshot)
def restore_backup(
    document: Any = Body(...),
    service: DashboardService = Depends(get_service),
) -> LedgerSnapshot:
    try:
        return service.restore_backup(document)
    except CreditMindError as exc:
        raise to_http_error(exc) from exc
