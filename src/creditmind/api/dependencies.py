from functools import lru_cache

from fastapi import HTTPException

from creditmind.domain.errors import (
    BackupFormatError,
    CreditMindError,
    ImportAdapterError,
    ImportInProgressError,
    NotFoundError,
    ValidationError,
)
from creditmind.services.dashboard import DashboardService, build_service

_STATUS_CODES: list[tuple[type[CreditMindError], int]] = [
    (NotFoundError, 404),
    (ValidationError, 422),
    (ImportInProgressError, 409),
    (ImportAdapterError, 502),
    (BackupFormatError, 400),
]


@lru_cache
def get_service() -> DashboardService:
    return build_service()


def to_http_error(exc: CreditMindError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
