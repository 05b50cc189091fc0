from fastapi import HTTPException

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            data=None,
            status="Failure",
            status_code=status_code,
            message=message
        ).model_dump()
    )


def not_found(entity: str):
    return error_response(
        message=f"{entity} not found",
        status_code=AppStatusCode.RECORD_NOT_FOUND,
        http_status=404
    )
