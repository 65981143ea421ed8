import logging
from typing import Dict
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from device_api.exceptions import ERROR_DESCRIPTIONS, ErrorKind

log = logging.getLogger("api")

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_FIELDS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_DEVICE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DEVICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNPARSABLE_BODY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNPARSABLE_PARAMETER: status.HTTP_400_BAD_REQUEST,
}


class ErrorResponse(BaseModel):
    message: str
    description: str


def error_response(kind: ErrorKind) -> JSONResponse:
    body = ErrorResponse(
        message=kind.value, description=ERROR_DESCRIPTIONS[kind]
    )
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind], content=body.model_dump()
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Anything located in the body is a malformed payload; everything else
    # (path, query) is a malformed parameter.
    in_body = any(
        err.get("loc", ())[:1] == ("body",) for err in exc.errors()
    )
    kind = (
        ErrorKind.UNPARSABLE_BODY
        if in_body
        else ErrorKind.UNPARSABLE_PARAMETER
    )
    log.info(f"{request.method} {request.url.path} FAILED: {kind.value}")
    return error_response(kind)
