"""Map domain errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import AuthorizationDeniedError, ErrorKind, MdNotesError
from ..core.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALIAS_CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHORIZATION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: MdNotesError) -> int:
    if isinstance(exc, AuthorizationDeniedError) and exc.anonymous:
        return status.HTTP_401_UNAUTHORIZED
    return STATUS_BY_KIND[exc.kind]


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def mdnotes_error_handler(request: Request, exc: MdNotesError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return _error_response(
        status_code,
        ErrorResponse(error=type(exc).__name__, message=exc.message, details=exc.to_details()),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(
            error="ValidationError",
            message="Request validation failed",
            details={"kind": ErrorKind.VALIDATION.value, "errors": jsonable_encoder(exc.errors())},
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MdNotesError, mdnotes_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
