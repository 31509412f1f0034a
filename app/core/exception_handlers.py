"""Error responses for the identity API.

Every error body is {"error": CODE, "message": str, ...}. Domain errors
carry their own code; the table below picks the HTTP status for it.
Request values are never echoed back (they may hold SMS codes or id numbers).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import IdentityServiceException

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "PHONE_NOT_VERIFIED": 400,
    "AUTHENTICATION_ERROR": 401,
    "RESOURCE_NOT_FOUND": 404,
    "PHONE_ALREADY_BOUND": 409,
    "UPSTREAM_ERROR": 502,
    "SMS_DELIVERY_FAILED": 502,
    "SERVICE_UNAVAILABLE": 503,
}


def _error_body(code: str, message: Any, **extra: Any) -> dict[str, Any]:
    return {"error": code, "message": message, **extra}


def _on_identity_error(request: Request, exc: IdentityServiceException) -> JSONResponse:
    status = STATUS_BY_ERROR_CODE.get(exc.error_code, 400)
    if status >= 500:
        logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _safe_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Location, message and type of each error; the rejected input is dropped."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=_error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            details=_safe_validation_errors(exc),
        ),
    )


def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above; call once from create_app()."""
    app.add_exception_handler(IdentityServiceException, _on_identity_error)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled)
