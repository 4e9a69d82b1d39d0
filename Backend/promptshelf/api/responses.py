# promptshelf/api/responses.py
"""
Uniform response envelope and exception handlers.

    {"success": bool, "data"?: ..., "error"?: str, "pagination"?: {...}}
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from promptshelf.core.exceptions import (
    PromptShelfError,
    StoreFailureError,
    ValidationFailedError,
)
from promptshelf.core.logging import log


def success(data: Any, pagination: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if pagination is not None:
        body["pagination"] = pagination
    return body


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _shelf_error_handler(request: Request, exc: PromptShelfError) -> JSONResponse:
    if isinstance(exc, StoreFailureError):
        # Detail was already logged by the service; never sent to the client
        return failure(exc.status_code, exc.message)
    log("API", f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return failure(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationFailedError.from_errors(exc.errors())
    log("API", f"{request.method} {request.url.path} -> 400: {error.message}")
    return failure(error.status_code, error.message)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log("STORE", f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return failure(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as an envelope, never as a bare traceback."""
    app.add_exception_handler(PromptShelfError, _shelf_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
