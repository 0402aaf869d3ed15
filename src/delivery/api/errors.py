"""HTTP mapping for the delivery error taxonomy.

Protean's own handlers cover ``ValidationError`` (400). The handlers here
are registered after them and win for the more specific delivery errors.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from delivery.exceptions import ConflictError, NotFoundError, UnavailableError


def _error_body(exc: Exception) -> dict:
    messages = getattr(exc, "messages", None)
    return {"error": messages if messages else str(exc)}


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content=_error_body(exc))


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_error_body(exc))


async def _unavailable(request: Request, exc: UnavailableError) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content=_error_body(exc),
        headers={"Retry-After": "1"},
    )


def register_delivery_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(UnavailableError, _unavailable)
