"""Exception handlers: every error leaves the API as ``{"detail": ...}`` JSON."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from casedesk.notifications.exceptions import NotFoundError, PersistenceError

logger = structlog.get_logger()


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic puts exception instances in ``ctx``; stringify them for JSON.
    errors = []
    for error in exc.errors():
        entry = {k: v for k, v in error.items() if k != "ctx"}
        if "ctx" in error:
            entry["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(entry)
    return errors


def setup_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def on_http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def on_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def on_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("persistence_error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=503, content={"detail": "Storage temporarily unavailable"})

    @app.exception_handler(Exception)
    async def on_unhandled(request: Request, exc: Exception) -> JSONResponse:
        """Log the traceback; clients only ever see a generic 500."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
