# File: /gridbase/core/error_handlers.py | Version: 1.1 | Title: Domain + Standardized Error Handlers
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gridbase.core.config import settings
from gridbase.core.exceptions import BulkInsertError, GridError

logger = logging.getLogger(__name__)

_CODE_MAP = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
    500: "INTERNAL_SERVER_ERROR",
}


def _err(code: str, message: str):
    return {"error": {"code": code, "message": message}}


def register_domain_handlers(app: FastAPI) -> None:
    @app.exception_handler(GridError)
    async def _grid_exc(_req: Request, exc: GridError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        if settings.ENABLE_STD_ERRORS:
            content = _err(exc.code, exc.message)
        else:
            content = {"detail": exc.message, "code": exc.code}
        if isinstance(exc, BulkInsertError):
            content["committed"] = exc.committed
        return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(_req: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_err(_CODE_MAP.get(exc.status_code, "ERROR"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(_req: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422, content=_err("UNPROCESSABLE_ENTITY", "Validation error")
        )

    @app.exception_handler(Exception)
    async def _unhandled(_req: Request, exc: Exception):
        logger.exception("Unhandled error")
        # Avoid leaking internals
        return JSONResponse(
            status_code=500, content=_err("INTERNAL_SERVER_ERROR", "Internal server error")
        )
