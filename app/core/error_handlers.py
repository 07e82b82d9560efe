# app/core/error_handlers.py
import logging
import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError, ConflictError

logger = logging.getLogger("api.errors")


def _error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def _format_validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        # loc = ("body", "email") / ("query", "page")
        field = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        errors.append({"field": field, "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    settings = app.state.settings

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, errors=exc.errors),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _format_validation_errors(exc)
        locations = {str(error.get("loc", ("body",))[0]) for error in exc.errors()}
        message = "Invalid query parameters" if locations == {"query"} else "Validation failed"
        return JSONResponse(status_code=400, content=_error_body(message, errors=errors))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        conflict = ConflictError()
        return JSONResponse(status_code=conflict.status_code, content=_error_body(conflict.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            prefix = settings.API_PREFIX
            return JSONResponse(
                status_code=404,
                content=_error_body(
                    "Route not found",
                    availableRoutes={
                        "contact": f"{prefix}/contact",
                        "admin": f"{prefix}/admin",
                        "auth": f"{prefix}/auth",
                        "docs": "/docs",
                        "health": "/health",
                    },
                ),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        stack = None
        if not settings.is_production:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=500, content=_error_body("Server Error", stack=stack))
