# app/core/logging_middleware.py
import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import Settings

# Definição de tipo adequada para o callback do middleware
CALL_NEXT_TYPE = Callable[[Request], Awaitable[Response]]

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("api")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            "client_ip": getattr(record, "client_ip", None),
            "method": getattr(record, "method", None),
            "path": getattr(record, "path", None),
            "status_code": getattr(record, "status_code", None),
            "response_time": getattr(record, "response_time", None),
        }
        if record.exc_info:
            log_data["error"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configura o logger "api" (e seus filhos). Chamadas repetidas não duplicam handlers.
    """
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if not any(getattr(h, "_api_console", False) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(TEXT_FORMAT))
        console_handler._api_console = True
        logger.addHandler(console_handler)

    if settings.LOG_TO_FILE and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        log_dir = "logs"
        try:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, settings.LOG_FILE),
                maxBytes=settings.LOG_MAX_SIZE,
                backupCount=settings.LOG_BACKUP_COUNT,
            )
        except OSError as e:
            logger.warning("Could not configure file logging: %s", e)
        else:
            if settings.LOG_FORMAT == "json":
                file_handler.setFormatter(JsonFormatter())
            else:
                file_handler.setFormatter(logging.Formatter(TEXT_FORMAT))
            logger.addHandler(file_handler)

    return logger


class ApiLoggingMiddleware(BaseHTTPMiddleware):
    """
    Registra cada requisição com um request id, sem headers sensíveis.
    """

    async def dispatch(self, request: Request, call_next: CALL_NEXT_TYPE) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        extra = {
            "request_id": request_id,
            "client_ip": client_ip,
            "method": request.method,
            "path": request.url.path,
        }
        logger.debug("Request started %s %s", request.method, request.url.path, extra=extra)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "Request failed %s %s",
                request.method,
                request.url.path,
                extra={**extra, "status_code": 500, "response_time": time.time() - start_time},
                exc_info=True,
            )
            raise

        response_time = time.time() - start_time
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            response_time * 1000,
            extra={**extra, "status_code": response.status_code, "response_time": response_time},
        )
        response.headers["X-Request-ID"] = request_id
        return response
