# app/core/exceptions.py
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """
    Erro base da aplicação. Cada subclasse define o status HTTP correspondente.
    """
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class AuthError(AppError):
    status_code = 401
    default_message = "Invalid credentials"

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class InvalidToken(AuthError):
    default_message = "Invalid token"


class ExpiredToken(AuthError):
    default_message = "Token expired"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Duplicate field value entered"


class DuplicateSubmissionError(ConflictError):
    status_code = 429
    default_message = "Duplicate submission detected. Please wait before submitting again."


class RateLimitError(AppError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later."


class InternalError(AppError):
    status_code = 500
    default_message = "Server Error"
