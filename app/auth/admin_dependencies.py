# app/auth/admin_dependencies.py
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.admin_jwt_handler import AdminTokenHandler
from app.core.database import get_db
from app.core.exceptions import AuthError, AuthorizationError, ExpiredToken, InvalidToken
from app.models.admin import Administrator
from app.services.admin_service import AdminService

logger = logging.getLogger("api.auth")

bearer_scheme = HTTPBearer(auto_error=False, description="Admin session token")


def get_token_handler(request: Request) -> AdminTokenHandler:
    return request.app.state.token_handler


def get_admin_service(request: Request, db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db, request.app.state.password_context)


def get_current_admin_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_handler: AdminTokenHandler = Depends(get_token_handler),
    admin_service: AdminService = Depends(get_admin_service),
) -> Administrator:
    if credentials is None or not credentials.credentials:
        raise AuthError("Access denied. No token provided.")

    try:
        token_data = token_handler.verify_token(credentials.credentials)
    except ExpiredToken:
        raise ExpiredToken("Access denied. Token expired.")
    except InvalidToken:
        logger.info("Invalid admin token from %s", request.client.host if request.client else "unknown")
        raise InvalidToken("Access denied. Invalid token.")

    # O token não é revogável: o status do administrador é conferido a cada requisição
    admin = admin_service.get_admin_by_id(token_data.admin_id)
    if admin is None or not admin.is_active:
        raise AuthError("Access denied. Invalid token or inactive account.")

    request.state.admin_id = admin.id
    return admin


def get_current_super_admin_user(
    current_admin: Administrator = Depends(get_current_admin_user),
) -> Administrator:
    if not current_admin.is_super_admin:
        logger.warning("Admin '%s' tried a super admin operation", current_admin.username)
        raise AuthorizationError("Only super admins can create new admin accounts")
    return current_admin
