# app/services/__init__.py
# Providers dos serviços: os handles (banco, mailer) vêm de app.state,
# criados no lifespan da aplicação.
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from .admin_service import AdminService
from .contact_service import ContactService
from .email_service import Mailer
from .submission_guard import SubmissionGuard


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)


def get_submission_guard(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SubmissionGuard:
    return SubmissionGuard.from_settings(db, settings)


__all__ = [
    "AdminService",
    "ContactService",
    "Mailer",
    "SubmissionGuard",
    "get_settings",
    "get_mailer",
    "get_contact_service",
    "get_submission_guard",
]
