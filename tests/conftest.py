"""Configuração do pytest."""
import os

# Antes de importar a aplicação: segredo fixo
os.environ.setdefault("JWT_SECRET", "test-secret")

import smtplib
from typing import Iterator, List

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.admin_service import AdminService
from app.services.email_service import Mailer
from app.schemas.admin_schemas import AdminCreateSchema

SUPER_ADMIN = {
    "username": "superadmin",
    "email": "owner@example.com",
    "password": "admin123456",
    "full_name": "Site Owner",
}

REGULAR_ADMIN = {
    "username": "helpdesk",
    "email": "helpdesk@example.com",
    "password": "helpdesk-pass",
    "full_name": "Help Desk",
}


class RecordingMailer(Mailer):
    """Mailer que guarda as mensagens em vez de abrir conexão SMTP."""

    def __init__(self, fail: bool = False, **kwargs):
        kwargs.setdefault("host", "smtp.test")
        kwargs.setdefault("username", "noreply@example.com")
        kwargs.setdefault("admin_email", "owner@example.com")
        super().__init__(**kwargs)
        self.fail = fail
        self.sent: List = []

    def send(self, message) -> None:
        if self.fail:
            raise smtplib.SMTPException("SMTP server unavailable")
        self.sent.append(message)


def make_settings(**overrides) -> Settings:
    values = dict(
        ENVIRONMENT="testing",
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        SMTP_USER=None,
        SMTP_PASSWORD=None,
        ADMIN_EMAIL=None,
        LOG_LEVEL="WARNING",
        RATE_LIMIT_DEFAULT="100/15 minutes",
        RATE_LIMIT_STORAGE_URI="memory://",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app, mailer) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        # O lifespan cria o mailer real; os testes usam o de gravação
        app.state.mailer = mailer
        yield test_client


def _create_admin(app, data, role):
    with app.state.db.session() as session:
        service = AdminService(session, app.state.password_context)
        admin = service.create_admin(AdminCreateSchema(role=role, **data))
        return admin.id


@pytest.fixture
def super_admin(app, client):
    admin_id = _create_admin(app, SUPER_ADMIN, "super_admin")
    return {**SUPER_ADMIN, "id": admin_id, "role": "super_admin"}


@pytest.fixture
def regular_admin(app, client):
    admin_id = _create_admin(app, REGULAR_ADMIN, "admin")
    return {**REGULAR_ADMIN, "id": admin_id, "role": "admin"}


def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin_headers(client, super_admin):
    response = login(client, super_admin["username"], super_admin["password"])
    assert response.status_code == 200
    return auth_header(response.json()["token"])


@pytest.fixture
def admin_headers(client, regular_admin):
    response = login(client, regular_admin["username"], regular_admin["password"])
    assert response.status_code == 200
    return auth_header(response.json()["token"])


def contact_payload(**overrides):
    payload = {
        "name": "Maria Silva",
        "email": "Maria@Example.com",
        "phone": "+55 11 91234-5678",
        "subject": "Workshop",
        "message": "I would like to know more about your workshops.",
        "company": "Acme",
    }
    payload.update(overrides)
    return payload
