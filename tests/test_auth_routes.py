import threading
from datetime import timedelta

from app.main import create_app
from app.services.admin_service import AdminService
from tests.conftest import auth_header, login, make_settings


def test_login_with_username(client, super_admin):
    response = login(client, "superadmin", "admin123456")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["admin"]["id"] == super_admin["id"]
    assert body["admin"]["fullName"] == "Site Owner"
    assert body["admin"]["role"] == "super_admin"
    assert body["admin"]["lastLogin"] is not None
    assert "passwordHash" not in body["admin"]


def test_login_with_email(client, super_admin):
    response = login(client, "OWNER@example.com", "admin123456")

    assert response.status_code == 200


def test_login_failures_are_indistinguishable(client, super_admin):
    wrong_password = login(client, "superadmin", "not-the-password")
    unknown_user = login(client, "ghost", "admin123456")

    for response in (wrong_password, unknown_user):
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"username": "superadmin"})

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_me_returns_profile(client, super_admin_headers, super_admin):
    response = client.get("/api/auth/me", headers=super_admin_headers)

    assert response.status_code == 200
    admin = response.json()["admin"]
    assert admin["username"] == "superadmin"
    assert admin["email"] == "owner@example.com"
    assert "createdAt" in admin


def test_me_without_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_me_with_invalid_token(client):
    response = client.get("/api/auth/me", headers=auth_header("not.a.token"))

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Invalid token."


def test_me_with_expired_token(app, client, super_admin):
    token = app.state.token_handler.create_access_token(
        super_admin["id"], "superadmin", "super_admin", expires_delta=timedelta(minutes=-1)
    )

    response = client.get("/api/auth/me", headers=auth_header(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Token expired."


def test_deactivated_admin_token_is_rejected(app, client, regular_admin, admin_headers):
    with app.state.db.session() as session:
        AdminService(session).deactivate_admin(regular_admin["id"])

    response = client.get("/api/auth/me", headers=admin_headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Invalid token or inactive account."


def test_token_for_unknown_admin_is_rejected(app, client):
    token = app.state.token_handler.create_access_token(
        "0f8fad5b-d9cb-469f-a165-70867728950e", "ghost", "super_admin"
    )

    response = client.get("/api/auth/me", headers=auth_header(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Invalid token or inactive account."


def test_super_admin_registers_admin(client, super_admin_headers):
    response = client.post(
        "/api/auth/register",
        headers=super_admin_headers,
        json={
            "username": "editor_1",
            "email": "Editor@Example.com",
            "password": "editor-pass",
            "fullName": "Content Editor",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Admin created successfully"
    assert body["admin"]["email"] == "editor@example.com"
    assert body["admin"]["role"] == "admin"

    assert login(client, "editor_1", "editor-pass").status_code == 200


def test_regular_admin_cannot_register(client, admin_headers):
    response = client.post(
        "/api/auth/register",
        headers=admin_headers,
        json={"username": "intruder", "email": "intruder@example.com", "password": "intruder"},
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Only super admins can create new admin accounts"


def test_register_duplicate_username(client, super_admin_headers, regular_admin):
    response = client.post(
        "/api/auth/register",
        headers=super_admin_headers,
        json={"username": "helpdesk", "email": "new@example.com", "password": "secret-pass"},
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Admin with this username or email already exists"


def test_register_validation(client, super_admin_headers):
    response = client.post(
        "/api/auth/register",
        headers=super_admin_headers,
        json={"username": "no spaces!", "email": "not-an-email", "password": "123"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"username", "email", "password"}


def test_change_password(client, admin_headers):
    response = client.put(
        "/api/auth/change-password",
        headers=admin_headers,
        json={"currentPassword": "helpdesk-pass", "newPassword": "fresh-pass"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Password changed successfully"}
    assert login(client, "helpdesk", "helpdesk-pass").status_code == 401
    assert login(client, "helpdesk", "fresh-pass").status_code == 200


def test_change_password_with_wrong_current_password(client, admin_headers):
    response = client.put(
        "/api/auth/change-password",
        headers=admin_headers,
        json={"currentPassword": "guess", "newPassword": "fresh-pass"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"


def test_logout_keeps_token_valid(client, admin_headers):
    response = client.post("/api/auth/logout", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logout successful"}
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 200


def test_app_hashes_with_its_configured_cost(app, client, super_admin_headers):
    client.post(
        "/api/auth/register",
        headers=super_admin_headers,
        json={"username": "editor_2", "email": "editor2@example.com", "password": "editor-pass"},
    )

    with app.state.db.session() as session:
        admin = AdminService(session).find_by_identifier("editor_2")
        assert admin.password_hash.startswith("$2b$04$")

    other = create_app(make_settings(BCRYPT_ROUNDS=5))
    assert other.state.password_context.hash("x").startswith("$2b$05$")


def test_login_does_not_block_other_requests(client, super_admin, monkeypatch):
    checking = threading.Event()
    release = threading.Event()
    released_in_time = []
    original_verify = AdminService.verify_password

    def slow_verify(self, admin, candidate):
        checking.set()
        released_in_time.append(release.wait(timeout=5))
        return original_verify(self, admin, candidate)

    monkeypatch.setattr(AdminService, "verify_password", slow_verify)

    results = {}
    worker = threading.Thread(target=lambda: results.update(login=login(client, "superadmin", "admin123456")))
    worker.start()
    assert checking.wait(timeout=5)

    # A verificação de senha ainda está em andamento
    health = client.get("/health")
    release.set()
    worker.join(timeout=10)

    assert health.status_code == 200
    assert released_in_time == [True]
    assert results["login"].status_code == 200
