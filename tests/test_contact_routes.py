from datetime import timedelta

from sqlalchemy import select

from app.models.contact import Contact
from tests.conftest import RecordingMailer, contact_payload


def submit(client, **overrides):
    return client.post("/api/contact", json=contact_payload(**overrides))


def body_fields(response):
    return {error["field"] for error in response.json()["errors"]}


def backdate_contacts(app, minutes):
    with app.state.db.session() as session:
        for contact in session.execute(select(Contact)).scalars():
            contact.created_at -= timedelta(minutes=minutes)
        session.commit()


def test_submit_contact(app, client):
    response = submit(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Thank you for your message! We will get back to you soon."
    assert set(body["data"]) == {"id", "submittedAt"}

    with app.state.db.session() as session:
        contact = session.get(Contact, body["data"]["id"])
        assert contact.email == "maria@example.com"
        assert contact.status == "new"
        assert contact.priority == "medium"
        assert contact.source == "website"
        assert contact.ip_address == "testclient"
        assert contact.user_agent == "testclient"


def test_optional_fields_may_be_blank(app, client):
    response = submit(client, phone="", subject="  ", company="")

    assert response.status_code == 201
    with app.state.db.session() as session:
        contact = session.get(Contact, response.json()["data"]["id"])
        assert contact.phone is None
        assert contact.subject is None
        assert contact.company is None


def test_submit_sends_notification(client, mailer):
    submit(client)

    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message["To"] == "owner@example.com"
    assert message["Subject"] == "New Contact Form Submission - Workshop"
    assert "Maria Silva" in message.get_content()


def test_notification_failure_does_not_fail_submission(app, client, caplog):
    app.state.mailer = RecordingMailer(fail=True)

    with caplog.at_level("ERROR", logger="api.email"):
        response = submit(client)

    assert response.status_code == 201
    assert "Failed to send notification email" in caplog.text


def test_notification_skipped_without_mail_configuration(app, client):
    app.state.mailer = RecordingMailer(admin_email=None)

    response = submit(client)

    assert response.status_code == 201
    assert app.state.mailer.sent == []


def test_duplicate_submission_is_rejected(client, mailer):
    assert submit(client).status_code == 201

    response = submit(client, email="MARIA@example.com")

    assert response.status_code == 429
    assert response.json() == {
        "success": False,
        "message": "Duplicate submission detected. Please wait before submitting again.",
    }
    assert len(mailer.sent) == 1


def test_same_message_is_accepted_after_duplicate_window(app, client):
    assert submit(client).status_code == 201
    backdate_contacts(app, 6)

    assert submit(client).status_code == 201


def test_sixth_submission_from_same_ip_is_rejected(client):
    for i in range(5):
        response = submit(client, message=f"Question number {i} about your services.")
        assert response.status_code == 201

    response = submit(client, message="Question number 6 about your services.")

    assert response.status_code == 429
    assert response.json()["message"] == "Too many contact form submissions, please try again later."
    assert response.headers["Retry-After"] == "3600"


def test_ip_quota_resets_after_window(app, client):
    for i in range(5):
        assert submit(client, message=f"Question number {i} about your services.").status_code == 201
    backdate_contacts(app, 61)

    assert submit(client, message="A brand new question about your services.").status_code == 201


def test_submit_validation_errors(client):
    response = submit(client, name="R2D2", email="nope", message="short")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"name", "email", "message"}


def test_submit_rejects_invalid_phone(client):
    response = submit(client, phone="call me maybe")

    assert response.status_code == 400
    assert body_fields(response) == {"phone"}


def test_stats(app, client):
    submit(client)
    submit(client, email="other@example.com")
    backdate_contacts(app, 60 * 24 * 2)
    submit(client, email="third@example.com")

    response = client.get("/api/contact/stats")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"totalSubmissions": 3, "todaySubmissions": 1},
    }


def test_verify_contact(client):
    contact_id = submit(client).json()["data"]["id"]

    response = client.post("/api/contact/verify", json={"contactId": contact_id})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == contact_id
    assert data["status"] == "new"
    assert "submittedAt" in data


def test_verify_requires_contact_id(client):
    response = client.post("/api/contact/verify", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "Contact ID is required"


def test_verify_unknown_contact(client):
    response = client.post("/api/contact/verify", json={"contactId": "c2a1f7e0-1111-4d2c-9a7e-3b5d8f1e2a90"})

    assert response.status_code == 404
    assert response.json()["message"] == "Contact submission not found"
