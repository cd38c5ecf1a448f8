"""
Tests for the identity provider webhook.

Payloads are signed with svix using the secret configured in conftest.py.
"""

from test_fixtures import client, signed_webhook, make_user, make_company, add_member
from domain.enums import MembershipRole, PlatformRole
from domain.models import AppUser, CompanyMembership


def _user_payload(event_type: str, user_id: str = "user_hook", **data) -> dict:
    base = {
        "id": user_id,
        "email_addresses": [
            {"id": "idn_1", "email_address": "old@example.com"},
            {"id": "idn_2", "email_address": "primary@example.com"},
        ],
        "primary_email_address_id": "idn_2",
        "first_name": "Lena",
        "last_name": "Berg",
        "image_url": "https://img.example.com/lena.png",
    }
    base.update(data)
    return {"type": event_type, "data": base}


def test_user_created_mirrors_user_as_pending(db_session):
    body, headers = signed_webhook(_user_payload("user.created"))
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"success": True}

    user = db_session.get(AppUser, "user_hook")
    assert user.email == "primary@example.com"
    assert user.first_name == "Lena"
    assert user.role == PlatformRole.PENDING


def test_user_created_takes_role_from_metadata(db_session):
    payload = _user_payload("user.created", public_metadata={"role": "user"})
    body, headers = signed_webhook(payload)
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 200
    assert db_session.get(AppUser, "user_hook").role == PlatformRole.USER


def test_user_updated_keeps_role_without_metadata(db_session):
    make_user(user_id="user_hook", role=PlatformRole.HEAD_ADMIN)
    body, headers = signed_webhook(_user_payload("user.updated", first_name="Lenka"))
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 200

    user = db_session.get(AppUser, "user_hook")
    assert user.first_name == "Lenka"
    assert user.role == PlatformRole.HEAD_ADMIN


def test_user_deleted_removes_memberships(db_session):
    owner = make_user()
    company_id = make_company(owner)
    make_user(user_id="user_hook")
    add_member(company_id, "user_hook", MembershipRole.MEMBER)

    body, headers = signed_webhook({"type": "user.deleted", "data": {"id": "user_hook"}})
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 200

    assert db_session.get(AppUser, "user_hook") is None
    remaining = (
        db_session.query(CompanyMembership)
        .filter(CompanyMembership.user_id == "user_hook")
        .count()
    )
    assert remaining == 0


def test_unknown_event_is_acknowledged():
    body, headers = signed_webhook({"type": "session.created", "data": {"id": "sess_1"}})
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 200


def test_missing_signature_headers_rejected():
    r = client.post("/webhooks/identity", json=_user_payload("user.created"))
    assert r.status_code == 400
    assert "svix-id" in r.json()["error"]["details"]["missing"]


def test_bad_signature_rejected():
    body, headers = signed_webhook(_user_payload("user.created"))
    headers["svix-signature"] = "v1,aW52YWxpZHNpZ25hdHVyZQ=="
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 400


def test_tampered_body_rejected():
    body, headers = signed_webhook(_user_payload("user.created"))
    tampered = body.replace("Lena", "Mallory")
    r = client.post("/webhooks/identity", content=tampered, headers=headers)
    assert r.status_code == 400


def test_unconfigured_secret_rejected(monkeypatch):
    from app.config import settings

    body, headers = signed_webhook(_user_payload("user.created"))
    monkeypatch.setattr(settings, "webhook_secret", None)
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 400


def test_signed_payload_must_be_an_object():
    body, headers = signed_webhook(["user.created"])
    r = client.post("/webhooks/identity", content=body, headers=headers)
    assert r.status_code == 400
