"""
Shared test fixtures and utilities for the FoodOps test suite.

The app runs against the in-memory SQLite database configured in conftest.py.
Builders here write rows directly (users, memberships) or go through the API
(companies, features) so that tests read as the flows a client performs.
"""

import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session
from svix.webhooks import Webhook

from main import app
from api.dependencies import get_db
from app.config import settings
from domain.enums import MembershipRole, PlatformRole
from domain.models import AppUser, CompanyMembership, SessionLocal


def override_get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

client = TestClient(app)



# =============================================================================
# AUTH HELPERS
# =============================================================================


def make_token(user_id: str, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
    """HS256 session token for ``user_id`` signed with the test secret"""
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + expires_in,
        **claims,
    }
    return jwt.encode(payload, settings.auth_jwt_secret, algorithm="HS256")


def auth_headers(user_id: str, **claims) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}


def signed_webhook(payload: dict, msg_id: Optional[str] = None) -> tuple:
    """Body and svix headers for an identity webhook signed with the test secret"""
    body = json.dumps(payload)
    msg_id = msg_id or f"msg_{uuid.uuid4().hex}"
    now = datetime.now(timezone.utc)
    signature = Webhook(settings.webhook_secret).sign(msg_id, now, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(int(now.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }
    return body, headers


# =============================================================================
# DATA BUILDERS
# =============================================================================


def make_user(
    user_id: Optional[str] = None,
    role: PlatformRole = PlatformRole.USER,
    email: Optional[str] = None,
    first_name: Optional[str] = "Sarah",
    last_name: Optional[str] = "Martinez",
) -> str:
    """Insert a user mirror and return its id"""
    user_id = user_id or f"user_{uuid.uuid4().hex[:12]}"
    with SessionLocal() as db:
        db.add(
            AppUser(
                user_id=user_id,
                email=email or f"{user_id}@example.com",
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
        )
        db.commit()
    return user_id


def add_member(company_id: str, user_id: str, role: MembershipRole = MembershipRole.MEMBER):
    with SessionLocal() as db:
        db.add(
            CompanyMembership(
                company_id=uuid.UUID(str(company_id)), user_id=user_id, role=role
            )
        )
        db.commit()


def make_company(owner_id: str, name: str = "Green Bowl Kitchen") -> str:
    """Create a company through the API and return its id"""
    r = client.post("/companies", json={"name": name}, headers=auth_headers(owner_id))
    assert r.status_code == 201, r.text
    return r.json()["company"]["company_id"]


def set_feature(company_id: str, owner_id: str, name: str, enabled: bool = True):
    r = client.post(
        f"/companies/{company_id}/features",
        json={"featureName": name, "isEnabled": enabled},
        headers=auth_headers(owner_id),
    )
    assert r.status_code == 200, r.text
    return r.json()


def make_tenant(*features: str) -> tuple:
    """Owner plus company with the given extra features enabled"""
    owner = make_user()
    company_id = make_company(owner)
    for name in features:
        set_feature(company_id, owner, name)
    return owner, company_id


def make_ingredient(company_id: str, user_id: str, **overrides) -> dict:
    payload = {
        "name": "Basmati Rice",
        "code_name": f"RICE-{uuid.uuid4().hex[:6]}",
        "package_amount": 1000,
        "unit": "g",
        "price": 4000,
    }
    payload.update(overrides)
    r = client.post(
        f"/companies/{company_id}/ingredients", json=payload, headers=auth_headers(user_id)
    )
    assert r.status_code == 201, r.text
    return r.json()


def make_container(company_id: str, user_id: str, **overrides) -> dict:
    payload = {
        "name": "Lunch Box",
        "code_name": f"BOX-{uuid.uuid4().hex[:6]}",
        "price": 500,
    }
    payload.update(overrides)
    r = client.post(
        f"/companies/{company_id}/containers", json=payload, headers=auth_headers(user_id)
    )
    assert r.status_code == 201, r.text
    return r.json()


def make_warehouse(company_id: str, user_id: str, name: str = "Main Store", **overrides) -> dict:
    payload = {"name": name, **overrides}
    r = client.post(
        f"/companies/{company_id}/warehouses", json=payload, headers=auth_headers(user_id)
    )
    assert r.status_code == 201, r.text
    return r.json()
