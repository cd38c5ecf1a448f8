"""
Tests for companies, memberships, role checks and feature flags.

Company Flow
============

1. POST /companies                      -> 201 {company}; caller becomes owner
2. GET /companies/{id}                  -> company, features, caller's role
3. PATCH /companies/{id}                -> owner/admin only
4. GET /companies/{id}/members          -> members by join time
5. PATCH/DELETE /companies/{id}/members/{user_id}
6. DELETE /companies/{id}               -> owner only, removes everything scoped
"""

import uuid

from test_fixtures import (
    client,
    auth_headers,
    make_user,
    make_company,
    add_member,
    set_feature,
    make_ingredient,
    make_container,
)
from domain.enums import MembershipRole, PlatformRole
from domain.models import (
    Company,
    CompanyFeature,
    CompanyMembership,
    Menu,
    MenuContainerIngredient,
)
from services.feature_service import FeatureService


# =============================================================================
# CREATION
# =============================================================================


def test_create_company_makes_owner_and_default_features(db_session):
    owner = make_user()
    r = client.post(
        "/companies",
        json={"name": "  Harbor Catering  ", "description": "Office lunches"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 201
    company = r.json()["company"]
    assert company["name"] == "Harbor Catering"
    assert company["created_by"] == owner

    company_id = uuid.UUID(company["company_id"])
    membership = (
        db_session.query(CompanyMembership)
        .filter_by(company_id=company_id, user_id=owner)
        .one()
    )
    assert membership.role == MembershipRole.OWNER

    features = {
        f.feature_name
        for f in db_session.query(CompanyFeature).filter_by(company_id=company_id)
    }
    assert {"ingredients", "menus", "settings", "mealPlanning"} <= features


def test_pending_user_cannot_create_company():
    user_id = make_user(role=PlatformRole.PENDING)
    r = client.post("/companies", json={"name": "Nope Foods"}, headers=auth_headers(user_id))
    assert r.status_code == 403


def test_head_admin_can_create_company():
    user_id = make_user(role=PlatformRole.HEAD_ADMIN)
    r = client.post("/companies", json={"name": "HQ Kitchen"}, headers=auth_headers(user_id))
    assert r.status_code == 201


def test_blank_company_name_rejected():
    user_id = make_user()
    r = client.post("/companies", json={"name": "   "}, headers=auth_headers(user_id))
    assert r.status_code == 400
    r = client.post("/companies", json={}, headers=auth_headers(user_id))
    assert r.status_code == 400


# =============================================================================
# READ / UPDATE / DELETE
# =============================================================================


def test_get_company_returns_role_and_backfills_features(db_session):
    """
    Verifies:
    - Members get the company, its features and their own role
    - Required features missing at creation are enabled in the background
    """
    owner = make_user()
    company_id = make_company(owner)

    r = client.get(f"/companies/{company_id}", headers=auth_headers(owner))
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "owner"
    assert body["company"]["company_id"] == company_id

    assert FeatureService.is_feature_enabled(db_session, uuid.UUID(company_id), "inventory")


def test_non_member_gets_403_and_missing_company_404():
    owner = make_user()
    outsider = make_user()
    company_id = make_company(owner)

    assert client.get(f"/companies/{company_id}", headers=auth_headers(outsider)).status_code == 403
    missing = uuid.uuid4()
    assert client.get(f"/companies/{missing}", headers=auth_headers(owner)).status_code == 404


def test_update_company_requires_admin_and_valid_name():
    owner = make_user()
    admin = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, admin, MembershipRole.ADMIN)
    add_member(company_id, member, MembershipRole.MEMBER)

    r = client.patch(
        f"/companies/{company_id}", json={"name": "Renamed"}, headers=auth_headers(member)
    )
    assert r.status_code == 403

    r = client.patch(f"/companies/{company_id}", json={"name": "X"}, headers=auth_headers(admin))
    assert r.status_code == 400

    r = client.patch(
        f"/companies/{company_id}", json={"name": "Renamed Kitchen"}, headers=auth_headers(admin)
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Renamed Kitchen"


def test_delete_company_owner_only(db_session):
    owner = make_user()
    admin = make_user()
    company_id = make_company(owner)
    add_member(company_id, admin, MembershipRole.ADMIN)

    r = client.delete(f"/companies/{company_id}", headers=auth_headers(admin))
    assert r.status_code == 403

    r = client.delete(f"/companies/{company_id}", headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "deleted": company_id}

    cid = uuid.UUID(company_id)
    assert db_session.get(Company, cid) is None
    assert db_session.query(CompanyMembership).filter_by(company_id=cid).count() == 0
    assert db_session.query(CompanyFeature).filter_by(company_id=cid).count() == 0


def test_delete_company_removes_menus_before_ingredients(db_session):
    owner = make_user()
    company_id = make_company(owner)
    rice = make_ingredient(company_id, owner)
    box = make_container(company_id, owner)
    r = client.post(
        f"/companies/{company_id}/menus",
        json={
            "name": "Rice Bowl",
            "containers": [
                {
                    "container_id": box["container_id"],
                    "ingredients": [{"ingredient_id": rice["ingredient_id"], "amount": 200}],
                }
            ],
        },
        headers=auth_headers(owner),
    )
    assert r.status_code == 201, r.text

    r = client.delete(f"/companies/{company_id}", headers=auth_headers(owner))
    assert r.status_code == 200

    cid = uuid.UUID(company_id)
    assert db_session.query(Menu).filter_by(company_id=cid).count() == 0
    lines = db_session.query(MenuContainerIngredient).filter_by(
        ingredient_id=uuid.UUID(rice["ingredient_id"])
    )
    assert lines.count() == 0


def test_search_flags_membership_and_pending_requests():
    owner = make_user()
    caller = make_user()
    mine = make_company(owner, "Sunrise Bakery")
    other = make_company(owner, "Sunset Bakery")
    add_member(mine, caller)
    r = client.post(
        f"/companies/{other}/join-requests", json={"message": "hi"}, headers=auth_headers(caller)
    )
    assert r.status_code == 201

    r = client.get("/companies/search?q=bakery", headers=auth_headers(caller))
    assert r.status_code == 200
    results = {c["name"]: c for c in r.json()}
    assert results["Sunrise Bakery"]["is_member"] is True
    assert results["Sunrise Bakery"]["has_pending_request"] is False
    assert results["Sunset Bakery"]["is_member"] is False
    assert results["Sunset Bakery"]["has_pending_request"] is True


# =============================================================================
# MEMBERS
# =============================================================================


def test_list_members_includes_user_info():
    owner = make_user(first_name="Olga", last_name="Owner")
    member = make_user(first_name="Mick", last_name="Member")
    company_id = make_company(owner)
    add_member(company_id, member)

    r = client.get(f"/companies/{company_id}/members", headers=auth_headers(member))
    assert r.status_code == 200
    by_user = {m["user_id"]: m for m in r.json()}
    assert by_user[owner]["role"] == "owner"
    assert by_user[member]["display_name"] == "Mick Member"


def test_owner_changes_member_role_but_not_own():
    owner = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, member)

    r = client.patch(
        f"/companies/{company_id}/members/{member}",
        json={"role": "admin"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

    r = client.patch(
        f"/companies/{company_id}/members/{owner}",
        json={"role": "member"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 403


def test_admin_cannot_change_roles():
    owner = make_user()
    admin = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, admin, MembershipRole.ADMIN)
    add_member(company_id, member)

    r = client.patch(
        f"/companies/{company_id}/members/{member}",
        json={"role": "admin"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 403


def test_member_leaves_with_redirect():
    owner = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, member)

    r = client.delete(f"/companies/{company_id}/members/{member}", headers=auth_headers(member))
    assert r.status_code == 200
    assert r.json() == {"success": True, "redirect": "/"}

    r = client.get(f"/companies/{company_id}", headers=auth_headers(member))
    assert r.status_code == 403


def test_owner_cannot_leave():
    owner = make_user()
    company_id = make_company(owner)
    r = client.delete(f"/companies/{company_id}/members/{owner}", headers=auth_headers(owner))
    assert r.status_code == 400


def test_removing_others_requires_owner():
    owner = make_user()
    admin = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, admin, MembershipRole.ADMIN)
    add_member(company_id, member)

    r = client.delete(f"/companies/{company_id}/members/{member}", headers=auth_headers(admin))
    assert r.status_code == 403

    r = client.delete(f"/companies/{company_id}/members/{owner}", headers=auth_headers(admin))
    assert r.status_code == 403

    r = client.delete(f"/companies/{company_id}/members/{member}", headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["redirect"] is None

    r = client.delete(
        f"/companies/{company_id}/members/user_missing", headers=auth_headers(owner)
    )
    assert r.status_code == 404


# =============================================================================
# FEATURE FLAGS
# =============================================================================


def test_feature_upsert_and_listing():
    owner = make_user()
    member = make_user()
    company_id = make_company(owner)
    add_member(company_id, member)

    r = client.get(f"/companies/{company_id}/features", headers=auth_headers(member))
    assert r.status_code == 403

    body = set_feature(company_id, owner, "menus", enabled=False)
    assert body["feature_name"] == "menus"
    assert body["is_enabled"] is False

    r = client.get(f"/companies/{company_id}/features", headers=auth_headers(owner))
    features = {f["feature_name"]: f["is_enabled"] for f in r.json()}
    assert features["menus"] is False
    assert list(features).count("menus") == 1


def test_disabled_feature_blocks_routes():
    owner = make_user()
    company_id = make_company(owner)
    set_feature(company_id, owner, "ingredients", enabled=False)

    r = client.get(f"/companies/{company_id}/ingredients", headers=auth_headers(owner))
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FEATURE_DISABLED"


def test_feature_config_lookup(db_session):
    owner = make_user()
    company_id = make_company(owner)
    r = client.post(
        f"/companies/{company_id}/features",
        json={"featureName": "inventory", "isEnabled": True, "config": {"unit": "kg"}},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200

    cid = uuid.UUID(company_id)
    assert FeatureService.get_feature_config(db_session, cid, "inventory", "unit") == "kg"
    assert FeatureService.get_feature_config(db_session, cid, "inventory", "other", 5) == 5
    assert FeatureService.is_feature_enabled(db_session, cid, "unknownFeature") is False
