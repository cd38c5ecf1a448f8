"""
Tests for platform administration endpoints.
Every route under /admin requires the headAdmin platform role.
"""

import uuid

from test_fixtures import client, auth_headers, make_user, make_company, add_member
from domain.enums import MembershipRole, PlatformRole


def test_non_admin_forbidden():
    user = make_user()
    for path in ("/admin/dashboard", "/admin/companies", "/admin/users"):
        r = client.get(path, headers=auth_headers(user))
        assert r.status_code == 403, path

    assert client.get("/admin/dashboard").status_code == 401


def test_dashboard_counts():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    owner = make_user()
    make_user(role=PlatformRole.PENDING)
    company_id = make_company(owner)
    add_member(company_id, make_user(), MembershipRole.MEMBER)

    r = client.get("/admin/dashboard", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json() == {
        "users": 4,
        "pending_users": 1,
        "companies": 1,
        "memberships": 2,
        "active_subscriptions": 0,
    }


def test_companies_with_member_counts():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    owner = make_user()
    busy = make_company(owner, name="Busy Diner")
    make_company(owner, name="Quiet Cafe")
    add_member(busy, make_user())

    r = client.get("/admin/companies", headers=auth_headers(admin))
    counts = {c["name"]: c["member_count"] for c in r.json()}
    assert counts == {"Busy Diner": 2, "Quiet Cafe": 1}


def test_list_users_and_change_role():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    pending = make_user(role=PlatformRole.PENDING)

    r = client.get("/admin/users?role=pending", headers=auth_headers(admin))
    assert [u["user_id"] for u in r.json()] == [pending]

    r = client.patch(
        f"/admin/users/{pending}/role", json={"role": "tester"}, headers=auth_headers(admin)
    )
    assert r.status_code == 200
    assert r.json()["role"] == "tester"

    r = client.patch(
        "/admin/users/user_missing/role", json={"role": "user"}, headers=auth_headers(admin)
    )
    assert r.status_code == 404

    r = client.patch(
        f"/admin/users/{pending}/role", json={"role": "superuser"}, headers=auth_headers(admin)
    )
    assert r.status_code == 422


def test_company_members_for_any_company():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    owner = make_user()
    cook = make_user()
    company_id = make_company(owner, name="Busy Diner")
    add_member(company_id, cook, MembershipRole.MEMBER)

    r = client.get(f"/admin/companies/{company_id}/members", headers=auth_headers(admin))
    assert r.status_code == 200
    roles = {m["user_id"]: m["role"] for m in r.json()}
    assert roles == {owner: "owner", cook: "member"}

    r = client.get(f"/admin/companies/{company_id}/members", headers=auth_headers(owner))
    assert r.status_code == 403

    r = client.get(f"/admin/companies/{uuid.uuid4()}/members", headers=auth_headers(admin))
    assert r.status_code == 404
