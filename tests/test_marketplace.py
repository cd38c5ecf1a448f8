"""
Tests for the module marketplace.

Subscription flow:
1. A head admin registers a module with its menu items
2. A company admin subscribes; modules requiring approval start pending
3. Active subscriptions contribute navigation entries to the company menu
4. Unsubscribing cancels; subscribing again reactivates the same row
"""

from test_fixtures import client, auth_headers, make_user, make_tenant, add_member
from domain.enums import MembershipRole, PlatformRole


def _register(admin, module_id="haccp", **extra):
    payload = {
        "id": module_id,
        "name": "HACCP Logbook",
        "category": "compliance",
        "version": "1.0.0",
        "description": "Temperature and hygiene records",
        "menu_items": [
            {"label": "Logbook", "path": "/haccp", "display_order": 2},
            {"label": "Reports", "path": "/haccp/reports", "display_order": 5},
        ],
    }
    payload.update(extra)
    return client.post("/admin/modules", json=payload, headers=auth_headers(admin))


def _subscribe(company_id, user, module_id="haccp"):
    return client.post(
        f"/companies/{company_id}/modules/{module_id}/subscribe", headers=auth_headers(user)
    )


def test_register_and_browse_catalog():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    r = _register(admin)
    assert r.status_code == 201
    assert r.json()["module_id"] == "haccp"
    assert r.json()["is_active"] is True

    user = make_user()
    r = client.get("/marketplace/modules?q=compliance", headers=auth_headers(user))
    assert [m["module_id"] for m in r.json()] == ["haccp"]
    r = client.get("/marketplace/modules?q=payroll", headers=auth_headers(user))
    assert r.json() == []

    r = client.get("/marketplace/modules/haccp", headers=auth_headers(user))
    assert r.status_code == 200
    assert {i["label"] for i in r.json()["menu_items"]} == {"Logbook", "Reports"}

    assert client.get("/marketplace/modules/nope", headers=auth_headers(user)).status_code == 404


def test_register_requires_fields_and_unique_id():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    r = client.post("/admin/modules", json={"id": "x", "name": "X"}, headers=auth_headers(admin))
    assert r.status_code == 400
    assert sorted(r.json()["error"]["details"]["missing"]) == ["category", "version"]

    assert _register(admin).status_code == 201
    r = _register(admin)
    assert r.status_code == 409


def test_register_requires_head_admin():
    user = make_user()
    assert _register(user).status_code == 403


def test_subscribe_unsubscribe_and_reactivate():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin)
    owner, company_id = make_tenant()

    r = _subscribe(company_id, owner)
    assert r.status_code == 200
    first = r.json()
    assert first["status"] == "active"
    assert first["subscribed_by"] == owner

    # Subscribing twice keeps the same row
    assert _subscribe(company_id, owner).json()["company_module_id"] == first["company_module_id"]

    r = client.post(
        f"/companies/{company_id}/modules/haccp/unsubscribe", headers=auth_headers(owner)
    )
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"

    r = client.post(
        f"/companies/{company_id}/modules/haccp/unsubscribe", headers=auth_headers(owner)
    )
    assert r.status_code == 400

    r = _subscribe(company_id, owner)
    assert r.json()["status"] == "active"
    assert r.json()["company_module_id"] == first["company_module_id"]

    r = client.get(f"/companies/{company_id}/modules", headers=auth_headers(owner))
    assert [s["module_id"] for s in r.json()] == ["haccp"]


def test_unsubscribe_without_subscription_not_found():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin)
    owner, company_id = make_tenant()
    r = client.post(
        f"/companies/{company_id}/modules/haccp/unsubscribe", headers=auth_headers(owner)
    )
    assert r.status_code == 404


def test_approval_flow():
    """
    Verifies:
    - A module requiring approval starts pending
    - Pending subscriptions contribute no menu entries
    - A head admin can activate it
    """
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin, requires_approval=True)
    owner, company_id = make_tenant()

    assert _subscribe(company_id, owner).json()["status"] == "pending"
    r = client.get(f"/companies/{company_id}/modules/menu", headers=auth_headers(owner))
    assert r.json() == []

    r = client.post(
        f"/admin/modules/haccp/subscriptions/{company_id}/status",
        json={"status": "active"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["status"] == "active"

    r = client.get(f"/companies/{company_id}/modules/menu", headers=auth_headers(owner))
    assert [i["label"] for i in r.json()] == ["Logbook", "Reports"]


def test_member_cannot_subscribe():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin)
    owner, company_id = make_tenant()
    member = make_user()
    add_member(company_id, member, MembershipRole.MEMBER)

    assert _subscribe(company_id, member).status_code == 403


def test_menu_settings_hide_and_reorder():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin)
    owner, company_id = make_tenant()
    _subscribe(company_id, owner)

    items = client.get(f"/companies/{company_id}/modules/menu", headers=auth_headers(owner)).json()
    by_label = {i["label"]: i["menu_item_id"] for i in items}
    url = f"/companies/{company_id}/modules/menu-settings"

    r = client.put(
        url,
        json={"menu_item_id": by_label["Reports"], "is_visible": True, "display_order": 1},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["display_order"] == 1

    items = client.get(f"/companies/{company_id}/modules/menu", headers=auth_headers(owner)).json()
    assert [i["label"] for i in items] == ["Reports", "Logbook"]

    client.put(
        url,
        json={"menu_item_id": by_label["Logbook"], "is_visible": False},
        headers=auth_headers(owner),
    )
    items = client.get(f"/companies/{company_id}/modules/menu", headers=auth_headers(owner)).json()
    assert [i["label"] for i in items] == ["Reports"]


def test_module_settings_require_subscription():
    admin = make_user(role=PlatformRole.HEAD_ADMIN)
    _register(admin)
    owner, company_id = make_tenant()
    url = f"/companies/{company_id}/modules/haccp/settings"

    r = client.put(url, json={"key": "fridgeMax", "value": 4}, headers=auth_headers(owner))
    assert r.status_code == 400

    _subscribe(company_id, owner)
    r = client.put(url, json={"key": "fridgeMax", "value": 4}, headers=auth_headers(owner))
    assert r.status_code == 200
    r = client.put(
        url, json={"key": "fridgeMax", "value": {"celsius": 5}}, headers=auth_headers(owner)
    )
    assert r.status_code == 200

    r = client.get(url, headers=auth_headers(owner))
    assert r.json()[0]["key"] == "fridgeMax"
    assert r.json()[0]["value"] == {"celsius": 5}
    assert len(r.json()) == 1
