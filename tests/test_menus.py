"""
Tests for containers, menus and meal plans.

Menu cost flow:
1. Each ingredient line costs amount * price / package_amount
2. The menu cost price is the sum over all containers, rounded half up
3. The cost price is stored on the menu and added to its price history
   whenever it changes
"""

import uuid
from decimal import Decimal

from test_fixtures import (
    client,
    auth_headers,
    make_tenant,
    make_ingredient,
    make_container,
)
from domain.mappers.menu_mapper import line_cost, menu_cost, round_cost


def _menu_payload(container_id, lines, name="Rice Bowl", **extra):
    return {
        "name": name,
        "containers": [
            {
                "container_id": container_id,
                "ingredients": [
                    {"ingredient_id": ingredient_id, "amount": amount}
                    for ingredient_id, amount in lines
                ],
            }
        ],
        **extra,
    }


def _create_menu(company_id, owner, payload):
    r = client.post(f"/companies/{company_id}/menus", json=payload, headers=auth_headers(owner))
    assert r.status_code == 201, r.text
    return r.json()


# =============================================================================
# COST CALCULATION
# =============================================================================


def test_round_cost_half_up():
    assert round_cost(Decimal("0.5")) == Decimal("1")
    assert round_cost(Decimal("2.5")) == Decimal("3")
    assert round_cost(Decimal("2.49")) == Decimal("2")


def test_menu_cost_sums_before_rounding():
    # 0.4 + 0.4 = 0.8 rounds to 1, rounding each line first would give 0
    lines = [(Decimal("1"), Decimal("4"), Decimal("10"))] * 2
    assert menu_cost(lines) == Decimal("1")


def test_line_cost_guards_zero_package():
    assert line_cost(5, 100, 0) == Decimal("0")
    assert line_cost(250, 4000, 1000) == Decimal("1000")


# =============================================================================
# CONTAINERS
# =============================================================================


def test_container_crud():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner, name="Bento", code_name="BENTO", price=700)
    assert box["price"] == 700

    url = f"/companies/{company_id}/containers/{box['container_id']}"
    r = client.put(
        url,
        json={"name": "Bento Large", "code_name": "BENTO", "price": 900},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Bento Large"

    r = client.get(f"/companies/{company_id}/containers", headers=auth_headers(owner))
    assert [c["name"] for c in r.json()] == ["Bento Large"]

    r = client.delete(url, headers=auth_headers(owner))
    assert r.status_code == 200
    assert client.get(url, headers=auth_headers(owner)).status_code == 404


def test_container_code_conflict_and_check():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner, code_name="CUP")

    r = client.post(
        f"/companies/{company_id}/containers",
        json={"name": "Other Cup", "code_name": "CUP"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "DUPLICATE_CODE_NAME"

    base = f"/companies/{company_id}/containers/check-code"
    assert client.get(f"{base}?code=CUP", headers=auth_headers(owner)).json() == {
        "available": False
    }
    assert client.get(
        f"{base}?code=CUP&exclude_id={box['container_id']}", headers=auth_headers(owner)
    ).json() == {"available": True}


def test_container_parent_rules():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    parent = make_container(company_id, owner, name="Tray")
    child = make_container(
        company_id, owner, name="Cup", parent_container_id=parent["container_id"]
    )
    assert child["parent_container_id"] == parent["container_id"]

    r = client.put(
        f"/companies/{company_id}/containers/{parent['container_id']}",
        json={"name": "Tray", "parent_container_id": parent["container_id"]},
        headers=auth_headers(owner),
    )
    assert r.status_code == 400

    foreign = make_container(other_company, other_owner)
    r = client.post(
        f"/companies/{company_id}/containers",
        json={"name": "Lid", "parent_container_id": foreign["container_id"]},
        headers=auth_headers(owner),
    )
    assert r.status_code == 400

    # Deleting the parent detaches its children
    r = client.delete(
        f"/companies/{company_id}/containers/{parent['container_id']}",
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    r = client.get(
        f"/companies/{company_id}/containers/{child['container_id']}",
        headers=auth_headers(owner),
    )
    assert r.json()["parent_container_id"] is None


def test_container_in_use_cannot_be_deleted():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    rice = make_ingredient(company_id, owner)
    _create_menu(company_id, owner, _menu_payload(box["container_id"], [(rice["ingredient_id"], 100)]))

    r = client.delete(
        f"/companies/{company_id}/containers/{box['container_id']}",
        headers=auth_headers(owner),
    )
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONTAINER_IN_USE"


def _category(company_id, owner, name, code):
    r = client.post(
        f"/companies/{company_id}/containers/categories",
        json={"name": name, "code": code},
        headers=auth_headers(owner),
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_container_categories_crud():
    owner, company_id = make_tenant()
    url = f"/companies/{company_id}/containers/categories"
    disposable = _category(company_id, owner, "Disposable", "DSP")
    reusable = _category(company_id, owner, "Reusable", "RUS")

    r = client.get(url, headers=auth_headers(owner))
    assert [c["name"] for c in r.json()] == ["Disposable", "Reusable"]

    r = client.post(url, json={"name": "Paper", "code": "DSP"}, headers=auth_headers(owner))
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "DUPLICATE_CODE"

    r = client.put(
        f"{url}/{reusable['category_id']}",
        json={"name": "Returnable", "code": "RUS"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Returnable"

    r = client.put(
        f"{url}/{reusable['category_id']}",
        json={"name": "Returnable", "code": "DSP"},
        headers=auth_headers(owner),
    )
    assert r.status_code == 409

    r = client.delete(f"{url}/{disposable['category_id']}", headers=auth_headers(owner))
    assert r.status_code == 200
    r = client.delete(f"{url}/{disposable['category_id']}", headers=auth_headers(owner))
    assert r.status_code == 404


def test_container_category_assignment():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    category = _category(company_id, owner, "Disposable", "DSP")
    foreign = _category(other_company, other_owner, "Glass", "GLS")

    box = make_container(company_id, owner, category_id=category["category_id"])
    assert box["category_id"] == category["category_id"]

    r = client.post(
        f"/companies/{company_id}/containers",
        json={"name": "Jar", "category_id": foreign["category_id"]},
        headers=auth_headers(owner),
    )
    assert r.status_code == 400

    r = client.delete(
        f"/companies/{company_id}/containers/categories/{category['category_id']}",
        headers=auth_headers(owner),
    )
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CATEGORY_IN_USE"


# =============================================================================
# MENUS
# =============================================================================


def test_create_menu_with_cost_breakdown():
    """
    Verifies:
    - 200 g of rice at 4000 per 1000 g costs 800
    - The container total adds the container price
    - The cost price is recorded in the price history
    """
    owner, company_id = make_tenant()
    box = make_container(company_id, owner, price=500)
    rice = make_ingredient(company_id, owner)

    menu = _create_menu(
        company_id,
        owner,
        _menu_payload(box["container_id"], [(rice["ingredient_id"], 200)], code="M-001"),
    )
    assert menu["cost_price"] == 800
    assert menu["code"] == "M-001"
    container = menu["containers"][0]
    assert container["ingredients_cost"] == 800
    assert container["total_cost"] == 1300
    assert container["ingredients"][0]["cost"] == 800
    assert container["ingredients"][0]["name"] == "Basmati Rice"

    r = client.get(
        f"/companies/{company_id}/menus/{menu['menu_id']}/price-history",
        headers=auth_headers(owner),
    )
    assert [h["cost_price"] for h in r.json()] == [800]


def test_menu_cost_rounds_half_up():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    salt = make_ingredient(company_id, owner, name="Salt", price=5, package_amount=10)

    menu = _create_menu(
        company_id, owner, _menu_payload(box["container_id"], [(salt["ingredient_id"], 1)])
    )
    assert menu["cost_price"] == 1


def test_menu_requires_container():
    owner, company_id = make_tenant()
    r = client.post(
        f"/companies/{company_id}/menus",
        json={"name": "Empty", "containers": []},
        headers=auth_headers(owner),
    )
    assert r.status_code == 400


def test_menu_rejects_foreign_ingredient_and_duplicate_code():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    box = make_container(company_id, owner)
    foreign = make_ingredient(other_company, other_owner)

    r = client.post(
        f"/companies/{company_id}/menus",
        json=_menu_payload(box["container_id"], [(foreign["ingredient_id"], 10)]),
        headers=auth_headers(owner),
    )
    assert r.status_code == 400

    _create_menu(company_id, owner, _menu_payload(box["container_id"], [], code="DAY-1"))
    r = client.post(
        f"/companies/{company_id}/menus",
        json=_menu_payload(box["container_id"], [], name="Other", code="DAY-1"),
        headers=auth_headers(owner),
    )
    assert r.status_code == 400


def test_update_menu_records_changed_cost_only():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    rice = make_ingredient(company_id, owner)
    payload = _menu_payload(box["container_id"], [(rice["ingredient_id"], 200)])
    menu = _create_menu(company_id, owner, payload)
    url = f"/companies/{company_id}/menus/{menu['menu_id']}"

    r = client.put(url, json={**payload, "description": "Steamed"}, headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["description"] == "Steamed"

    r = client.put(
        url,
        json=_menu_payload(box["container_id"], [(rice["ingredient_id"], 300)]),
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["cost_price"] == 1200
    assert len(r.json()["containers"]) == 1

    r = client.get(f"{url}/price-history", headers=auth_headers(owner))
    assert sorted(h["cost_price"] for h in r.json()) == [800, 1200]


def test_menu_check_name_and_delete():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    menu = _create_menu(company_id, owner, _menu_payload(box["container_id"], [], name="Curry"))
    base = f"/companies/{company_id}/menus"

    assert client.get(f"{base}/check-name?name=Curry", headers=auth_headers(owner)).json() == {
        "available": False
    }
    assert client.get(
        f"{base}/check-name?name=Curry&exclude_id={menu['menu_id']}",
        headers=auth_headers(owner),
    ).json() == {"available": True}

    r = client.delete(f"{base}/{menu['menu_id']}", headers=auth_headers(owner))
    assert r.status_code == 200
    assert client.get(f"{base}/{menu['menu_id']}", headers=auth_headers(owner)).status_code == 404


def test_menus_disabled_feature_forbidden():
    owner, company_id = make_tenant()
    r = client.post(
        f"/companies/{company_id}/features",
        json={"featureName": "menus", "isEnabled": False},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200

    r = client.get(f"/companies/{company_id}/menus", headers=auth_headers(owner))
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FEATURE_DISABLED"


# =============================================================================
# MEAL PLANS
# =============================================================================


def _plan(company_id, owner, menu_ids, day="2026-03-02", meal_time="lunch", name="Weekday"):
    r = client.post(
        f"/companies/{company_id}/meal-plans",
        json={
            "name": name,
            "date": day,
            "meal_time": meal_time,
            "menus": [{"menu_id": m} for m in menu_ids],
        },
        headers=auth_headers(owner),
    )
    return r


def test_meal_plan_total_cost():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    rice = make_ingredient(company_id, owner)
    cheap = _create_menu(
        company_id, owner, _menu_payload(box["container_id"], [(rice["ingredient_id"], 100)], name="Small")
    )
    large = _create_menu(
        company_id, owner, _menu_payload(box["container_id"], [(rice["ingredient_id"], 500)], name="Large")
    )

    r = _plan(company_id, owner, [cheap["menu_id"], large["menu_id"]])
    assert r.status_code == 201, r.text
    plan = r.json()
    assert plan["total_cost"] == 2400
    assert {m["menu_name"] for m in plan["menus"]} == {"Small", "Large"}


def test_meal_plans_by_date_ordered_by_meal_time():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    menu = _create_menu(company_id, owner, _menu_payload(box["container_id"], []))

    for meal_time in ("dinner", "breakfast", "lunch"):
        assert _plan(company_id, owner, [menu["menu_id"]], meal_time=meal_time).status_code == 201
    assert _plan(company_id, owner, [menu["menu_id"]], day="2026-03-03").status_code == 201

    r = client.get(
        f"/companies/{company_id}/meal-plans/by-date?date=2026-03-02", headers=auth_headers(owner)
    )
    assert r.status_code == 200
    assert [p["meal_time"] for p in r.json()] == ["breakfast", "lunch", "dinner"]

    r = client.get(
        f"/companies/{company_id}/meal-plans?start_date=2026-03-03&end_date=2026-03-31",
        headers=auth_headers(owner),
    )
    assert [p["date"] for p in r.json()] == ["2026-03-03"]

    r = client.get(
        f"/companies/{company_id}/meal-plans?start_date=2026-03-31&end_date=2026-03-01",
        headers=auth_headers(owner),
    )
    assert r.status_code == 400


def test_meal_plan_update_and_delete():
    owner, company_id = make_tenant()
    box = make_container(company_id, owner)
    first = _create_menu(company_id, owner, _menu_payload(box["container_id"], [], name="First"))
    second = _create_menu(company_id, owner, _menu_payload(box["container_id"], [], name="Second"))
    plan = _plan(company_id, owner, [first["menu_id"]]).json()
    url = f"/companies/{company_id}/meal-plans/{plan['meal_plan_id']}"

    r = client.put(
        url,
        json={"meal_time": "dinner", "menus": [{"menu_id": second["menu_id"]}]},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200
    assert r.json()["meal_time"] == "dinner"
    assert [m["menu_name"] for m in r.json()["menus"]] == ["Second"]

    assert client.delete(url, headers=auth_headers(owner)).status_code == 200
    assert client.get(url, headers=auth_headers(owner)).status_code == 404


def test_meal_plan_rejects_foreign_menu():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    box = make_container(other_company, other_owner)
    foreign = _create_menu(other_company, other_owner, _menu_payload(box["container_id"], []))

    r = _plan(company_id, owner, [foreign["menu_id"]])
    assert r.status_code == 400

    r = _plan(company_id, owner, [str(uuid.uuid4())], meal_time="brunch")
    assert r.status_code == 422
