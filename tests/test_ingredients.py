"""
Tests for ingredients, their price history and suppliers.

Ingredient routes require the ``ingredients`` feature, which is enabled for
every new company.
"""

import uuid

from test_fixtures import (
    client,
    auth_headers,
    make_user,
    make_company,
    make_tenant,
    add_member,
    make_ingredient,
    make_container,
)
from domain.enums import MembershipRole


def _url(company_id, path=""):
    return f"/companies/{company_id}/ingredients{path}"


def test_create_and_get_ingredient():
    owner, company_id = make_tenant()
    created = make_ingredient(
        company_id,
        owner,
        name="Chicken Breast",
        code_name="CHK-01",
        package_amount=2000,
        unit="g",
        price=12000,
        stock_grade="A",
        calories=165,
        allergens="none",
    )
    assert created["name"] == "Chicken Breast"
    assert created["price"] == 12000
    assert created["package_amount"] == 2000

    r = client.get(_url(company_id, f"/{created['ingredient_id']}"), headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["code_name"] == "CHK-01"
    assert r.json()["stock_grade"] == "A"


def test_duplicate_code_name_conflicts():
    owner, company_id = make_tenant()
    make_ingredient(company_id, owner, code_name="DUP-1")

    r = client.post(
        _url(company_id),
        json={"name": "Other", "code_name": "DUP-1", "package_amount": 1, "unit": "kg", "price": 1},
        headers=auth_headers(owner),
    )
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "DUPLICATE_CODE_NAME"


def test_same_code_allowed_in_other_company():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    make_ingredient(company_id, owner, code_name="SHARED")
    make_ingredient(other_company, other_owner, code_name="SHARED")


def test_field_constraints_rejected():
    owner, company_id = make_tenant()
    base = {"name": "Salt", "package_amount": 1, "unit": "kg", "price": 1}

    for bad in (
        {"package_amount": 0.05},
        {"price": -1},
        {"name": ""},
        {"name": "x" * 101},
        {"calories": -5},
    ):
        r = client.post(_url(company_id), json={**base, **bad}, headers=auth_headers(owner))
        assert r.status_code == 422, bad


def test_price_history_only_records_changes():
    """
    Verifies:
    - Creation records the initial price
    - An update with the same price adds nothing
    - A changed price adds an entry
    """
    owner, company_id = make_tenant()
    created = make_ingredient(company_id, owner, price=1000, code_name="OIL")
    ingredient_id = created["ingredient_id"]
    update = {
        "name": "Olive Oil",
        "code_name": "OIL",
        "package_amount": 1000,
        "unit": "ml",
        "price": 1000,
    }

    r = client.put(_url(company_id, f"/{ingredient_id}"), json=update, headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["name"] == "Olive Oil"

    r = client.put(
        _url(company_id, f"/{ingredient_id}"),
        json={**update, "price": 1250},
        headers=auth_headers(owner),
    )
    assert r.status_code == 200

    r = client.get(_url(company_id, f"/{ingredient_id}/price-history"), headers=auth_headers(owner))
    assert r.status_code == 200
    assert sorted(h["price"] for h in r.json()) == [1000, 1250]


def test_list_search_and_pagination():
    owner, company_id = make_tenant()
    for name in ("Apple", "Apricot", "Banana"):
        make_ingredient(company_id, owner, name=name)

    r = client.get(_url(company_id) + "?q=ap&page=1&limit=1", headers=auth_headers(owner))
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert body["limit"] == 1
    assert [i["name"] for i in body["ingredients"]] == ["Apple"]

    r = client.get(_url(company_id) + "?q=ap&page=2&limit=1", headers=auth_headers(owner))
    assert [i["name"] for i in r.json()["ingredients"]] == ["Apricot"]


def test_check_code_availability():
    owner, company_id = make_tenant()
    created = make_ingredient(company_id, owner, code_name="FLOUR")

    r = client.get(_url(company_id, "/check-code?code=FLOUR"), headers=auth_headers(owner))
    assert r.json() == {"available": False}

    r = client.get(
        _url(company_id, f"/check-code?code=FLOUR&exclude_id={created['ingredient_id']}"),
        headers=auth_headers(owner),
    )
    assert r.json() == {"available": True}

    r = client.get(_url(company_id, "/check-code?code=SUGAR"), headers=auth_headers(owner))
    assert r.json() == {"available": True}


def test_delete_refused_when_used_by_menu():
    owner, company_id = make_tenant()
    ingredient = make_ingredient(company_id, owner)
    container = make_container(company_id, owner)
    r = client.post(
        f"/companies/{company_id}/menus",
        json={
            "name": "Rice Bowl",
            "containers": [
                {
                    "container_id": container["container_id"],
                    "ingredients": [{"ingredient_id": ingredient["ingredient_id"], "amount": 200}],
                }
            ],
        },
        headers=auth_headers(owner),
    )
    assert r.status_code == 201

    r = client.delete(_url(company_id, f"/{ingredient['ingredient_id']}"), headers=auth_headers(owner))
    assert r.status_code == 409

    unused = make_ingredient(company_id, owner, name="Unused")
    r = client.delete(_url(company_id, f"/{unused['ingredient_id']}"), headers=auth_headers(owner))
    assert r.status_code == 200


def test_ingredient_of_other_company_not_found():
    owner, company_id = make_tenant()
    other_owner, other_company = make_tenant()
    foreign = make_ingredient(other_company, other_owner)

    r = client.get(_url(company_id, f"/{foreign['ingredient_id']}"), headers=auth_headers(owner))
    assert r.status_code == 404

    r = client.get(_url(company_id, f"/{uuid.uuid4()}"), headers=auth_headers(owner))
    assert r.status_code == 404


# =============================================================================
# SUPPLIERS
# =============================================================================


def test_supplier_crud_and_permissions():
    owner, company_id = make_tenant()
    member = make_user()
    add_member(company_id, member, MembershipRole.MEMBER)
    url = f"/companies/{company_id}/suppliers"

    r = client.post(url, json={"name": "Fresh Farms"}, headers=auth_headers(member))
    assert r.status_code == 403

    r = client.post(url, json={"name": "Fresh Farms", "contact": "555-0100"}, headers=auth_headers(owner))
    assert r.status_code == 201
    supplier_id = r.json()["supplier_id"]

    r = client.post(url, json={"name": "Fresh Farms"}, headers=auth_headers(owner))
    assert r.status_code == 409

    r = client.get(url, headers=auth_headers(member))
    assert [s["name"] for s in r.json()] == ["Fresh Farms"]

    r = client.put(f"{url}/{supplier_id}", json={"name": "Fresh Farms Ltd"}, headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["name"] == "Fresh Farms Ltd"


def test_deleting_supplier_detaches_ingredients():
    owner, company_id = make_tenant()
    url = f"/companies/{company_id}/suppliers"
    supplier_id = client.post(url, json={"name": "Dairy Co"}, headers=auth_headers(owner)).json()[
        "supplier_id"
    ]
    ingredient = make_ingredient(company_id, owner, name="Milk", supplier_id=supplier_id)
    assert ingredient["supplier_name"] == "Dairy Co"

    r = client.delete(f"{url}/{supplier_id}", headers=auth_headers(owner))
    assert r.status_code == 200

    r = client.get(_url(company_id, f"/{ingredient['ingredient_id']}"), headers=auth_headers(owner))
    assert r.json()["supplier_id"] is None


def test_unknown_supplier_rejected():
    owner, company_id = make_tenant()
    r = client.post(
        _url(company_id),
        json={
            "name": "Butter",
            "package_amount": 1,
            "unit": "kg",
            "price": 10,
            "supplier_id": str(uuid.uuid4()),
        },
        headers=auth_headers(owner),
    )
    assert r.status_code == 400
