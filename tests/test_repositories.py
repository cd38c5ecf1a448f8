"""
Tests for repository classes against the test database.

Covers the data access layer directly:
- BaseRepository: create, update, delete and the commit flag
- MembershipRepository: unique (company, user) constraint
- IngredientRepository: search, code lookups and stock-graded listing
- ContainerRepository: top-level and child listing
- WarehouseRepository: default handling and stock checks
- StockItemRepository: per-warehouse lookups
"""

import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from test_fixtures import make_user
from domain.enums import MembershipRole, StockItemType
from domain.models import (
    Company,
    CompanyMembership,
    Container,
    Ingredient,
    StockItem,
    Warehouse,
)
from repositories import (
    CompanyRepository,
    MembershipRepository,
    IngredientRepository,
    ContainerRepository,
    WarehouseRepository,
    StockItemRepository,
)


@pytest.fixture
def company(db_session: Session) -> Company:
    owner_id = make_user()
    return CompanyRepository(db_session).create(Company(name="Test Kitchen", created_by=owner_id))


def _ingredient(company: Company, name: str, code_name=None, stock_grade=None) -> Ingredient:
    return Ingredient(
        company_id=company.company_id,
        name=name,
        code_name=code_name,
        package_amount=Decimal("1"),
        unit="kg",
        price=Decimal("10"),
        stock_grade=stock_grade,
    )


# =============================================================================
# BASE REPOSITORY
# =============================================================================


def test_create_without_commit_rolls_back(db_session: Session, company: Company):
    repo = WarehouseRepository(db_session)
    warehouse = repo.create(Warehouse(company_id=company.company_id, name="Temp"), commit=False)
    assert warehouse.warehouse_id is not None

    db_session.rollback()
    assert repo.list_for_company(company.company_id) == []


def test_update_and_delete(db_session: Session, company: Company):
    repo = CompanyRepository(db_session)
    company.description = "Soups and salads"
    repo.update(company)
    assert repo.get_by_id(company.company_id).description == "Soups and salads"

    repo.delete(company)
    assert not repo.exists(company.company_id)


# =============================================================================
# MEMBERSHIPS
# =============================================================================


def test_membership_unique_per_company(db_session: Session, company: Company):
    user_id = make_user()
    repo = MembershipRepository(db_session)
    repo.create(CompanyMembership(company_id=company.company_id, user_id=user_id))
    assert repo.get(company.company_id, user_id).role == MembershipRole.MEMBER

    with pytest.raises(IntegrityError):
        repo.create(CompanyMembership(company_id=company.company_id, user_id=user_id))
    db_session.rollback()


# =============================================================================
# INGREDIENTS AND CONTAINERS
# =============================================================================


def test_ingredient_search_and_codes(db_session: Session, company: Company):
    repo = IngredientRepository(db_session)
    for name, code in (("Cumin", "SP-1"), ("Coriander", "SP-2"), ("Carrot", "VG-1")):
        repo.create(_ingredient(company, name, code))

    items, total = repo.search(company.company_id, "sp-", offset=0, limit=1)
    assert total == 2
    assert [i.name for i in items] == ["Coriander"]

    cumin = repo.search(company.company_id, "cumin")[0][0]
    assert repo.code_name_taken(company.company_id, "SP-1")
    assert not repo.code_name_taken(company.company_id, "SP-1", exclude_id=cumin.ingredient_id)
    assert not repo.is_used_by_menu(cumin.ingredient_id)


def test_list_stock_graded_skips_blank_grades(db_session: Session, company: Company):
    repo = IngredientRepository(db_session)
    repo.create(_ingredient(company, "Beans", stock_grade="B"))
    repo.create(_ingredient(company, "Pepper", stock_grade=""))
    repo.create(_ingredient(company, "Salt"))

    assert [i.name for i in repo.list_stock_graded(company.company_id)] == ["Beans"]


def test_container_hierarchy(db_session: Session, company: Company):
    repo = ContainerRepository(db_session)
    tray = repo.create(Container(company_id=company.company_id, name="Tray"))
    repo.create(
        Container(
            company_id=company.company_id, name="Cup", parent_container_id=tray.container_id
        )
    )

    assert [c.name for c in repo.list_top_level(company.company_id)] == ["Tray"]
    assert [c.name for c in repo.list_children(tray.container_id)] == ["Cup"]


# =============================================================================
# WAREHOUSES AND STOCK ITEMS
# =============================================================================


def test_warehouse_default_handling(db_session: Session, company: Company):
    repo = WarehouseRepository(db_session)
    main = repo.create(Warehouse(company_id=company.company_id, name="Main", is_default=True))
    annex = repo.create(Warehouse(company_id=company.company_id, name="Annex"))

    assert repo.get_default(company.company_id).warehouse_id == main.warehouse_id

    repo.clear_default(company.company_id, keep_id=annex.warehouse_id)
    annex.is_default = True
    repo.update(annex)
    assert repo.get_default(company.company_id).warehouse_id == annex.warehouse_id
    assert repo.count_for_company(company.company_id) == 2


def test_stock_item_lookups(db_session: Session, company: Company):
    warehouse = WarehouseRepository(db_session).create(
        Warehouse(company_id=company.company_id, name="Main", is_default=True)
    )
    beans = IngredientRepository(db_session).create(_ingredient(company, "Beans", stock_grade="A"))
    repo = StockItemRepository(db_session)
    repo.create(
        StockItem(
            company_id=company.company_id,
            warehouse_id=warehouse.warehouse_id,
            item_type=StockItemType.INGREDIENT,
            item_id=beans.ingredient_id,
            current_quantity=Decimal("2.5"),
            unit="kg",
        )
    )

    found = repo.find_in_warehouse(
        company.company_id, StockItemType.INGREDIENT, beans.ingredient_id, warehouse.warehouse_id
    )
    assert found.current_quantity == Decimal("2.5")
    assert repo.existing_item_ids(company.company_id, StockItemType.INGREDIENT) == {
        beans.ingredient_id
    }
    assert repo.existing_item_ids(company.company_id, StockItemType.CONTAINER) == set()
    assert WarehouseRepository(db_session).holds_stock(warehouse.warehouse_id)
