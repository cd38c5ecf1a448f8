from typing import List, Optional
from uuid import UUID
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from domain.models import Menu, MenuContainer, MenuContainerIngredient
from domain.schemas.menu_schemas import (
    MenuCreate,
    MenuUpdate,
    MenuResponse,
    MenuContainerInput,
)
from domain.mappers.menu_mapper import MenuMapper, menu_cost
from repositories import MenuRepository, ContainerRepository, IngredientRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.menus")


class MenuService:
    @staticmethod
    def calculate_cost(
        db: Session, company_id: UUID, containers: List[MenuContainerInput]
    ) -> Decimal:
        """
        Cost price of a menu: round(sum(amount * price / package_amount))
        over every ingredient of every container.

        Raises:
            ServiceValidationError: a container or ingredient is not the company's
        """
        container_ids = {c.container_id for c in containers}
        found = ContainerRepository(db).get_many_for_company(company_id, list(container_ids))
        if len(found) != len(container_ids):
            raise ServiceValidationError("One or more containers do not belong to this company")

        ingredient_ids = {i.ingredient_id for c in containers for i in c.ingredients}
        ingredients = {
            i.ingredient_id: i
            for i in IngredientRepository(db).get_many_for_company(
                company_id, list(ingredient_ids)
            )
        }
        if len(ingredients) != len(ingredient_ids):
            raise ServiceValidationError("One or more ingredients do not belong to this company")

        lines = [
            (
                line.amount,
                ingredients[line.ingredient_id].price,
                ingredients[line.ingredient_id].package_amount,
            )
            for c in containers
            for line in c.ingredients
        ]
        return menu_cost(lines)

    @staticmethod
    def _validate(
        db: Session, company_id: UUID, data: MenuCreate, menu_id: Optional[UUID] = None
    ) -> Optional[str]:
        if not data.containers:
            raise ServiceValidationError("A menu needs at least one container")
        code = (data.code or "").strip() or None
        if code and MenuRepository(db).code_taken(company_id, code, menu_id):
            raise ServiceValidationError(f"Menu code '{code}' is already in use")
        return code

    @staticmethod
    def _build_containers(menu: Menu, containers: List[MenuContainerInput]) -> None:
        menu.containers = [
            MenuContainer(
                container_id=c.container_id,
                ingredients=[
                    MenuContainerIngredient(ingredient_id=i.ingredient_id, amount=i.amount)
                    for i in c.ingredients
                ],
            )
            for c in containers
        ]

    @staticmethod
    def list_menus(db: Session, company_id: UUID) -> List[MenuResponse]:
        return [MenuMapper.to_response(m) for m in MenuRepository(db).list_for_company(company_id)]

    @staticmethod
    def get_menu(db: Session, company_id: UUID, menu_id: UUID) -> Menu:
        menu = MenuRepository(db).get_for_company(company_id, menu_id)
        if not menu:
            raise NotFoundError(f"Menu not found: {menu_id}")
        return menu

    @staticmethod
    def get_menu_response(db: Session, company_id: UUID, menu_id: UUID) -> MenuResponse:
        return MenuMapper.to_response(MenuService.get_menu(db, company_id, menu_id))

    @staticmethod
    def create_menu(db: Session, company_id: UUID, data: MenuCreate) -> MenuResponse:
        """Create a menu with its containers and record the initial cost price"""
        code = MenuService._validate(db, company_id, data)
        cost = MenuService.calculate_cost(db, company_id, data.containers)

        repo = MenuRepository(db)
        try:
            menu = Menu(
                company_id=company_id,
                name=data.name.strip(),
                code=code,
                description=data.description,
                recipe=data.recipe,
                cost_price=cost,
            )
            MenuService._build_containers(menu, data.containers)
            db.add(menu)
            db.flush()
            repo.add_price_history(menu.menu_id, cost)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create menu for {company_id}: {e}")
            raise

        logger.info(f"Menu {menu.menu_id} created in {company_id} at cost {cost}")
        return MenuService.get_menu_response(db, company_id, menu.menu_id)

    @staticmethod
    def update_menu(
        db: Session, company_id: UUID, menu_id: UUID, data: MenuUpdate
    ) -> MenuResponse:
        """Replace a menu; a new history entry is recorded only when the cost changes"""
        menu = MenuService.get_menu(db, company_id, menu_id)
        code = MenuService._validate(db, company_id, data, menu_id)
        cost = MenuService.calculate_cost(db, company_id, data.containers)
        cost_changed = Decimal(menu.cost_price or 0) != cost

        try:
            menu.name = data.name.strip()
            menu.code = code
            menu.description = data.description
            menu.recipe = data.recipe
            menu.cost_price = cost
            MenuService._build_containers(menu, data.containers)
            if cost_changed:
                MenuRepository(db).add_price_history(menu.menu_id, cost)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update menu {menu_id}: {e}")
            raise

        db.expire_all()
        return MenuService.get_menu_response(db, company_id, menu_id)

    @staticmethod
    def delete_menu(db: Session, company_id: UUID, menu_id: UUID) -> None:
        menu = MenuService.get_menu(db, company_id, menu_id)
        MenuRepository(db).delete(menu)
        logger.info(f"Menu {menu_id} deleted from {company_id}")

    @staticmethod
    def is_name_available(
        db: Session, company_id: UUID, name: Optional[str], exclude_id: Optional[UUID] = None
    ) -> bool:
        name = (name or "").strip()
        if not name:
            return False
        return not MenuRepository(db).name_taken(company_id, name, exclude_id)

    @staticmethod
    def price_history(db: Session, company_id: UUID, menu_id: UUID):
        MenuService.get_menu(db, company_id, menu_id)
        return MenuRepository(db).price_history(menu_id)
