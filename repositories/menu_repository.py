"""
Menu Repository - Data access for containers, menus and menu price history
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import and_

from repositories.base import BaseRepository
from domain.models import (
    ContainerCategory,
    Container,
    Menu,
    MenuContainer,
    MenuContainerIngredient,
    MenuPriceHistory,
)


class ContainerCategoryRepository(BaseRepository[ContainerCategory]):
    """Repository for container categories"""

    def __init__(self, db: Session):
        super().__init__(db, ContainerCategory)

    def get_for_company(
        self, company_id: UUID, category_id: UUID
    ) -> Optional[ContainerCategory]:
        return (
            self.db.query(ContainerCategory)
            .filter(
                and_(
                    ContainerCategory.company_id == company_id,
                    ContainerCategory.category_id == category_id,
                )
            )
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[ContainerCategory]:
        return (
            self.db.query(ContainerCategory)
            .filter(ContainerCategory.company_id == company_id)
            .order_by(ContainerCategory.name)
            .all()
        )

    def code_taken(
        self, company_id: UUID, code: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(ContainerCategory.category_id).filter(
            and_(ContainerCategory.company_id == company_id, ContainerCategory.code == code)
        )
        if exclude_id is not None:
            query = query.filter(ContainerCategory.category_id != exclude_id)
        return query.first() is not None

    def is_in_use(self, category_id: UUID) -> bool:
        return (
            self.db.query(Container.container_id)
            .filter(Container.category_id == category_id)
            .first()
            is not None
        )


class ContainerRepository(BaseRepository[Container]):
    """Repository for menu containers"""

    def __init__(self, db: Session):
        super().__init__(db, Container)

    def get_by_id(self, container_id: UUID) -> Optional[Container]:
        return (
            self.db.query(Container)
            .filter(Container.container_id == container_id)
            .first()
        )

    def get_for_company(
        self, company_id: UUID, container_id: UUID
    ) -> Optional[Container]:
        return (
            self.db.query(Container)
            .filter(
                and_(
                    Container.company_id == company_id,
                    Container.container_id == container_id,
                )
            )
            .first()
        )

    def get_many_for_company(
        self, company_id: UUID, container_ids: List[UUID]
    ) -> List[Container]:
        if not container_ids:
            return []
        return (
            self.db.query(Container)
            .filter(
                and_(
                    Container.company_id == company_id,
                    Container.container_id.in_(container_ids),
                )
            )
            .all()
        )

    def list_for_company(self, company_id: UUID) -> List[Container]:
        return (
            self.db.query(Container)
            .filter(Container.company_id == company_id)
            .order_by(Container.name)
            .all()
        )

    def list_top_level(self, company_id: UUID) -> List[Container]:
        return (
            self.db.query(Container)
            .filter(
                and_(
                    Container.company_id == company_id,
                    Container.parent_container_id.is_(None),
                )
            )
            .order_by(Container.name)
            .all()
        )

    def list_children(self, parent_container_id: UUID) -> List[Container]:
        return (
            self.db.query(Container)
            .filter(Container.parent_container_id == parent_container_id)
            .order_by(Container.name)
            .all()
        )

    def code_name_taken(
        self, company_id: UUID, code_name: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(Container.container_id).filter(
            and_(Container.company_id == company_id, Container.code_name == code_name)
        )
        if exclude_id is not None:
            query = query.filter(Container.container_id != exclude_id)
        return query.first() is not None

    def is_used_by_menu(self, container_id: UUID) -> bool:
        return (
            self.db.query(MenuContainer.menu_container_id)
            .filter(MenuContainer.container_id == container_id)
            .first()
            is not None
        )


class MenuRepository(BaseRepository[Menu]):
    """Repository for menus with their containers and ingredients"""

    def __init__(self, db: Session):
        super().__init__(db, Menu)

    def _with_lines(self):
        return self.db.query(Menu).options(
            selectinload(Menu.containers).selectinload(MenuContainer.container),
            selectinload(Menu.containers)
            .selectinload(MenuContainer.ingredients)
            .selectinload(MenuContainerIngredient.ingredient),
        )

    def get_by_id(self, menu_id: UUID) -> Optional[Menu]:
        return self._with_lines().filter(Menu.menu_id == menu_id).first()

    def get_for_company(self, company_id: UUID, menu_id: UUID) -> Optional[Menu]:
        return (
            self._with_lines()
            .filter(and_(Menu.company_id == company_id, Menu.menu_id == menu_id))
            .first()
        )

    def get_many_for_company(self, company_id: UUID, menu_ids: List[UUID]) -> List[Menu]:
        if not menu_ids:
            return []
        return (
            self.db.query(Menu)
            .filter(and_(Menu.company_id == company_id, Menu.menu_id.in_(menu_ids)))
            .all()
        )

    def list_for_company(self, company_id: UUID) -> List[Menu]:
        return (
            self._with_lines()
            .filter(Menu.company_id == company_id)
            .order_by(Menu.name)
            .all()
        )

    def delete_for_company(self, company_id: UUID) -> int:
        """Delete menus one by one so their container lines go with them"""
        menus = self.db.query(Menu).filter(Menu.company_id == company_id).all()
        for menu in menus:
            self.db.delete(menu)
        return len(menus)

    def code_taken(
        self, company_id: UUID, code: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(Menu.menu_id).filter(
            and_(Menu.company_id == company_id, Menu.code == code)
        )
        if exclude_id is not None:
            query = query.filter(Menu.menu_id != exclude_id)
        return query.first() is not None

    def name_taken(
        self, company_id: UUID, name: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(Menu.menu_id).filter(
            and_(Menu.company_id == company_id, Menu.name == name)
        )
        if exclude_id is not None:
            query = query.filter(Menu.menu_id != exclude_id)
        return query.first() is not None

    def add_price_history(self, menu_id: UUID, cost_price) -> MenuPriceHistory:
        """Stage a history row; the caller commits"""
        entry = MenuPriceHistory(menu_id=menu_id, cost_price=cost_price)
        self.db.add(entry)
        return entry

    def price_history(self, menu_id: UUID) -> List[MenuPriceHistory]:
        return (
            self.db.query(MenuPriceHistory)
            .filter(MenuPriceHistory.menu_id == menu_id)
            .order_by(MenuPriceHistory.recorded_at.desc())
            .all()
        )
