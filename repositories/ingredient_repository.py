"""
Ingredient Repository - Data access for ingredients, suppliers and price history
"""

from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_, func

from repositories.base import BaseRepository
from domain.models import (
    Ingredient,
    IngredientPriceHistory,
    Supplier,
    MenuContainerIngredient,
)


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for company ingredients"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_id(self, ingredient_id: UUID) -> Optional[Ingredient]:
        return (
            self.db.query(Ingredient)
            .filter(Ingredient.ingredient_id == ingredient_id)
            .first()
        )

    def get_for_company(
        self, company_id: UUID, ingredient_id: UUID
    ) -> Optional[Ingredient]:
        return (
            self.db.query(Ingredient)
            .options(joinedload(Ingredient.supplier))
            .filter(
                and_(
                    Ingredient.company_id == company_id,
                    Ingredient.ingredient_id == ingredient_id,
                )
            )
            .first()
        )

    def get_many_for_company(
        self, company_id: UUID, ingredient_ids: List[UUID]
    ) -> List[Ingredient]:
        if not ingredient_ids:
            return []
        return (
            self.db.query(Ingredient)
            .filter(
                and_(
                    Ingredient.company_id == company_id,
                    Ingredient.ingredient_id.in_(ingredient_ids),
                )
            )
            .all()
        )

    def search(
        self,
        company_id: UUID,
        term: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Ingredient], int]:
        """Page of ingredients matching ``term`` on name or code, plus the total"""
        query = self.db.query(Ingredient).filter(Ingredient.company_id == company_id)
        if term:
            pattern = f"%{term.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Ingredient.name).like(pattern),
                    func.lower(Ingredient.code_name).like(pattern),
                )
            )
        total = query.count()
        items = (
            query.options(joinedload(Ingredient.supplier))
            .order_by(Ingredient.name)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def code_name_taken(
        self, company_id: UUID, code_name: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(Ingredient.ingredient_id).filter(
            and_(
                Ingredient.company_id == company_id,
                Ingredient.code_name == code_name,
            )
        )
        if exclude_id is not None:
            query = query.filter(Ingredient.ingredient_id != exclude_id)
        return query.first() is not None

    def list_stock_graded(self, company_id: UUID) -> List[Ingredient]:
        """Ingredients tracked in stock (non-empty stock grade)"""
        return (
            self.db.query(Ingredient)
            .filter(
                and_(
                    Ingredient.company_id == company_id,
                    Ingredient.stock_grade.isnot(None),
                    Ingredient.stock_grade != "",
                )
            )
            .order_by(Ingredient.name)
            .all()
        )

    def is_used_by_menu(self, ingredient_id: UUID) -> bool:
        return (
            self.db.query(MenuContainerIngredient.menu_container_ingredient_id)
            .filter(MenuContainerIngredient.ingredient_id == ingredient_id)
            .first()
            is not None
        )

    def add_price_history(
        self, ingredient_id: UUID, price, commit: bool = True
    ) -> IngredientPriceHistory:
        entry = IngredientPriceHistory(ingredient_id=ingredient_id, price=price)
        self.db.add(entry)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return entry

    def price_history(self, ingredient_id: UUID) -> List[IngredientPriceHistory]:
        return (
            self.db.query(IngredientPriceHistory)
            .filter(IngredientPriceHistory.ingredient_id == ingredient_id)
            .order_by(IngredientPriceHistory.recorded_at.desc())
            .all()
        )


class SupplierRepository(BaseRepository[Supplier]):
    """Repository for ingredient suppliers"""

    def __init__(self, db: Session):
        super().__init__(db, Supplier)

    def get_by_id(self, supplier_id: UUID) -> Optional[Supplier]:
        return self.db.query(Supplier).filter(Supplier.supplier_id == supplier_id).first()

    def get_for_company(self, company_id: UUID, supplier_id: UUID) -> Optional[Supplier]:
        return (
            self.db.query(Supplier)
            .filter(
                and_(
                    Supplier.company_id == company_id,
                    Supplier.supplier_id == supplier_id,
                )
            )
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[Supplier]:
        return (
            self.db.query(Supplier)
            .filter(Supplier.company_id == company_id)
            .order_by(Supplier.name)
            .all()
        )

    def name_taken(
        self, company_id: UUID, name: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = self.db.query(Supplier.supplier_id).filter(
            and_(Supplier.company_id == company_id, Supplier.name == name)
        )
        if exclude_id is not None:
            query = query.filter(Supplier.supplier_id != exclude_id)
        return query.first() is not None

    def detach_ingredients(self, supplier_id: UUID) -> int:
        """Clear the supplier reference of every ingredient bought from it"""
        return (
            self.db.query(Ingredient)
            .filter(Ingredient.supplier_id == supplier_id)
            .update({Ingredient.supplier_id: None}, synchronize_session=False)
        )
