"""
Meal Plan Repository - Data access for company meal plans
"""

from typing import Optional, List
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import and_

from repositories.base import BaseRepository
from domain.models import MealPlan, MealPlanMenu


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plans"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def _with_menus(self):
        return self.db.query(MealPlan).options(
            selectinload(MealPlan.menus).selectinload(MealPlanMenu.menu),
            selectinload(MealPlan.menus).selectinload(MealPlanMenu.container),
        )

    def get_by_id(self, meal_plan_id: UUID) -> Optional[MealPlan]:
        return self._with_menus().filter(MealPlan.meal_plan_id == meal_plan_id).first()

    def get_for_company(
        self, company_id: UUID, meal_plan_id: UUID
    ) -> Optional[MealPlan]:
        return (
            self._with_menus()
            .filter(
                and_(
                    MealPlan.company_id == company_id,
                    MealPlan.meal_plan_id == meal_plan_id,
                )
            )
            .first()
        )

    def list_in_range(
        self,
        company_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[MealPlan]:
        query = self._with_menus().filter(MealPlan.company_id == company_id)
        if start_date:
            query = query.filter(MealPlan.date >= start_date)
        if end_date:
            query = query.filter(MealPlan.date <= end_date)
        return query.order_by(MealPlan.date, MealPlan.created_at).all()

    def list_on_date(self, company_id: UUID, on_date: date) -> List[MealPlan]:
        return (
            self._with_menus()
            .filter(and_(MealPlan.company_id == company_id, MealPlan.date == on_date))
            .all()
        )
