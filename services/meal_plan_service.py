from typing import List, Optional
from uuid import UUID
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from domain.models import MealPlan, MealPlanMenu
from domain.enums import MEAL_TIME_ORDER
from domain.schemas.meal_plan_schemas import (
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanMenuInput,
    MealPlanResponse,
    MealPlanMenuResponse,
)
from repositories import MealPlanRepository, MenuRepository, ContainerRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.meal_plans")


def _to_response(plan: MealPlan) -> MealPlanResponse:
    menus = []
    total = Decimal("0")
    for entry in plan.menus:
        cost = Decimal(entry.menu.cost_price or 0)
        total += cost
        menus.append(
            MealPlanMenuResponse(
                menu_id=entry.menu_id,
                menu_name=entry.menu.name,
                cost_price=float(cost),
                container_id=entry.container_id,
                container_name=entry.container.name if entry.container else None,
            )
        )
    return MealPlanResponse(
        meal_plan_id=plan.meal_plan_id,
        company_id=plan.company_id,
        name=plan.name,
        date=plan.date,
        meal_time=plan.meal_time,
        menus=menus,
        total_cost=float(total),
        created_at=plan.created_at,
    )


class MealPlanService:
    @staticmethod
    def _validate_menus(
        db: Session, company_id: UUID, menus: List[MealPlanMenuInput]
    ) -> None:
        menu_ids = {m.menu_id for m in menus}
        if len(MenuRepository(db).get_many_for_company(company_id, list(menu_ids))) != len(
            menu_ids
        ):
            raise ServiceValidationError("One or more menus do not belong to this company")
        container_ids = {m.container_id for m in menus if m.container_id}
        if len(
            ContainerRepository(db).get_many_for_company(company_id, list(container_ids))
        ) != len(container_ids):
            raise ServiceValidationError("One or more containers do not belong to this company")

    @staticmethod
    def list_plans(
        db: Session,
        company_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[MealPlanResponse]:
        if start_date and end_date and start_date > end_date:
            raise ServiceValidationError("start_date must not be after end_date")
        plans = MealPlanRepository(db).list_in_range(company_id, start_date, end_date)
        return [_to_response(p) for p in plans]

    @staticmethod
    def list_by_date(db: Session, company_id: UUID, on_date: date) -> List[MealPlanResponse]:
        """Plans of one day in breakfast, lunch, dinner order"""
        plans = MealPlanRepository(db).list_on_date(company_id, on_date)
        plans.sort(key=lambda p: MEAL_TIME_ORDER.get(p.meal_time, len(MEAL_TIME_ORDER)))
        return [_to_response(p) for p in plans]

    @staticmethod
    def get_plan(db: Session, company_id: UUID, meal_plan_id: UUID) -> MealPlan:
        plan = MealPlanRepository(db).get_for_company(company_id, meal_plan_id)
        if not plan:
            raise NotFoundError(f"Meal plan not found: {meal_plan_id}")
        return plan

    @staticmethod
    def get_plan_response(db: Session, company_id: UUID, meal_plan_id: UUID) -> MealPlanResponse:
        return _to_response(MealPlanService.get_plan(db, company_id, meal_plan_id))

    @staticmethod
    def create_plan(db: Session, company_id: UUID, data: MealPlanCreate) -> MealPlanResponse:
        MealPlanService._validate_menus(db, company_id, data.menus)
        plan = MealPlan(
            company_id=company_id,
            name=data.name.strip(),
            date=data.date,
            meal_time=data.meal_time,
            menus=[
                MealPlanMenu(menu_id=m.menu_id, container_id=m.container_id)
                for m in data.menus
            ],
        )
        MealPlanRepository(db).create(plan)
        logger.info(f"Meal plan {plan.meal_plan_id} created for {data.date} {data.meal_time.value}")
        db.expire_all()
        return MealPlanService.get_plan_response(db, company_id, plan.meal_plan_id)

    @staticmethod
    def update_plan(
        db: Session, company_id: UUID, meal_plan_id: UUID, data: MealPlanUpdate
    ) -> MealPlanResponse:
        plan = MealPlanService.get_plan(db, company_id, meal_plan_id)
        if data.menus is not None:
            MealPlanService._validate_menus(db, company_id, data.menus)
            plan.menus = [
                MealPlanMenu(menu_id=m.menu_id, container_id=m.container_id)
                for m in data.menus
            ]
        if data.name is not None:
            plan.name = data.name.strip()
        if data.date is not None:
            plan.date = data.date
        if data.meal_time is not None:
            plan.meal_time = data.meal_time
        MealPlanRepository(db).update(plan)
        db.expire_all()
        return MealPlanService.get_plan_response(db, company_id, meal_plan_id)

    @staticmethod
    def delete_plan(db: Session, company_id: UUID, meal_plan_id: UUID) -> None:
        plan = MealPlanService.get_plan(db, company_id, meal_plan_id)
        MealPlanRepository(db).delete(plan)
        logger.info(f"Meal plan {meal_plan_id} deleted from {company_id}")
