"""Meal plan routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_db, get_company_membership, require_feature
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import CompanyMembership
from domain.schemas.meal_plan_schemas import MealPlanCreate, MealPlanUpdate, MealPlanResponse
from services.meal_plan_service import MealPlanService

router = APIRouter(
    prefix="/companies/{company_id}/meal-plans",
    tags=["Meal Plans"],
    dependencies=[Depends(require_feature("mealPlanning"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.meal_plans")


@router.get("", response_model=List[MealPlanResponse])
def list_meal_plans(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MealPlanService.list_plans(db, membership.company_id, start_date, end_date)


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    payload: MealPlanCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MealPlanService.create_plan(db, membership.company_id, payload)


@router.get("/by-date", response_model=List[MealPlanResponse])
def list_meal_plans_by_date(
    on_date: date = Query(..., alias="date", description="Day to list, ordered by meal time"),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MealPlanService.list_by_date(db, membership.company_id, on_date)


@router.get("/{meal_plan_id}", response_model=MealPlanResponse)
def get_meal_plan(
    meal_plan_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MealPlanService.get_plan_response(db, membership.company_id, meal_plan_id)


@router.put("/{meal_plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    meal_plan_id: UUID,
    payload: MealPlanUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MealPlanService.update_plan(db, membership.company_id, meal_plan_id, payload)


@router.delete("/{meal_plan_id}", response_model=DeletedResponse)
def delete_meal_plan(
    meal_plan_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    MealPlanService.delete_plan(db, membership.company_id, meal_plan_id)
    return deleted(meal_plan_id)
