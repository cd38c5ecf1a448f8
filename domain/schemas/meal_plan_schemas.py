from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date as date_type
from uuid import UUID

from domain.enums import MealTime


class MealPlanMenuInput(BaseModel):
    menu_id: UUID
    container_id: Optional[UUID] = None


class MealPlanCreate(BaseModel):
    """Schema for scheduling menus on a meal slot"""

    name: str = Field(..., min_length=1, max_length=100)
    date: date_type
    meal_time: MealTime
    menus: List[MealPlanMenuInput] = Field(default_factory=list)


class MealPlanUpdate(BaseModel):
    """Partial update; menus, when given, replace the existing list"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[date_type] = None
    meal_time: Optional[MealTime] = None
    menus: Optional[List[MealPlanMenuInput]] = None


class MealPlanMenuResponse(BaseModel):
    menu_id: UUID
    menu_name: str
    cost_price: float
    container_id: Optional[UUID] = None
    container_name: Optional[str] = None


class MealPlanResponse(BaseModel):
    meal_plan_id: UUID
    company_id: UUID
    name: str
    date: date_type
    meal_time: MealTime
    menus: List[MealPlanMenuResponse]
    total_cost: float
    created_at: Optional[datetime] = None
