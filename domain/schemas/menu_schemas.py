from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal


class ContainerCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=50)


class ContainerCategoryUpdate(ContainerCategoryCreate):
    """Full replacement of a category's name and code"""


class ContainerCategoryResponse(BaseModel):
    category_id: UUID
    company_id: UUID
    name: str
    code: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ContainerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code_name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), ge=0)
    parent_container_id: Optional[UUID] = None
    category_id: Optional[UUID] = None


class ContainerUpdate(ContainerCreate):
    """Full replacement of a container's editable fields"""


class ContainerResponse(BaseModel):
    container_id: UUID
    company_id: UUID
    name: str
    code_name: Optional[str] = None
    description: Optional[str] = None
    price: float
    parent_container_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MenuIngredientInput(BaseModel):
    ingredient_id: UUID
    amount: Decimal = Field(..., gt=0, description="Amount in the ingredient's unit")


class MenuContainerInput(BaseModel):
    container_id: UUID
    ingredients: List[MenuIngredientInput] = Field(default_factory=list)


class MenuCreate(BaseModel):
    """Schema for creating a menu. At least one container is required."""

    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    recipe: Optional[str] = None
    containers: List[MenuContainerInput] = Field(default_factory=list)


class MenuUpdate(MenuCreate):
    """Full replacement; containers and their ingredients are rebuilt"""


class MenuIngredientResponse(BaseModel):
    ingredient_id: UUID
    name: str
    code_name: Optional[str] = None
    amount: float
    unit: str
    price: float
    package_amount: float
    cost: float


class MenuContainerResponse(BaseModel):
    menu_container_id: UUID
    container_id: UUID
    container_name: str
    container_price: float
    ingredients: List[MenuIngredientResponse]
    ingredients_cost: float
    total_cost: float


class MenuResponse(BaseModel):
    menu_id: UUID
    company_id: UUID
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    recipe: Optional[str] = None
    cost_price: float
    containers: List[MenuContainerResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuPriceHistoryResponse(BaseModel):
    history_id: UUID
    cost_price: float
    recorded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NameAvailability(BaseModel):
    available: bool
