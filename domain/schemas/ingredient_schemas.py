from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    contact: Optional[str] = Field(None, max_length=200)


class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact: Optional[str] = Field(None, max_length=200)


class SupplierResponse(BaseModel):
    supplier_id: UUID
    company_id: UUID
    name: str
    contact: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IngredientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code_name: Optional[str] = Field(None, max_length=100)
    supplier_id: Optional[UUID] = None
    package_amount: Decimal = Field(
        ..., ge=Decimal("0.1"), description="Amount contained in one purchased package"
    )
    unit: str = Field(..., min_length=1, max_length=20)
    price: Decimal = Field(..., ge=0, description="Price of one package")
    items_per_box: Optional[int] = Field(None, ge=0)
    stock_grade: Optional[str] = Field(
        None, max_length=20, description="Set for ingredients tracked in stock"
    )
    memo1: Optional[str] = None
    origin: Optional[str] = None
    calories: Optional[Decimal] = Field(None, ge=0)
    protein: Optional[Decimal] = Field(None, ge=0)
    fat: Optional[Decimal] = Field(None, ge=0)
    carbs: Optional[Decimal] = Field(None, ge=0)
    allergens: Optional[str] = None


class IngredientCreate(IngredientBase):
    """Schema for creating an ingredient"""


class IngredientUpdate(IngredientBase):
    """Full replacement of an ingredient's editable fields"""


class IngredientResponse(BaseModel):
    ingredient_id: UUID
    company_id: UUID
    name: str
    code_name: Optional[str] = None
    supplier_id: Optional[UUID] = None
    supplier_name: Optional[str] = None
    package_amount: float
    unit: str
    price: float
    items_per_box: Optional[int] = None
    stock_grade: Optional[str] = None
    memo1: Optional[str] = None
    origin: Optional[str] = None
    calories: Optional[float] = None
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None
    allergens: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IngredientListResponse(BaseModel):
    ingredients: List[IngredientResponse]
    total: int
    page: int
    limit: int


class IngredientPriceHistoryResponse(BaseModel):
    history_id: UUID
    price: float
    recorded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CodeAvailability(BaseModel):
    available: bool
