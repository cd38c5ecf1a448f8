from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from domain.enums import SubscriptionStatus


class ModuleMenuItemInput(BaseModel):
    label: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    icon: Optional[str] = None
    permission: Optional[str] = None
    display_order: int = 0


class ModuleRegister(BaseModel):
    """
    Registration payload for a marketplace module.
    Required fields (id, name, category, version) are checked by the service
    so that a missing field answers 400.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    requires_approval: bool = False
    menu_items: List[ModuleMenuItemInput] = Field(default_factory=list)


class ModuleMenuItemResponse(BaseModel):
    menu_item_id: UUID
    module_id: str
    label: str
    path: str
    icon: Optional[str] = None
    permission: Optional[str] = None
    parent_id: Optional[UUID] = None
    display_order: int
    is_visible: bool = True

    model_config = {"from_attributes": True}


class ModuleResponse(BaseModel):
    module_id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    category: str
    version: str
    price: Optional[float] = None
    is_active: bool
    requires_approval: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ModuleDetailResponse(BaseModel):
    module: ModuleResponse
    menu_items: List[ModuleMenuItemResponse]


class CompanyModuleResponse(BaseModel):
    company_module_id: UUID
    company_id: UUID
    module_id: str
    status: SubscriptionStatus
    subscribed_by: Optional[str] = None
    subscribed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    module: Optional[ModuleResponse] = None

    model_config = {"from_attributes": True}


class SubscriptionStatusUpdate(BaseModel):
    status: SubscriptionStatus


class ModuleSettingUpsert(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: Any = None


class ModuleSettingResponse(BaseModel):
    key: str
    value: Any = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MenuSettingUpsert(BaseModel):
    menu_item_id: UUID
    is_visible: bool = True
    display_order: Optional[int] = None


class MenuSettingResponse(BaseModel):
    menu_item_id: UUID
    is_visible: bool
    display_order: Optional[int] = None

    model_config = {"from_attributes": True}
