"""Platform administration routes, restricted to head admins"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_db, require_platform_admin
from api.responses import AUTH_ERRORS
from domain.enums import PlatformRole
from domain.mappers import UserMapper
from domain.schemas.admin_schemas import AdminDashboard, AdminCompanyResponse
from domain.schemas.company_schemas import MemberResponse
from domain.schemas.marketplace_schemas import (
    ModuleRegister,
    ModuleResponse,
    CompanyModuleResponse,
    SubscriptionStatusUpdate,
)
from domain.schemas.user_schemas import UserResponse, PlatformRoleUpdate
from services.admin_service import AdminService
from services.marketplace_service import MarketplaceService
from services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_platform_admin)],
    responses=AUTH_ERRORS,
)
logger = logging.getLogger("foodops.api.admin")


@router.get("/dashboard", response_model=AdminDashboard)
def get_dashboard(db: Session = Depends(get_db)):
    return AdminDashboard(**AdminService.dashboard(db))


@router.get("/companies", response_model=List[AdminCompanyResponse])
def list_companies(db: Session = Depends(get_db)):
    """All companies with their member counts"""
    return [AdminCompanyResponse(**row) for row in AdminService.companies(db)]


@router.get("/companies/{company_id}/members", response_model=List[MemberResponse])
def list_company_members(company_id: UUID, db: Session = Depends(get_db)):
    return AdminService.company_members(db, company_id)


@router.get("/users", response_model=List[UserResponse])
def list_users(
    role: Optional[PlatformRole] = Query(None),
    db: Session = Depends(get_db),
):
    return [UserMapper.to_response(u) for u in UserService.list_users(db, role)]


@router.patch("/users/{user_id}/role", response_model=UserResponse)
def set_user_role(
    user_id: str, payload: PlatformRoleUpdate, db: Session = Depends(get_db)
):
    user = UserService.set_platform_role(db, user_id, payload.role)
    return UserMapper.to_response(user)


@router.post("/modules", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED)
def register_module(payload: ModuleRegister, db: Session = Depends(get_db)):
    """Publish a module, with its menu items, in the marketplace"""
    module = MarketplaceService.register_module(db, payload)
    return ModuleResponse.model_validate(module)


@router.post(
    "/modules/{module_id}/subscriptions/{company_id}/status",
    response_model=CompanyModuleResponse,
)
def set_subscription_status(
    module_id: str,
    company_id: UUID,
    payload: SubscriptionStatusUpdate,
    db: Session = Depends(get_db),
):
    """Approve a pending subscription or suspend an active one"""
    subscription = MarketplaceService.set_subscription_status(
        db, module_id, company_id, payload.status
    )
    return CompanyModuleResponse.model_validate(subscription)
