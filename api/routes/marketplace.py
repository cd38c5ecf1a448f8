"""Marketplace catalog and company subscription routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from api.dependencies import (
    get_db,
    get_current_user,
    get_company_membership,
    require_company_admin,
)
from api.responses import AUTH_ERRORS, COMPANY_ERRORS
from domain.models import AppUser, CompanyMembership
from domain.schemas.marketplace_schemas import (
    ModuleResponse,
    ModuleDetailResponse,
    ModuleMenuItemResponse,
    CompanyModuleResponse,
    ModuleSettingUpsert,
    ModuleSettingResponse,
    MenuSettingUpsert,
    MenuSettingResponse,
)
from services.marketplace_service import MarketplaceService

router = APIRouter(tags=["Marketplace"])
logger = logging.getLogger("foodops.api.marketplace")


@router.get("/marketplace/modules", response_model=List[ModuleResponse], responses=AUTH_ERRORS)
def list_modules(
    q: Optional[str] = Query(None, description="Search name, description and category"),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    modules = MarketplaceService.list_modules(db, q)
    return [ModuleResponse.model_validate(m) for m in modules]


@router.get(
    "/marketplace/modules/{module_id}",
    response_model=ModuleDetailResponse,
    responses=AUTH_ERRORS,
)
def get_module(
    module_id: str,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return MarketplaceService.get_module_detail(db, module_id)


# ----- company subscriptions -----


@router.get(
    "/companies/{company_id}/modules",
    response_model=List[CompanyModuleResponse],
    responses=COMPANY_ERRORS,
)
def list_company_modules(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    subscriptions = MarketplaceService.list_company_modules(db, membership.company_id)
    return [CompanyModuleResponse.model_validate(s) for s in subscriptions]


@router.get(
    "/companies/{company_id}/modules/menu",
    response_model=List[ModuleMenuItemResponse],
    responses=COMPANY_ERRORS,
)
def get_company_menu(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Navigation entries contributed by the company's active modules"""
    return MarketplaceService.company_menu(db, membership.company_id)


@router.put(
    "/companies/{company_id}/modules/menu-settings",
    response_model=MenuSettingResponse,
    responses=COMPANY_ERRORS,
)
def put_menu_setting(
    payload: MenuSettingUpsert,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    setting = MarketplaceService.put_menu_setting(db, membership.company_id, payload)
    return MenuSettingResponse.model_validate(setting)


@router.post(
    "/companies/{company_id}/modules/{module_id}/subscribe",
    response_model=CompanyModuleResponse,
    responses=COMPANY_ERRORS,
)
def subscribe(
    module_id: str,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    """Subscribe, or reactivate a cancelled subscription"""
    subscription = MarketplaceService.subscribe(
        db, membership.company_id, module_id, membership.user_id
    )
    return CompanyModuleResponse.model_validate(subscription)


@router.post(
    "/companies/{company_id}/modules/{module_id}/unsubscribe",
    response_model=CompanyModuleResponse,
    responses=COMPANY_ERRORS,
)
def unsubscribe(
    module_id: str,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    subscription = MarketplaceService.unsubscribe(db, membership.company_id, module_id)
    return CompanyModuleResponse.model_validate(subscription)


@router.get(
    "/companies/{company_id}/modules/{module_id}/settings",
    response_model=List[ModuleSettingResponse],
    responses=COMPANY_ERRORS,
)
def get_module_settings(
    module_id: str,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    settings = MarketplaceService.get_settings(db, membership.company_id, module_id)
    return [ModuleSettingResponse.model_validate(s) for s in settings]


@router.put(
    "/companies/{company_id}/modules/{module_id}/settings",
    response_model=ModuleSettingResponse,
    responses=COMPANY_ERRORS,
)
def put_module_setting(
    module_id: str,
    payload: ModuleSettingUpsert,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    setting = MarketplaceService.put_setting(db, membership.company_id, module_id, payload)
    return ModuleSettingResponse.model_validate(setting)
