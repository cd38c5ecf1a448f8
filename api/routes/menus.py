"""Menu routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_db, get_company_membership, require_feature
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import CompanyMembership
from domain.schemas.menu_schemas import (
    MenuCreate,
    MenuUpdate,
    MenuResponse,
    MenuPriceHistoryResponse,
    NameAvailability,
)
from services.menu_service import MenuService

router = APIRouter(
    prefix="/companies/{company_id}/menus",
    tags=["Menus"],
    dependencies=[Depends(require_feature("menus"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.menus")


@router.get("", response_model=List[MenuResponse])
def list_menus(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Menus with per-container ingredient and total costs"""
    return MenuService.list_menus(db, membership.company_id)


@router.post("", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    payload: MenuCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MenuService.create_menu(db, membership.company_id, payload)


@router.get("/check-name", response_model=NameAvailability)
def check_menu_name(
    name: Optional[str] = Query(None),
    exclude_id: Optional[UUID] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    available = MenuService.is_name_available(db, membership.company_id, name, exclude_id)
    return NameAvailability(available=available)


@router.get("/{menu_id}", response_model=MenuResponse)
def get_menu(
    menu_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MenuService.get_menu_response(db, membership.company_id, menu_id)


@router.put("/{menu_id}", response_model=MenuResponse)
def update_menu(
    menu_id: UUID,
    payload: MenuUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Replace the menu's containers and recompute its cost price"""
    return MenuService.update_menu(db, membership.company_id, menu_id, payload)


@router.delete("/{menu_id}", response_model=DeletedResponse)
def delete_menu(
    menu_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    MenuService.delete_menu(db, membership.company_id, menu_id)
    return deleted(menu_id)


@router.get("/{menu_id}/price-history", response_model=List[MenuPriceHistoryResponse])
def get_menu_price_history(
    menu_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    history = MenuService.price_history(db, membership.company_id, menu_id)
    return [MenuPriceHistoryResponse.model_validate(h) for h in history]
