"""Warehouse routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from typing import List
from uuid import UUID

from api.dependencies import get_db, get_company_membership, require_company_admin
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import CompanyMembership
from domain.schemas.stock_schemas import WarehouseCreate, WarehouseUpdate, WarehouseResponse
from services.warehouse_service import WarehouseService

router = APIRouter(
    prefix="/companies/{company_id}/warehouses",
    tags=["Warehouses"],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.warehouses")


@router.get("", response_model=List[WarehouseResponse])
def list_warehouses(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    warehouses = WarehouseService.list_warehouses(db, membership.company_id)
    return [WarehouseResponse.model_validate(w) for w in warehouses]


@router.post("", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
def create_warehouse(
    payload: WarehouseCreate,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    """Create a warehouse; the company's first one becomes the default"""
    warehouse = WarehouseService.create_warehouse(db, membership.company_id, payload)
    return WarehouseResponse.model_validate(warehouse)


@router.put("/{warehouse_id}", response_model=WarehouseResponse)
def update_warehouse(
    warehouse_id: UUID,
    payload: WarehouseUpdate,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    warehouse = WarehouseService.update_warehouse(
        db, membership.company_id, warehouse_id, payload
    )
    return WarehouseResponse.model_validate(warehouse)


@router.delete("/{warehouse_id}", response_model=DeletedResponse)
def delete_warehouse(
    warehouse_id: UUID,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    WarehouseService.delete_warehouse(db, membership.company_id, warehouse_id)
    return deleted(warehouse_id)
