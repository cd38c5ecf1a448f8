"""Stock audit routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import Optional
from uuid import UUID

from api.dependencies import (
    get_db,
    get_company_membership,
    require_company_admin,
    require_feature,
)
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.enums import AuditStatus, StockItemType
from domain.models import CompanyMembership
from domain.schemas.stock_schemas import (
    StockAuditCreate,
    StockAuditCreated,
    StockAuditListResponse,
    StockAuditDetailResponse,
    StockAuditItemResponse,
    StockAuditItemUpdate,
    StockAuditItemBatchUpdate,
    StockAuditItemBatchResponse,
    StockAuditAction,
    StockAuditActionResponse,
)
from services.audit_service import AuditService

router = APIRouter(
    prefix="/companies/{company_id}/stock/audits",
    tags=["Stock Audits"],
    dependencies=[Depends(require_feature("inventory"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.audits")


@router.get("", response_model=StockAuditListResponse)
def list_audits(
    audit_status: Optional[AuditStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return AuditService.list_audits(
        db, membership.company_id, audit_status, page, page_size
    )


@router.post("", response_model=StockAuditCreated, status_code=status.HTTP_201_CREATED)
def create_audit(
    payload: StockAuditCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Open an audit and snapshot book quantities for the chosen item types"""
    return AuditService.create_audit(db, membership.company_id, membership.user_id, payload)


@router.get("/{audit_id}", response_model=StockAuditDetailResponse)
def get_audit(
    audit_id: UUID,
    item_type: Optional[StockItemType] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return AuditService.get_audit_detail(
        db, membership.company_id, audit_id, item_type, search, page, page_size
    )


@router.put("/{audit_id}/items/batch", response_model=StockAuditItemBatchResponse)
def update_audit_items(
    audit_id: UUID,
    payload: StockAuditItemBatchUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return AuditService.update_items(
        db, membership.company_id, audit_id, membership.user_id, payload
    )


@router.put("/{audit_id}/items/{item_id}", response_model=StockAuditItemResponse)
def update_audit_item(
    audit_id: UUID,
    item_id: UUID,
    payload: StockAuditItemUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Record the counted quantity of one audit item"""
    item = AuditService.update_item(
        db, membership.company_id, audit_id, item_id, membership.user_id, payload
    )
    return StockAuditItemResponse.model_validate(item)


@router.patch("/{audit_id}", response_model=StockAuditActionResponse)
def audit_action(
    audit_id: UUID,
    payload: StockAuditAction,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return AuditService.perform_action(
        db, membership.company_id, audit_id, membership.user_id, payload
    )


@router.delete("/{audit_id}", response_model=DeletedResponse)
def delete_audit(
    audit_id: UUID,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    AuditService.delete_audit(db, membership.company_id, audit_id)
    return deleted(audit_id)
