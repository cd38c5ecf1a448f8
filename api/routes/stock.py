"""Stock item, transaction and transfer routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_db, get_current_user, get_company_membership, require_feature
from api.responses import COMPANY_ERRORS
from domain.enums import StockItemType, TransactionType
from domain.models import AppUser, CompanyMembership
from domain.schemas.stock_schemas import (
    StockItemDetailResponse,
    StockItemResponse,
    StockSyncResponse,
    StockTransactionCreate,
    StockTransactionResponse,
    StockTransferCreate,
    StockTransferResponse,
)
from services.stock_service import StockService

router = APIRouter(
    prefix="/companies/{company_id}/stock",
    tags=["Stock"],
    dependencies=[Depends(require_feature("inventory"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.stock")


@router.get("/items", response_model=List[StockItemResponse])
def list_stock_items(
    item_type: Optional[StockItemType] = Query(None),
    warehouse_id: Optional[UUID] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return StockService.list_items(db, membership.company_id, item_type, warehouse_id)


@router.post("/items/sync", response_model=StockSyncResponse)
def sync_stock_items(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Create missing zero-quantity stock items in the default warehouse"""
    return StockService.sync_items(db, membership.company_id)


@router.get("/items/{stock_item_id}", response_model=StockItemDetailResponse)
def get_stock_item(
    stock_item_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return StockService.get_item_detail(db, membership.company_id, stock_item_id)


@router.get("/transactions", response_model=List[StockTransactionResponse])
def list_stock_transactions(
    stock_item_id: Optional[UUID] = Query(None),
    transaction_type: Optional[TransactionType] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    transactions = StockService.list_transactions(
        db, membership.company_id, stock_item_id, transaction_type
    )
    return [StockTransactionResponse.model_validate(t) for t in transactions]


@router.post(
    "/transactions",
    response_model=List[StockTransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_stock_transactions(
    payload: StockTransactionCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    transactions = StockService.create_transactions(
        db, membership.company_id, user.user_id, payload
    )
    return [StockTransactionResponse.model_validate(t) for t in transactions]


@router.post(
    "/transfers",
    response_model=StockTransferResponse,
    status_code=status.HTTP_201_CREATED,
)
def transfer_stock(
    payload: StockTransferCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Move quantities from one warehouse to another"""
    return StockService.transfer(db, membership.company_id, user.user_id, payload)
