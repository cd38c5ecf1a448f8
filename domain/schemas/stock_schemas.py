from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime, date
from uuid import UUID
from decimal import Decimal

from domain.enums import (
    StockItemType,
    TransactionType,
    AuditStatus,
    AuditItemStatus,
)


# ----- Warehouses -----


class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: Optional[str] = None
    is_default: bool = False


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = None
    is_default: Optional[bool] = None


class WarehouseResponse(BaseModel):
    warehouse_id: UUID
    company_id: UUID
    name: str
    location: Optional[str] = None
    is_default: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----- Stock items and transactions -----


class StockItemResponse(BaseModel):
    stock_item_id: UUID
    warehouse_id: Optional[UUID] = None
    item_type: StockItemType
    item_id: UUID
    item_name: Optional[str] = None
    item_code: Optional[str] = None
    current_quantity: float
    unit: Optional[str] = None
    updated_at: Optional[datetime] = None


class StockSyncResponse(BaseModel):
    warehouse_id: UUID
    ingredients_created: int
    containers_created: int


class StockLine(BaseModel):
    stock_item_id: UUID
    quantity: Decimal = Field(
        ..., description="Positive amount; signed for adjustment transactions"
    )


class StockTransactionCreate(BaseModel):
    transaction_type: TransactionType
    items: List[StockLine] = Field(..., min_length=1)
    notes: Optional[str] = None
    transaction_date: Optional[datetime] = None


class StockTransactionResponse(BaseModel):
    transaction_id: UUID
    stock_item_id: UUID
    transaction_type: TransactionType
    quantity: float
    reference_id: Optional[UUID] = None
    reference_type: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    transaction_date: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StockTransferCreate(BaseModel):
    source_warehouse_id: UUID
    destination_warehouse_id: UUID
    items: List[StockLine] = Field(..., min_length=1)
    notes: Optional[str] = None


class StockTransferResponse(BaseModel):
    transferred: int
    transactions: List[StockTransactionResponse]


class WarehouseStock(BaseModel):
    warehouse_id: UUID
    warehouse_name: str
    stock_item_id: Optional[UUID] = None
    quantity: float
    updated_at: Optional[datetime] = None


class StockItemDetailResponse(BaseModel):
    """One stocked item with its quantity in every warehouse of the company"""

    item: StockItemResponse
    total_quantity: float
    warehouses: List[WarehouseStock]
    recent_transactions: List[StockTransactionResponse]


# ----- Stock audits -----


class StockAuditCreate(BaseModel):
    """Name and audit date are checked by the service (400 when missing)"""

    name: Optional[str] = None
    description: Optional[str] = None
    audit_date: Optional[date] = None
    warehouse_id: Optional[UUID] = None
    item_types: List[StockItemType] = Field(
        default_factory=lambda: [StockItemType.INGREDIENT, StockItemType.CONTAINER]
    )


class StockAuditResponse(BaseModel):
    audit_id: UUID
    company_id: UUID
    warehouse_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    audit_date: date
    status: AuditStatus
    created_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StockAuditCreated(BaseModel):
    audit: StockAuditResponse
    items_count: int


class StockAuditItemResponse(BaseModel):
    audit_item_id: UUID
    audit_id: UUID
    stock_item_id: UUID
    item_type: StockItemType
    item_name: str
    item_code: Optional[str] = None
    unit: Optional[str] = None
    book_quantity: float
    actual_quantity: Optional[float] = None
    difference: Optional[float] = None
    status: AuditItemStatus
    notes: Optional[str] = None
    counted_by: Optional[str] = None
    counted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    total: int
    page: int
    page_size: int
    page_count: int


class StockAuditListResponse(BaseModel):
    audits: List[StockAuditResponse]
    pagination: Pagination


class StockAuditStats(BaseModel):
    total_items: int
    completed_items: int
    pending_items: int
    discrepancy_items: int
    completion_rate: int


class StockAuditDetailResponse(BaseModel):
    audit: StockAuditResponse
    items: List[StockAuditItemResponse]
    stats: StockAuditStats
    warehouse: Optional[WarehouseResponse] = None
    pagination: Pagination


class StockAuditItemUpdate(BaseModel):
    actual_quantity: Decimal = Field(..., ge=0)
    notes: Optional[str] = None


class StockAuditItemBatchEntry(StockAuditItemUpdate):
    item_id: UUID


class StockAuditItemBatchUpdate(BaseModel):
    items: List[StockAuditItemBatchEntry] = Field(..., min_length=1)


class StockAuditItemBatchResponse(BaseModel):
    updated_count: int
    items: List[StockAuditItemResponse]


class StockAuditAction(BaseModel):
    action: Literal["complete", "apply_differences", "cancel"]
    apply_differences: bool = False


class StockAuditActionResponse(BaseModel):
    audit: StockAuditResponse
    applied_differences: bool
    applied_count: int
    action: str
