"""
Stock Repository - Data access for warehouses, stock items, stock
transactions and stock audits
"""

from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_, func

from repositories.base import BaseRepository
from domain.models import (
    Warehouse,
    StockItem,
    StockTransaction,
    StockAudit,
    StockAuditItem,
)
from domain.enums import StockItemType, TransactionType, AuditStatus, AuditItemStatus


class WarehouseRepository(BaseRepository[Warehouse]):
    """Repository for warehouses"""

    def __init__(self, db: Session):
        super().__init__(db, Warehouse)

    def get_by_id(self, warehouse_id: UUID) -> Optional[Warehouse]:
        return (
            self.db.query(Warehouse)
            .filter(Warehouse.warehouse_id == warehouse_id)
            .first()
        )

    def get_for_company(
        self, company_id: UUID, warehouse_id: UUID
    ) -> Optional[Warehouse]:
        return (
            self.db.query(Warehouse)
            .filter(
                and_(
                    Warehouse.company_id == company_id,
                    Warehouse.warehouse_id == warehouse_id,
                )
            )
            .first()
        )

    def get_default(self, company_id: UUID) -> Optional[Warehouse]:
        return (
            self.db.query(Warehouse)
            .filter(
                and_(Warehouse.company_id == company_id, Warehouse.is_default.is_(True))
            )
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[Warehouse]:
        return (
            self.db.query(Warehouse)
            .filter(Warehouse.company_id == company_id)
            .order_by(Warehouse.is_default.desc(), Warehouse.name)
            .all()
        )

    def count_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(func.count(Warehouse.warehouse_id))
            .filter(Warehouse.company_id == company_id)
            .scalar()
            or 0
        )

    def clear_default(self, company_id: UUID, keep_id: Optional[UUID] = None) -> None:
        query = self.db.query(Warehouse).filter(
            and_(Warehouse.company_id == company_id, Warehouse.is_default.is_(True))
        )
        if keep_id is not None:
            query = query.filter(Warehouse.warehouse_id != keep_id)
        query.update({Warehouse.is_default: False}, synchronize_session="fetch")

    def holds_stock(self, warehouse_id: UUID) -> bool:
        return (
            self.db.query(StockItem.stock_item_id)
            .filter(
                and_(
                    StockItem.warehouse_id == warehouse_id,
                    StockItem.current_quantity > 0,
                )
            )
            .first()
            is not None
        )


class StockItemRepository(BaseRepository[StockItem]):
    """Repository for stock items"""

    def __init__(self, db: Session):
        super().__init__(db, StockItem)

    def get_by_id(self, stock_item_id: UUID) -> Optional[StockItem]:
        return (
            self.db.query(StockItem)
            .filter(StockItem.stock_item_id == stock_item_id)
            .first()
        )

    def get_many(self, stock_item_ids: List[UUID]) -> List[StockItem]:
        if not stock_item_ids:
            return []
        return (
            self.db.query(StockItem)
            .filter(StockItem.stock_item_id.in_(stock_item_ids))
            .all()
        )

    def get_for_company(self, company_id: UUID, stock_item_id: UUID) -> Optional[StockItem]:
        return (
            self.db.query(StockItem)
            .filter(
                and_(
                    StockItem.company_id == company_id,
                    StockItem.stock_item_id == stock_item_id,
                )
            )
            .first()
        )

    def list_for_item(
        self, company_id: UUID, item_type: StockItemType, item_id: UUID
    ) -> List[StockItem]:
        """Rows for one ingredient or container across all warehouses"""
        return (
            self.db.query(StockItem)
            .filter(
                and_(
                    StockItem.company_id == company_id,
                    StockItem.item_type == item_type,
                    StockItem.item_id == item_id,
                )
            )
            .all()
        )

    def list_for_company(
        self,
        company_id: UUID,
        item_type: Optional[StockItemType] = None,
        warehouse_id: Optional[UUID] = None,
    ) -> List[StockItem]:
        query = self.db.query(StockItem).filter(StockItem.company_id == company_id)
        if item_type is not None:
            query = query.filter(StockItem.item_type == item_type)
        if warehouse_id is not None:
            query = query.filter(StockItem.warehouse_id == warehouse_id)
        return query.order_by(StockItem.created_at).all()

    def find(
        self,
        company_id: UUID,
        item_type: StockItemType,
        item_id: UUID,
        warehouse_id: Optional[UUID] = None,
    ) -> Optional[StockItem]:
        """Stock row for an item, preferring ``warehouse_id`` when given"""
        query = self.db.query(StockItem).filter(
            and_(
                StockItem.company_id == company_id,
                StockItem.item_type == item_type,
                StockItem.item_id == item_id,
            )
        )
        if warehouse_id is not None:
            in_warehouse = query.filter(StockItem.warehouse_id == warehouse_id).first()
            if in_warehouse:
                return in_warehouse
        return query.order_by(StockItem.created_at).first()

    def find_in_warehouse(
        self, company_id: UUID, item_type: StockItemType, item_id: UUID, warehouse_id: UUID
    ) -> Optional[StockItem]:
        return (
            self.db.query(StockItem)
            .filter(
                and_(
                    StockItem.company_id == company_id,
                    StockItem.item_type == item_type,
                    StockItem.item_id == item_id,
                    StockItem.warehouse_id == warehouse_id,
                )
            )
            .first()
        )

    def existing_item_ids(self, company_id: UUID, item_type: StockItemType) -> set:
        rows = (
            self.db.query(StockItem.item_id)
            .filter(
                and_(StockItem.company_id == company_id, StockItem.item_type == item_type)
            )
            .all()
        )
        return {row[0] for row in rows}


class StockTransactionRepository(BaseRepository[StockTransaction]):
    """Repository for the stock movement ledger"""

    def __init__(self, db: Session):
        super().__init__(db, StockTransaction)

    def get_by_id(self, transaction_id: UUID) -> Optional[StockTransaction]:
        return (
            self.db.query(StockTransaction)
            .filter(StockTransaction.transaction_id == transaction_id)
            .first()
        )

    def list_for_company(
        self,
        company_id: UUID,
        stock_item_id: Optional[UUID] = None,
        transaction_type: Optional[TransactionType] = None,
        limit: int = 200,
    ) -> List[StockTransaction]:
        query = self.db.query(StockTransaction).filter(
            StockTransaction.company_id == company_id
        )
        if stock_item_id is not None:
            query = query.filter(StockTransaction.stock_item_id == stock_item_id)
        if transaction_type is not None:
            query = query.filter(StockTransaction.transaction_type == transaction_type)
        return (
            query.order_by(StockTransaction.transaction_date.desc()).limit(limit).all()
        )

    def recent_for_items(self, stock_item_ids: List[UUID], limit: int = 10) -> List[StockTransaction]:
        if not stock_item_ids:
            return []
        return (
            self.db.query(StockTransaction)
            .filter(StockTransaction.stock_item_id.in_(stock_item_ids))
            .order_by(StockTransaction.transaction_date.desc())
            .limit(limit)
            .all()
        )


class StockAuditRepository(BaseRepository[StockAudit]):
    """Repository for stock audits and their items"""

    def __init__(self, db: Session):
        super().__init__(db, StockAudit)

    def get_by_id(self, audit_id: UUID) -> Optional[StockAudit]:
        return self.db.query(StockAudit).filter(StockAudit.audit_id == audit_id).first()

    def get_for_company(self, company_id: UUID, audit_id: UUID) -> Optional[StockAudit]:
        return (
            self.db.query(StockAudit)
            .filter(
                and_(StockAudit.company_id == company_id, StockAudit.audit_id == audit_id)
            )
            .first()
        )

    def page_for_company(
        self,
        company_id: UUID,
        status: Optional[AuditStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[StockAudit], int]:
        query = self.db.query(StockAudit).filter(StockAudit.company_id == company_id)
        if status is not None:
            query = query.filter(StockAudit.status == status)
        total = query.count()
        audits = (
            query.order_by(StockAudit.created_at.desc()).offset(offset).limit(limit).all()
        )
        return audits, total

    def get_item(self, audit_id: UUID, audit_item_id: UUID) -> Optional[StockAuditItem]:
        return (
            self.db.query(StockAuditItem)
            .filter(
                and_(
                    StockAuditItem.audit_id == audit_id,
                    StockAuditItem.audit_item_id == audit_item_id,
                )
            )
            .first()
        )

    def get_items(
        self, audit_id: UUID, audit_item_ids: List[UUID]
    ) -> List[StockAuditItem]:
        if not audit_item_ids:
            return []
        return (
            self.db.query(StockAuditItem)
            .filter(
                and_(
                    StockAuditItem.audit_id == audit_id,
                    StockAuditItem.audit_item_id.in_(audit_item_ids),
                )
            )
            .all()
        )

    def page_items(
        self,
        audit_id: UUID,
        item_type: Optional[StockItemType] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[StockAuditItem], int]:
        query = self.db.query(StockAuditItem).filter(StockAuditItem.audit_id == audit_id)
        if item_type is not None:
            query = query.filter(StockAuditItem.item_type == item_type)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(StockAuditItem.item_name).like(pattern),
                    func.lower(StockAuditItem.item_code).like(pattern),
                )
            )
        total = query.count()
        items = (
            query.order_by(StockAuditItem.item_type, StockAuditItem.item_name)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def status_counts(self, audit_id: UUID) -> dict:
        """Number of audit items per AuditItemStatus"""
        rows = (
            self.db.query(StockAuditItem.status, func.count(StockAuditItem.audit_item_id))
            .filter(StockAuditItem.audit_id == audit_id)
            .group_by(StockAuditItem.status)
            .all()
        )
        counts = {status: 0 for status in AuditItemStatus}
        for status, count in rows:
            counts[AuditItemStatus(status)] = count
        return counts

    def counted_items(self, audit_id: UUID) -> List[StockAuditItem]:
        """Items that have been counted and can be applied to stock"""
        return (
            self.db.query(StockAuditItem)
            .filter(
                and_(
                    StockAuditItem.audit_id == audit_id,
                    StockAuditItem.status.in_(
                        [AuditItemStatus.COMPLETED, AuditItemStatus.DISCREPANCY]
                    ),
                    StockAuditItem.actual_quantity.isnot(None),
                )
            )
            .all()
        )
