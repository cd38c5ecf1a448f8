from typing import List, Optional
from uuid import UUID
from datetime import datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
import math
from sqlalchemy.orm import Session
import logging

from domain.models import StockAudit, StockAuditItem, StockItem, StockTransaction
from domain.enums import (
    AuditStatus,
    AuditItemStatus,
    StockItemType,
    TransactionType,
)
from domain.schemas.stock_schemas import (
    StockAuditCreate,
    StockAuditCreated,
    StockAuditResponse,
    StockAuditListResponse,
    StockAuditDetailResponse,
    StockAuditItemResponse,
    StockAuditItemUpdate,
    StockAuditItemBatchUpdate,
    StockAuditItemBatchResponse,
    StockAuditStats,
    StockAuditAction,
    StockAuditActionResponse,
    WarehouseResponse,
    Pagination,
)
from repositories import (
    IngredientRepository,
    ContainerRepository,
    WarehouseRepository,
    StockItemRepository,
    StockAuditRepository,
)
from services.stock_service import CONTAINER_UNIT
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.audits")

DEFAULT_INGREDIENT_UNIT = "EA"


def _pagination(total: int, page: int, page_size: int) -> Pagination:
    return Pagination(
        total=total,
        page=page,
        page_size=page_size,
        page_count=math.ceil(total / page_size) if page_size else 0,
    )


def _completion_rate(counted: int, total: int) -> int:
    if not total:
        return 0
    rate = Decimal(counted) * 100 / Decimal(total)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class AuditService:
    @staticmethod
    def list_audits(
        db: Session,
        company_id: UUID,
        status: Optional[AuditStatus] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> StockAuditListResponse:
        page = max(page, 1)
        audits, total = StockAuditRepository(db).page_for_company(
            company_id, status, offset=(page - 1) * page_size, limit=page_size
        )
        return StockAuditListResponse(
            audits=[StockAuditResponse.model_validate(a) for a in audits],
            pagination=_pagination(total, page, page_size),
        )

    @staticmethod
    def get_audit(db: Session, company_id: UUID, audit_id: UUID) -> StockAudit:
        audit = StockAuditRepository(db).get_for_company(company_id, audit_id)
        if not audit:
            raise NotFoundError(f"Stock audit not found: {audit_id}")
        return audit

    # ----- creation -----

    @staticmethod
    def _stock_item_for(
        db: Session,
        company_id: UUID,
        item_type: StockItemType,
        item_id: UUID,
        warehouse_id: UUID,
        unit: str,
    ) -> StockItem:
        repo = StockItemRepository(db)
        stock = repo.find(company_id, item_type, item_id, warehouse_id)
        if stock is None:
            stock = repo.create(
                StockItem(
                    company_id=company_id,
                    warehouse_id=warehouse_id,
                    item_type=item_type,
                    item_id=item_id,
                    current_quantity=0,
                    unit=unit,
                ),
                commit=False,
            )
        return stock

    @staticmethod
    def _container_stock(
        db: Session, company_id: UUID, container, warehouse_id: UUID
    ) -> StockItem:
        """
        Stock row counted for a top-level container: the child container
        holding the most stock, else the container's own row.
        """
        stock_repo = StockItemRepository(db)
        best: Optional[StockItem] = None
        for child in ContainerRepository(db).list_children(container.container_id):
            candidate = stock_repo.find(
                company_id, StockItemType.CONTAINER, child.container_id, warehouse_id
            )
            if candidate is None:
                continue
            if best is None or Decimal(candidate.current_quantity or 0) > Decimal(
                best.current_quantity or 0
            ):
                best = candidate
        if best is not None:
            return best
        return AuditService._stock_item_for(
            db,
            company_id,
            StockItemType.CONTAINER,
            container.container_id,
            warehouse_id,
            CONTAINER_UNIT,
        )

    @staticmethod
    def create_audit(
        db: Session, company_id: UUID, user_id: str, data: StockAuditCreate
    ) -> StockAuditCreated:
        """
        Open an audit and snapshot the book quantity of every audited item.

        Ingredients with a stock grade and top-level containers are audited.
        Missing stock rows are created at zero. Runs in one transaction.
        """
        name = (data.name or "").strip()
        if not name:
            raise ServiceValidationError("Audit name is required")
        if data.audit_date is None:
            raise ServiceValidationError("Audit date is required")

        warehouse_repo = WarehouseRepository(db)
        if data.warehouse_id is not None:
            warehouse = warehouse_repo.get_for_company(company_id, data.warehouse_id)
            if not warehouse:
                raise ServiceValidationError(f"Warehouse not found: {data.warehouse_id}")
        else:
            warehouse = warehouse_repo.get_default(company_id)
            if not warehouse:
                raise ServiceValidationError(
                    "No default warehouse; create a warehouse before auditing"
                )

        item_types = set(data.item_types)
        try:
            audit = StockAudit(
                company_id=company_id,
                warehouse_id=warehouse.warehouse_id,
                name=name,
                description=(data.description or "").strip() or None,
                audit_date=data.audit_date,
                status=AuditStatus.IN_PROGRESS,
                created_by=user_id,
            )
            db.add(audit)
            db.flush()

            items = []
            if StockItemType.INGREDIENT in item_types:
                for ing in IngredientRepository(db).list_stock_graded(company_id):
                    unit = ing.unit or DEFAULT_INGREDIENT_UNIT
                    stock = AuditService._stock_item_for(
                        db,
                        company_id,
                        StockItemType.INGREDIENT,
                        ing.ingredient_id,
                        warehouse.warehouse_id,
                        unit,
                    )
                    items.append(
                        StockAuditItem(
                            audit_id=audit.audit_id,
                            stock_item_id=stock.stock_item_id,
                            item_type=StockItemType.INGREDIENT,
                            item_name=ing.name,
                            item_code=ing.code_name,
                            unit=unit,
                            book_quantity=stock.current_quantity or 0,
                        )
                    )
            if StockItemType.CONTAINER in item_types:
                for con in ContainerRepository(db).list_top_level(company_id):
                    stock = AuditService._container_stock(
                        db, company_id, con, warehouse.warehouse_id
                    )
                    items.append(
                        StockAuditItem(
                            audit_id=audit.audit_id,
                            stock_item_id=stock.stock_item_id,
                            item_type=StockItemType.CONTAINER,
                            item_name=con.name,
                            item_code=con.code_name,
                            unit=CONTAINER_UNIT,
                            book_quantity=stock.current_quantity or 0,
                        )
                    )
            db.add_all(items)
            db.commit()
            db.refresh(audit)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create stock audit for {company_id}: {e}")
            raise

        logger.info(f"Stock audit {audit.audit_id} opened with {len(items)} item(s)")
        return StockAuditCreated(
            audit=StockAuditResponse.model_validate(audit), items_count=len(items)
        )

    # ----- detail -----

    @staticmethod
    def get_audit_detail(
        db: Session,
        company_id: UUID,
        audit_id: UUID,
        item_type: Optional[StockItemType] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> StockAuditDetailResponse:
        audit = AuditService.get_audit(db, company_id, audit_id)
        repo = StockAuditRepository(db)
        page = max(page, 1)
        items, total = repo.page_items(
            audit_id,
            item_type,
            (search or "").strip() or None,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

        counts = repo.status_counts(audit_id)
        completed = counts[AuditItemStatus.COMPLETED]
        discrepancy = counts[AuditItemStatus.DISCREPANCY]
        all_items = sum(counts.values())
        stats = StockAuditStats(
            total_items=all_items,
            completed_items=completed,
            pending_items=counts[AuditItemStatus.PENDING],
            discrepancy_items=discrepancy,
            completion_rate=_completion_rate(completed + discrepancy, all_items),
        )

        return StockAuditDetailResponse(
            audit=StockAuditResponse.model_validate(audit),
            items=[StockAuditItemResponse.model_validate(i) for i in items],
            stats=stats,
            warehouse=(
                WarehouseResponse.model_validate(audit.warehouse) if audit.warehouse else None
            ),
            pagination=_pagination(total, page, page_size),
        )

    # ----- counting -----

    @staticmethod
    def _require_open(audit: StockAudit) -> None:
        if audit.status == AuditStatus.COMPLETED:
            raise ServiceValidationError("Audit is already completed")
        if audit.status == AuditStatus.CANCELLED:
            raise ServiceValidationError("Audit has been cancelled")

    @staticmethod
    def _record_count(
        item: StockAuditItem, actual: Decimal, notes: Optional[str], user_id: str
    ) -> None:
        item.actual_quantity = actual
        item.difference = actual - Decimal(item.book_quantity or 0)
        item.status = (
            AuditItemStatus.COMPLETED if item.difference == 0 else AuditItemStatus.DISCREPANCY
        )
        if notes is not None:
            item.notes = notes
        item.counted_by = user_id
        item.counted_at = datetime.now(timezone.utc)

    @staticmethod
    def update_item(
        db: Session,
        company_id: UUID,
        audit_id: UUID,
        audit_item_id: UUID,
        user_id: str,
        data: StockAuditItemUpdate,
    ) -> StockAuditItem:
        audit = AuditService.get_audit(db, company_id, audit_id)
        AuditService._require_open(audit)
        item = StockAuditRepository(db).get_item(audit_id, audit_item_id)
        if not item:
            raise NotFoundError(f"Audit item not found: {audit_item_id}")
        AuditService._record_count(item, data.actual_quantity, data.notes, user_id)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_items(
        db: Session,
        company_id: UUID,
        audit_id: UUID,
        user_id: str,
        data: StockAuditItemBatchUpdate,
    ) -> StockAuditItemBatchResponse:
        audit = AuditService.get_audit(db, company_id, audit_id)
        AuditService._require_open(audit)

        ids = [entry.item_id for entry in data.items]
        items = {i.audit_item_id: i for i in StockAuditRepository(db).get_items(audit_id, ids)}
        missing = [str(i) for i in ids if i not in items]
        if missing:
            raise NotFoundError("Audit items not found", details={"item_ids": missing})

        try:
            for entry in data.items:
                AuditService._record_count(
                    items[entry.item_id], entry.actual_quantity, entry.notes, user_id
                )
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Batch count failed for audit {audit_id}: {e}")
            raise

        return StockAuditItemBatchResponse(
            updated_count=len(items),
            items=[StockAuditItemResponse.model_validate(i) for i in items.values()],
        )

    # ----- lifecycle -----

    @staticmethod
    def _apply_differences(db: Session, audit: StockAudit, user_id: str) -> int:
        """Set each counted stock item to its actual quantity; returns items applied"""
        counted = StockAuditRepository(db).counted_items(audit.audit_id)
        stock_items = {
            s.stock_item_id: s
            for s in StockItemRepository(db).get_many([i.stock_item_id for i in counted])
        }
        when = datetime.combine(audit.audit_date, time.min, tzinfo=timezone.utc)
        for item in counted:
            stock = stock_items.get(item.stock_item_id)
            if stock is None or stock.company_id != audit.company_id:
                logger.warning(f"Skipping audit item {item.audit_item_id}: stock row missing")
                continue
            stock.current_quantity = item.actual_quantity
            if item.difference:
                db.add(
                    StockTransaction(
                        company_id=audit.company_id,
                        stock_item_id=stock.stock_item_id,
                        transaction_type=TransactionType.ADJUSTMENT,
                        quantity=item.difference,
                        reference_id=audit.audit_id,
                        reference_type="stock_audit",
                        notes=f"Stock audit: {audit.name}",
                        created_by=user_id,
                        transaction_date=when,
                    )
                )
        return len(counted)

    @staticmethod
    def perform_action(
        db: Session,
        company_id: UUID,
        audit_id: UUID,
        user_id: str,
        data: StockAuditAction,
    ) -> StockAuditActionResponse:
        """
        Complete, cancel, or apply the counted differences of an audit.

        ``apply_differences`` on its own needs a completed audit; combined
        with ``complete`` it is applied as part of completing.
        """
        audit = AuditService.get_audit(db, company_id, audit_id)
        apply = data.apply_differences or data.action == "apply_differences"

        if data.action == "complete":
            if audit.status == AuditStatus.COMPLETED:
                raise ServiceValidationError("Audit is already completed")
            if audit.status == AuditStatus.CANCELLED:
                raise ServiceValidationError("A cancelled audit cannot be completed")
        elif data.action == "apply_differences":
            if audit.status != AuditStatus.COMPLETED:
                raise ServiceValidationError("Complete the audit before applying differences")
        elif data.action == "cancel":
            if audit.status == AuditStatus.COMPLETED:
                raise ServiceValidationError("A completed audit cannot be cancelled")
            apply = False

        applied_count = 0
        try:
            if apply:
                applied_count = AuditService._apply_differences(db, audit, user_id)
            if data.action == "complete":
                audit.status = AuditStatus.COMPLETED
                audit.completed_at = datetime.now(timezone.utc)
            elif data.action == "cancel":
                audit.status = AuditStatus.CANCELLED
            db.commit()
            db.refresh(audit)
        except Exception as e:
            db.rollback()
            logger.error(f"Audit action {data.action} failed for {audit_id}: {e}")
            raise

        logger.info(
            f"Audit {audit_id}: {data.action} (applied {applied_count} item(s))"
        )
        return StockAuditActionResponse(
            audit=StockAuditResponse.model_validate(audit),
            applied_differences=apply,
            applied_count=applied_count,
            action=data.action,
        )

    @staticmethod
    def delete_audit(db: Session, company_id: UUID, audit_id: UUID) -> None:
        audit = AuditService.get_audit(db, company_id, audit_id)
        if audit.status == AuditStatus.COMPLETED:
            raise ServiceValidationError("A completed audit cannot be deleted")
        StockAuditRepository(db).delete(audit)
        logger.info(f"Stock audit {audit_id} deleted")
