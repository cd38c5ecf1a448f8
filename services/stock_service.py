from typing import Dict, List, Optional, Tuple
from uuid import UUID
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from domain.models import StockItem, StockTransaction
from domain.enums import StockItemType, TransactionType
from domain.schemas.stock_schemas import (
    StockItemDetailResponse,
    StockItemResponse,
    StockSyncResponse,
    StockTransactionCreate,
    StockTransferCreate,
    StockTransferResponse,
    StockTransactionResponse,
    WarehouseStock,
)
from repositories import (
    IngredientRepository,
    ContainerRepository,
    WarehouseRepository,
    StockItemRepository,
    StockTransactionRepository,
)
from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.stock")

CONTAINER_UNIT = "EA"

# Sign applied to the requested quantity per movement type
_DIRECTION = {
    TransactionType.INCOMING: Decimal("1"),
    TransactionType.OUTGOING: Decimal("-1"),
    TransactionType.DISPOSAL: Decimal("-1"),
    TransactionType.ADJUSTMENT: Decimal("1"),
}


def _item_labels(db: Session, company_id: UUID, items: List[StockItem]) -> Dict[UUID, Tuple[str, Optional[str]]]:
    """(name, code) of the ingredient or container behind each stock item"""
    ingredient_ids = [i.item_id for i in items if i.item_type == StockItemType.INGREDIENT]
    container_ids = [i.item_id for i in items if i.item_type == StockItemType.CONTAINER]
    labels = {}
    for ing in IngredientRepository(db).get_many_for_company(company_id, ingredient_ids):
        labels[ing.ingredient_id] = (ing.name, ing.code_name)
    for con in ContainerRepository(db).get_many_for_company(company_id, container_ids):
        labels[con.container_id] = (con.name, con.code_name)
    return labels


def _to_response(item: StockItem, labels: Dict[UUID, Tuple[str, Optional[str]]]) -> StockItemResponse:
    name, code = labels.get(item.item_id, (None, None))
    return StockItemResponse(
        stock_item_id=item.stock_item_id,
        warehouse_id=item.warehouse_id,
        item_type=item.item_type,
        item_id=item.item_id,
        item_name=name,
        item_code=code,
        current_quantity=float(item.current_quantity or 0),
        unit=item.unit,
        updated_at=item.updated_at,
    )


class StockService:
    @staticmethod
    def list_items(
        db: Session,
        company_id: UUID,
        item_type: Optional[StockItemType] = None,
        warehouse_id: Optional[UUID] = None,
    ) -> List[StockItemResponse]:
        items = StockItemRepository(db).list_for_company(company_id, item_type, warehouse_id)
        labels = _item_labels(db, company_id, items)
        result = [_to_response(item, labels) for item in items]
        result.sort(key=lambda r: (r.item_type.value, r.item_name or ""))
        return result

    @staticmethod
    def get_item_detail(db: Session, company_id: UUID, stock_item_id: UUID) -> StockItemDetailResponse:
        """
        A stock item with the same ingredient or container in every warehouse.

        Warehouses without a row for the item report zero. The ten most recent
        movements across those rows are included.
        """
        repo = StockItemRepository(db)
        item = repo.get_for_company(company_id, stock_item_id)
        if not item:
            raise NotFoundError(f"Stock item not found: {stock_item_id}")

        rows = repo.list_for_item(company_id, item.item_type, item.item_id)
        by_warehouse = {r.warehouse_id: r for r in rows if r.warehouse_id is not None}
        warehouses = []
        for warehouse in WarehouseRepository(db).list_for_company(company_id):
            row = by_warehouse.get(warehouse.warehouse_id)
            warehouses.append(
                WarehouseStock(
                    warehouse_id=warehouse.warehouse_id,
                    warehouse_name=warehouse.name,
                    stock_item_id=row.stock_item_id if row else None,
                    quantity=float(row.current_quantity or 0) if row else 0.0,
                    updated_at=row.updated_at if row else None,
                )
            )

        total = sum((Decimal(r.current_quantity or 0) for r in rows), Decimal(0))
        recent = StockTransactionRepository(db).recent_for_items([r.stock_item_id for r in rows])
        return StockItemDetailResponse(
            item=_to_response(item, _item_labels(db, company_id, [item])),
            total_quantity=float(total),
            warehouses=warehouses,
            recent_transactions=[StockTransactionResponse.model_validate(t) for t in recent],
        )

    @staticmethod
    def sync_items(db: Session, company_id: UUID) -> StockSyncResponse:
        """
        Create zero-quantity stock rows in the default warehouse for every
        stock-graded ingredient and top-level container that has none.
        """
        warehouse = WarehouseRepository(db).get_default(company_id)
        if not warehouse:
            raise ServiceValidationError("No default warehouse; create a warehouse first")

        stock_repo = StockItemRepository(db)
        have_ingredients = stock_repo.existing_item_ids(company_id, StockItemType.INGREDIENT)
        have_containers = stock_repo.existing_item_ids(company_id, StockItemType.CONTAINER)

        ingredients_created = 0
        containers_created = 0
        try:
            for ing in IngredientRepository(db).list_stock_graded(company_id):
                if ing.ingredient_id in have_ingredients:
                    continue
                db.add(
                    StockItem(
                        company_id=company_id,
                        warehouse_id=warehouse.warehouse_id,
                        item_type=StockItemType.INGREDIENT,
                        item_id=ing.ingredient_id,
                        current_quantity=0,
                        unit=ing.unit,
                    )
                )
                ingredients_created += 1
            for con in ContainerRepository(db).list_top_level(company_id):
                if con.container_id in have_containers:
                    continue
                db.add(
                    StockItem(
                        company_id=company_id,
                        warehouse_id=warehouse.warehouse_id,
                        item_type=StockItemType.CONTAINER,
                        item_id=con.container_id,
                        current_quantity=0,
                        unit=CONTAINER_UNIT,
                    )
                )
                containers_created += 1
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Stock sync failed for {company_id}: {e}")
            raise

        logger.info(
            f"Stock sync for {company_id}: {ingredients_created} ingredient(s), "
            f"{containers_created} container(s) created"
        )
        return StockSyncResponse(
            warehouse_id=warehouse.warehouse_id,
            ingredients_created=ingredients_created,
            containers_created=containers_created,
        )

    @staticmethod
    def list_transactions(
        db: Session,
        company_id: UUID,
        stock_item_id: Optional[UUID] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[StockTransaction]:
        return StockTransactionRepository(db).list_for_company(
            company_id, stock_item_id, transaction_type
        )

    @staticmethod
    def _company_items(
        db: Session, company_id: UUID, stock_item_ids: List[UUID]
    ) -> Dict[UUID, StockItem]:
        items = {i.stock_item_id: i for i in StockItemRepository(db).get_many(stock_item_ids)}
        for stock_item_id in stock_item_ids:
            item = items.get(stock_item_id)
            if item is None or item.company_id != company_id:
                raise ForbiddenError(f"Stock item does not belong to this company: {stock_item_id}")
        return items

    @staticmethod
    def create_transactions(
        db: Session, company_id: UUID, user_id: str, data: StockTransactionCreate
    ) -> List[StockTransaction]:
        """
        Record a stock movement for each line and update on-hand quantities.

        incoming adds, outgoing and disposal subtract, adjustment adds the
        signed quantity.
        """
        ttype = data.transaction_type
        for line in data.items:
            if ttype == TransactionType.ADJUSTMENT:
                if line.quantity == 0:
                    raise ServiceValidationError("Adjustment quantity must not be zero")
            elif line.quantity <= 0:
                raise ServiceValidationError("Quantity must be greater than zero")

        items = StockService._company_items(db, company_id, [l.stock_item_id for l in data.items])
        when = data.transaction_date or datetime.now(timezone.utc)

        created = []
        try:
            for line in data.items:
                item = items[line.stock_item_id]
                delta = _DIRECTION[ttype] * line.quantity
                item.current_quantity = Decimal(item.current_quantity or 0) + delta
                tx = StockTransaction(
                    company_id=company_id,
                    stock_item_id=item.stock_item_id,
                    transaction_type=ttype,
                    quantity=line.quantity,
                    notes=data.notes,
                    created_by=user_id,
                    transaction_date=when,
                )
                db.add(tx)
                created.append(tx)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Stock transaction failed for {company_id}: {e}")
            raise

        logger.info(f"Recorded {len(created)} {ttype.value} transaction(s) for {company_id}")
        return created

    @staticmethod
    def transfer(
        db: Session, company_id: UUID, user_id: str, data: StockTransferCreate
    ) -> StockTransferResponse:
        """
        Move quantities between two warehouses of the company.

        Each line logs an outgoing transaction on the source item and an
        incoming one on the destination item, created there if missing.
        """
        if data.source_warehouse_id == data.destination_warehouse_id:
            raise ServiceValidationError("Source and destination warehouses must differ")
        warehouse_repo = WarehouseRepository(db)
        for warehouse_id in (data.source_warehouse_id, data.destination_warehouse_id):
            if not warehouse_repo.get_for_company(company_id, warehouse_id):
                raise ServiceValidationError(f"Warehouse not found in this company: {warehouse_id}")

        items = StockService._company_items(db, company_id, [l.stock_item_id for l in data.items])
        requested: Dict[UUID, Decimal] = {}
        for line in data.items:
            source = items[line.stock_item_id]
            if source.warehouse_id != data.source_warehouse_id:
                raise ServiceValidationError(
                    f"Stock item {source.stock_item_id} is not in the source warehouse"
                )
            if line.quantity <= 0:
                raise ServiceValidationError("Quantity must be greater than zero")
            requested[source.stock_item_id] = (
                requested.get(source.stock_item_id, Decimal(0)) + Decimal(line.quantity)
            )

        # lines for the same item draw on one balance
        for stock_item_id, total in requested.items():
            available = Decimal(items[stock_item_id].current_quantity or 0)
            if available < total:
                raise ServiceValidationError(
                    f"Insufficient stock for {stock_item_id}",
                    details={"available": float(available), "requested": float(total)},
                )

        stock_repo = StockItemRepository(db)
        transfer_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        transactions = []
        try:
            for line in data.items:
                source = items[line.stock_item_id]
                destination = stock_repo.find_in_warehouse(
                    company_id, source.item_type, source.item_id, data.destination_warehouse_id
                )
                if destination is None:
                    destination = stock_repo.create(
                        StockItem(
                            company_id=company_id,
                            warehouse_id=data.destination_warehouse_id,
                            item_type=source.item_type,
                            item_id=source.item_id,
                            current_quantity=0,
                            unit=source.unit,
                        ),
                        commit=False,
                    )
                source.current_quantity = Decimal(source.current_quantity) - line.quantity
                destination.current_quantity = (
                    Decimal(destination.current_quantity or 0) + line.quantity
                )
                for item, ttype in (
                    (source, TransactionType.OUTGOING),
                    (destination, TransactionType.INCOMING),
                ):
                    tx = StockTransaction(
                        company_id=company_id,
                        stock_item_id=item.stock_item_id,
                        transaction_type=ttype,
                        quantity=line.quantity,
                        reference_id=transfer_id,
                        reference_type="transfer",
                        notes=data.notes,
                        created_by=user_id,
                        transaction_date=now,
                    )
                    db.add(tx)
                    transactions.append(tx)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Stock transfer failed for {company_id}: {e}")
            raise

        logger.info(f"Transfer {transfer_id}: {len(data.items)} line(s) moved")
        return StockTransferResponse(
            transferred=len(data.items),
            transactions=[StockTransactionResponse.model_validate(t) for t in transactions],
        )
