from typing import List
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import Warehouse
from domain.schemas.stock_schemas import WarehouseCreate, WarehouseUpdate
from repositories import WarehouseRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.warehouses")


class WarehouseService:
    @staticmethod
    def list_warehouses(db: Session, company_id: UUID) -> List[Warehouse]:
        return WarehouseRepository(db).list_for_company(company_id)

    @staticmethod
    def get_warehouse(db: Session, company_id: UUID, warehouse_id: UUID) -> Warehouse:
        warehouse = WarehouseRepository(db).get_for_company(company_id, warehouse_id)
        if not warehouse:
            raise NotFoundError(f"Warehouse not found: {warehouse_id}")
        return warehouse

    @staticmethod
    def create_warehouse(db: Session, company_id: UUID, data: WarehouseCreate) -> Warehouse:
        """Create a warehouse. A company's first warehouse is always the default."""
        repo = WarehouseRepository(db)
        is_default = data.is_default or repo.count_for_company(company_id) == 0
        try:
            if is_default:
                repo.clear_default(company_id)
            warehouse = repo.create(
                Warehouse(
                    company_id=company_id,
                    name=data.name.strip(),
                    location=data.location,
                    is_default=is_default,
                ),
                commit=False,
            )
            db.commit()
            db.refresh(warehouse)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create warehouse for {company_id}: {e}")
            raise
        logger.info(f"Warehouse {warehouse.warehouse_id} created (default={is_default})")
        return warehouse

    @staticmethod
    def update_warehouse(
        db: Session, company_id: UUID, warehouse_id: UUID, data: WarehouseUpdate
    ) -> Warehouse:
        repo = WarehouseRepository(db)
        warehouse = WarehouseService.get_warehouse(db, company_id, warehouse_id)
        if data.is_default is False and warehouse.is_default:
            raise ServiceValidationError(
                "Choose another default warehouse instead of unsetting this one"
            )
        if data.is_default:
            repo.clear_default(company_id, keep_id=warehouse_id)
            warehouse.is_default = True
        if data.name is not None:
            warehouse.name = data.name.strip()
        if data.location is not None:
            warehouse.location = data.location
        return repo.update(warehouse)

    @staticmethod
    def delete_warehouse(db: Session, company_id: UUID, warehouse_id: UUID) -> None:
        repo = WarehouseRepository(db)
        warehouse = WarehouseService.get_warehouse(db, company_id, warehouse_id)
        if warehouse.is_default:
            raise ServiceValidationError("The default warehouse cannot be deleted")
        if repo.holds_stock(warehouse_id):
            raise ServiceValidationError("Warehouse still holds stock")
        repo.delete(warehouse)
        logger.info(f"Warehouse {warehouse_id} deleted from {company_id}")
