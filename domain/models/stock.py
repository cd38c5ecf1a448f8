"""
Warehouse, stock and stock audit models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Boolean,
    Date,
    Numeric,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, enum_column
from domain.enums import (
    StockItemType,
    TransactionType,
    AuditStatus,
    AuditItemStatus,
)


class Warehouse(Base):
    """Physical storage location of a company"""

    __tablename__ = "warehouse"

    warehouse_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    location = Column(Text)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class StockItem(Base):
    """On-hand quantity of an ingredient or container in a warehouse"""

    __tablename__ = "stock_item"

    stock_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    warehouse_id = Column(
        Uuid, ForeignKey("warehouse.warehouse_id", ondelete="SET NULL"), nullable=True
    )
    item_type = Column(enum_column(StockItemType), nullable=False)
    # ingredient_id or container_id depending on item_type
    item_id = Column(Uuid, nullable=False, index=True)
    current_quantity = Column(Numeric(14, 3), nullable=False, default=0)
    unit = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    warehouse = relationship("Warehouse")


class StockTransaction(Base):
    """Ledger entry of a stock movement"""

    __tablename__ = "stock_transaction"

    transaction_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    stock_item_id = Column(
        Uuid, ForeignKey("stock_item.stock_item_id", ondelete="CASCADE"), nullable=False
    )
    transaction_type = Column(enum_column(TransactionType), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    reference_id = Column(Uuid)
    reference_type = Column(Text)
    notes = Column(Text)
    created_by = Column(Text)
    transaction_date = Column(TIMESTAMP(timezone=True), server_default=func.now())

    stock_item = relationship("StockItem")


class StockAudit(Base):
    """Physical count session for one warehouse"""

    __tablename__ = "stock_audit"

    audit_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    warehouse_id = Column(
        Uuid, ForeignKey("warehouse.warehouse_id", ondelete="SET NULL"), nullable=True
    )
    name = Column(Text, nullable=False)
    description = Column(Text)
    audit_date = Column(Date, nullable=False)
    status = Column(
        enum_column(AuditStatus), nullable=False, default=AuditStatus.IN_PROGRESS
    )
    created_by = Column(Text)
    completed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    warehouse = relationship("Warehouse")
    items = relationship(
        "StockAuditItem", back_populates="audit", cascade="all, delete-orphan"
    )


class StockAuditItem(Base):
    """Book versus counted quantity of one stock item within an audit"""

    __tablename__ = "stock_audit_item"

    audit_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    audit_id = Column(
        Uuid, ForeignKey("stock_audit.audit_id", ondelete="CASCADE"), nullable=False
    )
    stock_item_id = Column(
        Uuid, ForeignKey("stock_item.stock_item_id", ondelete="CASCADE"), nullable=False
    )
    item_type = Column(enum_column(StockItemType), nullable=False)
    item_name = Column(Text, nullable=False)
    item_code = Column(Text)
    unit = Column(Text)
    book_quantity = Column(Numeric(14, 3), nullable=False, default=0)
    actual_quantity = Column(Numeric(14, 3))
    difference = Column(Numeric(14, 3))
    status = Column(
        enum_column(AuditItemStatus),
        nullable=False,
        default=AuditItemStatus.PENDING,
    )
    notes = Column(Text)
    counted_by = Column(Text)
    counted_at = Column(TIMESTAMP(timezone=True))

    audit = relationship("StockAudit", back_populates="items")
    stock_item = relationship("StockItem")
