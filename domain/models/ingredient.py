"""
Ingredient catalog models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Integer,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Supplier(Base):
    """Vendor ingredients are bought from"""

    __tablename__ = "supplier"
    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_supplier_company_name"),
    )

    supplier_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    contact = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Ingredient(Base):
    """Company-specific ingredient master row"""

    __tablename__ = "ingredient"
    __table_args__ = (
        UniqueConstraint("company_id", "code_name", name="uq_ingredient_company_code_name"),
    )

    ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    code_name = Column(Text)
    supplier_id = Column(
        Uuid, ForeignKey("supplier.supplier_id", ondelete="SET NULL"), nullable=True
    )
    package_amount = Column(Numeric(12, 3), nullable=False)
    unit = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    items_per_box = Column(Integer)
    stock_grade = Column(Text)
    memo1 = Column(Text)
    origin = Column(Text)
    calories = Column(Numeric(10, 2))
    protein = Column(Numeric(10, 2))
    fat = Column(Numeric(10, 2))
    carbs = Column(Numeric(10, 2))
    allergens = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    supplier = relationship("Supplier")
    price_history = relationship(
        "IngredientPriceHistory",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        order_by="IngredientPriceHistory.recorded_at",
    )


class IngredientPriceHistory(Base):
    """Price of an ingredient at a point in time"""

    __tablename__ = "ingredient_price_history"

    history_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    ingredient_id = Column(
        Uuid,
        ForeignKey("ingredient.ingredient_id", ondelete="CASCADE"),
        nullable=False,
    )
    price = Column(Numeric(12, 2), nullable=False)
    recorded_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    ingredient = relationship("Ingredient", back_populates="price_history")
