"""
Containers, menus and menu costing models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class ContainerCategory(Base):
    """Company-defined grouping for containers"""

    __tablename__ = "container_category"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_container_category_company_code"),
    )

    category_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    code = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Container(Base):
    """Packaging a menu is served in; may be grouped under a parent"""

    __tablename__ = "container"
    __table_args__ = (
        UniqueConstraint("company_id", "code_name", name="uq_container_company_code_name"),
    )

    container_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    code_name = Column(Text)
    description = Column(Text)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    parent_container_id = Column(
        Uuid, ForeignKey("container.container_id", ondelete="SET NULL"), nullable=True
    )
    category_id = Column(
        Uuid,
        ForeignKey("container_category.category_id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    children = relationship("Container")


class Menu(Base):
    """A sellable dish with its computed cost price"""

    __tablename__ = "menu"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_menu_company_code"),
    )

    menu_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    code = Column(Text)
    description = Column(Text)
    recipe = Column(Text)
    cost_price = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    containers = relationship(
        "MenuContainer", back_populates="menu", cascade="all, delete-orphan"
    )
    price_history = relationship(
        "MenuPriceHistory",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuPriceHistory.recorded_at",
    )


class MenuContainer(Base):
    """A container variant of a menu"""

    __tablename__ = "menu_container"

    menu_container_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_id = Column(Uuid, ForeignKey("menu.menu_id", ondelete="CASCADE"), nullable=False)
    container_id = Column(
        Uuid, ForeignKey("container.container_id", ondelete="CASCADE"), nullable=False
    )

    menu = relationship("Menu", back_populates="containers")
    container = relationship("Container")
    ingredients = relationship(
        "MenuContainerIngredient",
        back_populates="menu_container",
        cascade="all, delete-orphan",
    )


class MenuContainerIngredient(Base):
    """Amount of one ingredient used in a menu container"""

    __tablename__ = "menu_container_ingredient"

    menu_container_ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_container_id = Column(
        Uuid,
        ForeignKey("menu_container.menu_container_id", ondelete="CASCADE"),
        nullable=False,
    )
    ingredient_id = Column(
        Uuid, ForeignKey("ingredient.ingredient_id", ondelete="NO ACTION"), nullable=False
    )
    amount = Column(Numeric(12, 3), nullable=False)

    menu_container = relationship("MenuContainer", back_populates="ingredients")
    ingredient = relationship("Ingredient")


class MenuPriceHistory(Base):
    """Cost price of a menu at a point in time"""

    __tablename__ = "menu_price_history"

    history_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_id = Column(Uuid, ForeignKey("menu.menu_id", ondelete="CASCADE"), nullable=False)
    cost_price = Column(Numeric(12, 2), nullable=False)
    recorded_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    menu = relationship("Menu", back_populates="price_history")
