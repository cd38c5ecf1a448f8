"""
Marketplace module catalog and company subscriptions.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Boolean,
    Integer,
    Numeric,
    JSON,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, enum_column
from domain.enums import SubscriptionStatus


class MarketplaceModule(Base):
    """Optional add-on published in the marketplace"""

    __tablename__ = "marketplace_module"

    # Slug chosen at registration, e.g. "inventory-plus"
    module_id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    icon = Column(Text)
    category = Column(Text, nullable=False)
    version = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    requires_approval = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    menu_items = relationship(
        "ModuleMenuItem",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="ModuleMenuItem.display_order",
    )


class ModuleMenuItem(Base):
    """Navigation entry a module contributes"""

    __tablename__ = "module_menu_item"

    menu_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    module_id = Column(
        Text,
        ForeignKey("marketplace_module.module_id", ondelete="CASCADE"),
        nullable=False,
    )
    label = Column(Text, nullable=False)
    path = Column(Text, nullable=False)
    icon = Column(Text)
    parent_id = Column(
        Uuid, ForeignKey("module_menu_item.menu_item_id", ondelete="CASCADE")
    )
    permission = Column(Text)
    display_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    module = relationship("MarketplaceModule", back_populates="menu_items")


class CompanyModule(Base):
    """A company's subscription to a marketplace module"""

    __tablename__ = "company_module"
    __table_args__ = (
        UniqueConstraint("company_id", "module_id", name="uq_company_module"),
    )

    company_module_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    module_id = Column(
        Text,
        ForeignKey("marketplace_module.module_id", ondelete="CASCADE"),
        nullable=False,
    )
    status = Column(
        enum_column(SubscriptionStatus),
        nullable=False,
        default=SubscriptionStatus.PENDING,
    )
    subscribed_by = Column(Text)
    subscribed_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    module = relationship("MarketplaceModule")


class ModuleSetting(Base):
    """Per-company key/value configuration for a module"""

    __tablename__ = "module_setting"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "module_id", "key", name="uq_module_setting_key"
        ),
    )

    setting_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    module_id = Column(
        Text,
        ForeignKey("marketplace_module.module_id", ondelete="CASCADE"),
        nullable=False,
    )
    key = Column(Text, nullable=False)
    value = Column(JSON)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class CompanyMenuSetting(Base):
    """Company override of a module menu item's visibility and order"""

    __tablename__ = "company_menu_setting"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "menu_item_id", name="uq_company_menu_setting"
        ),
    )

    setting_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    menu_item_id = Column(
        Uuid,
        ForeignKey("module_menu_item.menu_item_id", ondelete="CASCADE"),
        nullable=False,
    )
    is_visible = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
