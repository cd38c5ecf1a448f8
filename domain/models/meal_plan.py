"""
Meal plan models.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Date, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, enum_column
from domain.enums import MealTime


class MealPlan(Base):
    """Menus scheduled for one meal slot on one day"""

    __tablename__ = "meal_plan"

    meal_plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    meal_time = Column(enum_column(MealTime), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    menus = relationship(
        "MealPlanMenu", back_populates="meal_plan", cascade="all, delete-orphan"
    )


class MealPlanMenu(Base):
    __tablename__ = "meal_plan_menu"

    meal_plan_menu_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    meal_plan_id = Column(
        Uuid, ForeignKey("meal_plan.meal_plan_id", ondelete="CASCADE"), nullable=False
    )
    menu_id = Column(Uuid, ForeignKey("menu.menu_id", ondelete="CASCADE"), nullable=False)
    container_id = Column(
        Uuid, ForeignKey("container.container_id", ondelete="SET NULL"), nullable=True
    )

    meal_plan = relationship("MealPlan", back_populates="menus")
    menu = relationship("Menu")
    container = relationship("Container")
