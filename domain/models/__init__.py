"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import AppUser
from domain.models.company import (
    Company,
    CompanyMembership,
    CompanyInvitation,
    CompanyJoinRequest,
    CompanyFeature,
)
from domain.models.ingredient import Supplier, Ingredient, IngredientPriceHistory
from domain.models.menu import (
    ContainerCategory,
    Container,
    Menu,
    MenuContainer,
    MenuContainerIngredient,
    MenuPriceHistory,
)
from domain.models.meal_plan import MealPlan, MealPlanMenu
from domain.models.marketplace import (
    MarketplaceModule,
    ModuleMenuItem,
    CompanyModule,
    ModuleSetting,
    CompanyMenuSetting,
)
from domain.models.stock import (
    Warehouse,
    StockItem,
    StockTransaction,
    StockAudit,
    StockAuditItem,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Identity
    "AppUser",
    # Company models
    "Company",
    "CompanyMembership",
    "CompanyInvitation",
    "CompanyJoinRequest",
    "CompanyFeature",
    # Ingredient models
    "Supplier",
    "Ingredient",
    "IngredientPriceHistory",
    # Menu models
    "ContainerCategory",
    "Container",
    "Menu",
    "MenuContainer",
    "MenuContainerIngredient",
    "MenuPriceHistory",
    # Meal plan models
    "MealPlan",
    "MealPlanMenu",
    # Marketplace models
    "MarketplaceModule",
    "ModuleMenuItem",
    "CompanyModule",
    "ModuleSetting",
    "CompanyMenuSetting",
    # Stock models
    "Warehouse",
    "StockItem",
    "StockTransaction",
    "StockAudit",
    "StockAuditItem",
]
