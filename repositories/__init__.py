"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.company_repository import (
    CompanyRepository,
    MembershipRepository,
    InvitationRepository,
    JoinRequestRepository,
    FeatureRepository,
)
from repositories.ingredient_repository import IngredientRepository, SupplierRepository
from repositories.menu_repository import (
    ContainerCategoryRepository,
    ContainerRepository,
    MenuRepository,
)
from repositories.meal_plan_repository import MealPlanRepository
from repositories.marketplace_repository import (
    ModuleRepository,
    CompanyModuleRepository,
    ModuleSettingRepository,
    CompanyMenuSettingRepository,
)
from repositories.stock_repository import (
    WarehouseRepository,
    StockItemRepository,
    StockTransactionRepository,
    StockAuditRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CompanyRepository",
    "MembershipRepository",
    "InvitationRepository",
    "JoinRequestRepository",
    "FeatureRepository",
    "IngredientRepository",
    "SupplierRepository",
    "ContainerCategoryRepository",
    "ContainerRepository",
    "MenuRepository",
    "MealPlanRepository",
    "ModuleRepository",
    "CompanyModuleRepository",
    "ModuleSettingRepository",
    "CompanyMenuSettingRepository",
    "WarehouseRepository",
    "StockItemRepository",
    "StockTransactionRepository",
    "StockAuditRepository",
]
