"""Services package - Business logic layer"""

from services.user_service import UserService
from services.feature_service import FeatureService
from services.membership_service import MembershipService
from services.company_service import CompanyService
from services.invitation_service import InvitationService
from services.join_request_service import JoinRequestService
from services.ingredient_service import IngredientService, SupplierService
from services.container_service import ContainerService
from services.menu_service import MenuService
from services.meal_plan_service import MealPlanService
from services.marketplace_service import MarketplaceService
from services.warehouse_service import WarehouseService
from services.stock_service import StockService
from services.audit_service import AuditService
from services.admin_service import AdminService

__all__ = [
    "UserService",
    "FeatureService",
    "MembershipService",
    "CompanyService",
    "InvitationService",
    "JoinRequestService",
    "IngredientService",
    "SupplierService",
    "ContainerService",
    "MenuService",
    "MealPlanService",
    "MarketplaceService",
    "WarehouseService",
    "StockService",
    "AuditService",
    "AdminService",
]
