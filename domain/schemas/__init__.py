"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserResponse,
    UserUpdate,
    UserCompanyResponse,
    UserSearchResult,
    UserBatchRequest,
    UserBatchResponse,
    PlatformRoleUpdate,
)
from domain.schemas.company_schemas import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    CompanyEnvelope,
    CompanyDetailResponse,
    CompanySearchResult,
    FeatureResponse,
    FeatureUpsert,
    MemberResponse,
    MemberRoleUpdate,
    MemberRemovalResponse,
    InvitationCreate,
    InvitationResponse,
    JoinRequestCreate,
    JoinRequestResponse,
    JoinRequestCount,
)
from domain.schemas.ingredient_schemas import (
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
    IngredientListResponse,
    IngredientPriceHistoryResponse,
    CodeAvailability,
)
from domain.schemas.menu_schemas import (
    ContainerCategoryCreate,
    ContainerCategoryUpdate,
    ContainerCategoryResponse,
    ContainerCreate,
    ContainerUpdate,
    ContainerResponse,
    MenuCreate,
    MenuUpdate,
    MenuResponse,
    MenuContainerResponse,
    MenuIngredientResponse,
    MenuPriceHistoryResponse,
    NameAvailability,
)
from domain.schemas.meal_plan_schemas import (
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanResponse,
    MealPlanMenuResponse,
)
from domain.schemas.marketplace_schemas import (
    ModuleRegister,
    ModuleResponse,
    ModuleDetailResponse,
    ModuleMenuItemResponse,
    CompanyModuleResponse,
    SubscriptionStatusUpdate,
    ModuleSettingUpsert,
    ModuleSettingResponse,
    MenuSettingUpsert,
    MenuSettingResponse,
)
from domain.schemas.admin_schemas import AdminDashboard, AdminCompanyResponse
from domain.schemas.stock_schemas import (
    WarehouseCreate,
    WarehouseUpdate,
    WarehouseResponse,
    StockItemResponse,
    StockSyncResponse,
    StockTransactionCreate,
    StockTransactionResponse,
    StockTransferCreate,
    StockTransferResponse,
    WarehouseStock,
    StockItemDetailResponse,
    StockAuditCreate,
    StockAuditCreated,
    StockAuditResponse,
    StockAuditListResponse,
    StockAuditDetailResponse,
    StockAuditItemResponse,
    StockAuditItemUpdate,
    StockAuditItemBatchUpdate,
    StockAuditItemBatchResponse,
    StockAuditAction,
    StockAuditActionResponse,
)

__all__ = [
    # Admin schemas
    "AdminDashboard",
    "AdminCompanyResponse",
    # User schemas
    "UserResponse",
    "UserUpdate",
    "UserCompanyResponse",
    "UserSearchResult",
    "UserBatchRequest",
    "UserBatchResponse",
    "PlatformRoleUpdate",
    # Company schemas
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyResponse",
    "CompanyEnvelope",
    "CompanyDetailResponse",
    "CompanySearchResult",
    "FeatureResponse",
    "FeatureUpsert",
    "MemberResponse",
    "MemberRoleUpdate",
    "MemberRemovalResponse",
    "InvitationCreate",
    "InvitationResponse",
    "JoinRequestCreate",
    "JoinRequestResponse",
    "JoinRequestCount",
    # Ingredient schemas
    "SupplierCreate",
    "SupplierUpdate",
    "SupplierResponse",
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientResponse",
    "IngredientListResponse",
    "IngredientPriceHistoryResponse",
    "CodeAvailability",
    # Menu schemas
    "ContainerCategoryCreate",
    "ContainerCategoryUpdate",
    "ContainerCategoryResponse",
    "ContainerCreate",
    "ContainerUpdate",
    "ContainerResponse",
    "MenuCreate",
    "MenuUpdate",
    "MenuResponse",
    "MenuContainerResponse",
    "MenuIngredientResponse",
    "MenuPriceHistoryResponse",
    "NameAvailability",
    # Meal plan schemas
    "MealPlanCreate",
    "MealPlanUpdate",
    "MealPlanResponse",
    "MealPlanMenuResponse",
    # Marketplace schemas
    "ModuleRegister",
    "ModuleResponse",
    "ModuleDetailResponse",
    "ModuleMenuItemResponse",
    "CompanyModuleResponse",
    "SubscriptionStatusUpdate",
    "ModuleSettingUpsert",
    "ModuleSettingResponse",
    "MenuSettingUpsert",
    "MenuSettingResponse",
    # Stock schemas
    "WarehouseCreate",
    "WarehouseUpdate",
    "WarehouseResponse",
    "StockItemResponse",
    "StockSyncResponse",
    "StockTransactionCreate",
    "StockTransactionResponse",
    "StockTransferCreate",
    "StockTransferResponse",
    "WarehouseStock",
    "StockItemDetailResponse",
    "StockAuditCreate",
    "StockAuditCreated",
    "StockAuditResponse",
    "StockAuditListResponse",
    "StockAuditDetailResponse",
    "StockAuditItemResponse",
    "StockAuditItemUpdate",
    "StockAuditItemBatchUpdate",
    "StockAuditItemBatchResponse",
    "StockAuditAction",
    "StockAuditActionResponse",
]
