from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import MarketplaceModule, ModuleMenuItem, CompanyModule
from domain.enums import SubscriptionStatus
from domain.schemas.marketplace_schemas import (
    ModuleRegister,
    ModuleResponse,
    ModuleDetailResponse,
    ModuleMenuItemResponse,
    ModuleSettingUpsert,
    MenuSettingUpsert,
)
from repositories import (
    CompanyRepository,
    ModuleRepository,
    CompanyModuleRepository,
    ModuleSettingRepository,
    CompanyMenuSettingRepository,
)
from app.exceptions import NotFoundError, ConflictError, ServiceValidationError

logger = logging.getLogger("foodops.marketplace")

REQUIRED_MODULE_FIELDS = ("id", "name", "category", "version")
UNSUBSCRIBABLE = (SubscriptionStatus.ACTIVE, SubscriptionStatus.SUSPENDED)


class MarketplaceService:
    # ----- catalog -----

    @staticmethod
    def list_modules(db: Session, term: Optional[str] = None) -> List[MarketplaceModule]:
        return ModuleRepository(db).list_active((term or "").strip() or None)

    @staticmethod
    def get_module(db: Session, module_id: str) -> MarketplaceModule:
        module = ModuleRepository(db).get_by_id(module_id)
        if not module:
            raise NotFoundError(f"Module not found: {module_id}")
        return module

    @staticmethod
    def get_module_detail(db: Session, module_id: str) -> ModuleDetailResponse:
        module = MarketplaceService.get_module(db, module_id)
        return ModuleDetailResponse(
            module=ModuleResponse.model_validate(module),
            menu_items=[ModuleMenuItemResponse.model_validate(i) for i in module.menu_items],
        )

    @staticmethod
    def register_module(db: Session, data: ModuleRegister) -> MarketplaceModule:
        """
        Publish a module in the marketplace.

        Raises:
            ServiceValidationError: id, name, category or version missing
            ConflictError: a module with this id already exists
        """
        missing = [f for f in REQUIRED_MODULE_FIELDS if not (getattr(data, f) or "").strip()]
        if missing:
            raise ServiceValidationError(
                "Missing required module fields", details={"missing": missing}
            )

        repo = ModuleRepository(db)
        module_id = data.id.strip()
        if repo.get_by_id(module_id):
            raise ConflictError(f"Module already registered: {module_id}", code="DUPLICATE_MODULE")

        module = MarketplaceModule(
            module_id=module_id,
            name=data.name.strip(),
            category=data.category.strip(),
            version=data.version.strip(),
            description=data.description,
            icon=data.icon,
            price=data.price or 0,
            requires_approval=data.requires_approval,
            is_active=True,
            menu_items=[
                ModuleMenuItem(
                    label=item.label,
                    path=item.path,
                    icon=item.icon,
                    permission=item.permission,
                    display_order=item.display_order,
                )
                for item in data.menu_items
            ],
        )
        repo.create(module)
        logger.info(f"Module {module_id} registered with {len(data.menu_items)} menu item(s)")
        return module

    # ----- subscriptions -----

    @staticmethod
    def list_company_modules(db: Session, company_id: UUID) -> List[CompanyModule]:
        return CompanyModuleRepository(db).list_for_company(company_id)

    @staticmethod
    def subscribe(
        db: Session, company_id: UUID, module_id: str, user_id: str
    ) -> CompanyModule:
        """
        Subscribe a company to a module.

        Keeps one row per (company, module): a cancelled row is reactivated,
        any other existing row is returned unchanged.
        """
        module = MarketplaceService.get_module(db, module_id)
        repo = CompanyModuleRepository(db)
        subscription = repo.get(company_id, module_id)

        if subscription is None:
            status = (
                SubscriptionStatus.PENDING
                if module.requires_approval
                else SubscriptionStatus.ACTIVE
            )
            subscription = repo.create(
                CompanyModule(
                    company_id=company_id,
                    module_id=module_id,
                    status=status,
                    subscribed_by=user_id,
                )
            )
            logger.info(f"Company {company_id} subscribed to {module_id} ({status.value})")
        elif subscription.status == SubscriptionStatus.CANCELLED:
            subscription.status = SubscriptionStatus.ACTIVE
            subscription.subscribed_by = user_id
            subscription = repo.update(subscription)
            logger.info(f"Company {company_id} reactivated {module_id}")
        return subscription

    @staticmethod
    def unsubscribe(db: Session, company_id: UUID, module_id: str) -> CompanyModule:
        repo = CompanyModuleRepository(db)
        subscription = repo.get(company_id, module_id)
        if subscription is None:
            raise NotFoundError(f"No subscription to module {module_id}")
        if subscription.status not in UNSUBSCRIBABLE:
            raise ServiceValidationError(
                f"Cannot unsubscribe from a {subscription.status.value} subscription"
            )
        subscription.status = SubscriptionStatus.CANCELLED
        subscription = repo.update(subscription)
        logger.info(f"Company {company_id} unsubscribed from {module_id}")
        return subscription

    @staticmethod
    def set_subscription_status(
        db: Session, module_id: str, company_id: UUID, status: SubscriptionStatus
    ) -> CompanyModule:
        """Platform admin override, used to approve or suspend subscriptions"""
        if not CompanyRepository(db).get_by_id(company_id):
            raise NotFoundError(f"Company not found: {company_id}")
        repo = CompanyModuleRepository(db)
        subscription = repo.get(company_id, module_id)
        if subscription is None:
            raise NotFoundError(f"No subscription to module {module_id}")
        subscription.status = status
        subscription = repo.update(subscription)
        logger.info(f"Subscription {company_id}/{module_id} set to {status.value}")
        return subscription

    # ----- settings -----

    @staticmethod
    def get_settings(db: Session, company_id: UUID, module_id: str):
        MarketplaceService.get_module(db, module_id)
        return ModuleSettingRepository(db).list_for(company_id, module_id)

    @staticmethod
    def put_setting(
        db: Session, company_id: UUID, module_id: str, data: ModuleSettingUpsert
    ):
        MarketplaceService.get_module(db, module_id)
        subscription = CompanyModuleRepository(db).get(company_id, module_id)
        if subscription is None or subscription.status == SubscriptionStatus.CANCELLED:
            raise ServiceValidationError("Company is not subscribed to this module")
        return ModuleSettingRepository(db).upsert(company_id, module_id, data.key, data.value)

    # ----- navigation -----

    @staticmethod
    def company_menu(db: Session, company_id: UUID) -> List[ModuleMenuItemResponse]:
        """
        Menu items of actively subscribed modules with the company's
        visibility and order overrides applied. Hidden items are left out.
        """
        active = CompanyModuleRepository(db).list_for_company(
            company_id, status=SubscriptionStatus.ACTIVE
        )
        items = ModuleRepository(db).menu_items_for_modules([s.module_id for s in active])
        overrides = {
            s.menu_item_id: s
            for s in CompanyMenuSettingRepository(db).list_for_company(company_id)
        }

        result = []
        for item in items:
            response = ModuleMenuItemResponse.model_validate(item)
            override = overrides.get(item.menu_item_id)
            if override is not None:
                if not override.is_visible:
                    continue
                if override.display_order is not None:
                    response.display_order = override.display_order
            result.append(response)
        result.sort(key=lambda r: r.display_order)
        return result

    @staticmethod
    def put_menu_setting(db: Session, company_id: UUID, data: MenuSettingUpsert):
        item = db.get(ModuleMenuItem, data.menu_item_id)
        if item is None:
            raise NotFoundError(f"Menu item not found: {data.menu_item_id}")
        return CompanyMenuSettingRepository(db).upsert(
            company_id, data.menu_item_id, data.is_visible, data.display_order
        )
