"""
Marketplace Repository - Data access for modules, subscriptions and
company-level module settings
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_, func

from repositories.base import BaseRepository
from domain.models import (
    MarketplaceModule,
    ModuleMenuItem,
    CompanyModule,
    ModuleSetting,
    CompanyMenuSetting,
)
from domain.enums import SubscriptionStatus


class ModuleRepository(BaseRepository[MarketplaceModule]):
    """Repository for the marketplace module catalog"""

    def __init__(self, db: Session):
        super().__init__(db, MarketplaceModule)

    def get_by_id(self, module_id: str) -> Optional[MarketplaceModule]:
        return (
            self.db.query(MarketplaceModule)
            .filter(MarketplaceModule.module_id == module_id)
            .first()
        )

    def list_active(self, term: Optional[str] = None) -> List[MarketplaceModule]:
        query = self.db.query(MarketplaceModule).filter(
            MarketplaceModule.is_active.is_(True)
        )
        if term:
            pattern = f"%{term.lower()}%"
            query = query.filter(
                or_(
                    func.lower(MarketplaceModule.name).like(pattern),
                    func.lower(MarketplaceModule.description).like(pattern),
                    func.lower(MarketplaceModule.category).like(pattern),
                )
            )
        return query.order_by(MarketplaceModule.name).all()

    def menu_items_for_modules(self, module_ids: List[str]) -> List[ModuleMenuItem]:
        if not module_ids:
            return []
        return (
            self.db.query(ModuleMenuItem)
            .filter(
                and_(
                    ModuleMenuItem.module_id.in_(module_ids),
                    ModuleMenuItem.is_visible.is_(True),
                )
            )
            .order_by(ModuleMenuItem.display_order)
            .all()
        )


class CompanyModuleRepository(BaseRepository[CompanyModule]):
    """Repository for company subscriptions to modules"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyModule)

    def get_by_id(self, company_module_id: UUID) -> Optional[CompanyModule]:
        return (
            self.db.query(CompanyModule)
            .filter(CompanyModule.company_module_id == company_module_id)
            .first()
        )

    def get(self, company_id: UUID, module_id: str) -> Optional[CompanyModule]:
        return (
            self.db.query(CompanyModule)
            .options(joinedload(CompanyModule.module))
            .filter(
                and_(
                    CompanyModule.company_id == company_id,
                    CompanyModule.module_id == module_id,
                )
            )
            .first()
        )

    def list_for_company(
        self, company_id: UUID, status: Optional[SubscriptionStatus] = None
    ) -> List[CompanyModule]:
        query = (
            self.db.query(CompanyModule)
            .options(joinedload(CompanyModule.module))
            .filter(CompanyModule.company_id == company_id)
        )
        if status is not None:
            query = query.filter(CompanyModule.status == status)
        return query.order_by(CompanyModule.subscribed_at).all()

    def delete_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(CompanyModule)
            .filter(CompanyModule.company_id == company_id)
            .delete(synchronize_session=False)
        )

    def count(self, status: Optional[SubscriptionStatus] = None) -> int:
        query = self.db.query(func.count(CompanyModule.company_module_id))
        if status is not None:
            query = query.filter(CompanyModule.status == status)
        return query.scalar() or 0


class ModuleSettingRepository(BaseRepository[ModuleSetting]):
    """Repository for per-company module key/value settings"""

    def __init__(self, db: Session):
        super().__init__(db, ModuleSetting)

    def get_by_id(self, setting_id: UUID) -> Optional[ModuleSetting]:
        return (
            self.db.query(ModuleSetting)
            .filter(ModuleSetting.setting_id == setting_id)
            .first()
        )

    def list_for(self, company_id: UUID, module_id: str) -> List[ModuleSetting]:
        return (
            self.db.query(ModuleSetting)
            .filter(
                and_(
                    ModuleSetting.company_id == company_id,
                    ModuleSetting.module_id == module_id,
                )
            )
            .order_by(ModuleSetting.key)
            .all()
        )

    def upsert(self, company_id: UUID, module_id: str, key: str, value) -> ModuleSetting:
        setting = (
            self.db.query(ModuleSetting)
            .filter(
                and_(
                    ModuleSetting.company_id == company_id,
                    ModuleSetting.module_id == module_id,
                    ModuleSetting.key == key,
                )
            )
            .first()
        )
        if setting:
            setting.value = value
            return self.update(setting)
        return self.create(
            ModuleSetting(company_id=company_id, module_id=module_id, key=key, value=value)
        )


class CompanyMenuSettingRepository(BaseRepository[CompanyMenuSetting]):
    """Repository for company overrides of module menu items"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyMenuSetting)

    def get_by_id(self, setting_id: UUID) -> Optional[CompanyMenuSetting]:
        return (
            self.db.query(CompanyMenuSetting)
            .filter(CompanyMenuSetting.setting_id == setting_id)
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[CompanyMenuSetting]:
        return (
            self.db.query(CompanyMenuSetting)
            .filter(CompanyMenuSetting.company_id == company_id)
            .all()
        )

    def upsert(
        self,
        company_id: UUID,
        menu_item_id: UUID,
        is_visible: bool,
        display_order: Optional[int],
    ) -> CompanyMenuSetting:
        setting = (
            self.db.query(CompanyMenuSetting)
            .filter(
                and_(
                    CompanyMenuSetting.company_id == company_id,
                    CompanyMenuSetting.menu_item_id == menu_item_id,
                )
            )
            .first()
        )
        if setting:
            setting.is_visible = is_visible
            setting.display_order = display_order
            return self.update(setting)
        return self.create(
            CompanyMenuSetting(
                company_id=company_id,
                menu_item_id=menu_item_id,
                is_visible=is_visible,
                display_order=display_order,
            )
        )
