from typing import List, Dict, Any
from uuid import UUID
from sqlalchemy.orm import Session

from domain.enums import PlatformRole, SubscriptionStatus
from domain.schemas.company_schemas import CompanyResponse, MemberResponse
from repositories import (
    UserRepository,
    CompanyRepository,
    MembershipRepository,
    CompanyModuleRepository,
)
from services.company_service import CompanyService
from services.membership_service import MembershipService


class AdminService:
    """Platform-wide read models for head admins"""

    @staticmethod
    def dashboard(db: Session) -> Dict[str, int]:
        user_repo = UserRepository(db)
        return {
            "users": user_repo.count(),
            "pending_users": user_repo.count(PlatformRole.PENDING),
            "companies": CompanyRepository(db).count(),
            "memberships": MembershipRepository(db).count(),
            "active_subscriptions": CompanyModuleRepository(db).count(
                SubscriptionStatus.ACTIVE
            ),
        }

    @staticmethod
    def companies(db: Session) -> List[Dict[str, Any]]:
        return [
            {
                **CompanyResponse.model_validate(company).model_dump(),
                "member_count": member_count,
            }
            for company, member_count in CompanyRepository(db).list_with_member_counts()
        ]

    @staticmethod
    def company_members(db: Session, company_id: UUID) -> List[MemberResponse]:
        """Members of any company, regardless of the caller's own memberships"""
        CompanyService.get_company(db, company_id)
        return MembershipService.list_members(db, company_id)
