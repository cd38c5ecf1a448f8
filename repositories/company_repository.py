"""
Company Repository - Data access for companies, memberships, invitations,
join requests and feature flags
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, func

from repositories.base import BaseRepository
from domain.models import (
    Company,
    CompanyMembership,
    CompanyInvitation,
    CompanyJoinRequest,
    CompanyFeature,
)
from domain.enums import RequestStatus


class CompanyRepository(BaseRepository[Company]):
    """Repository for company data access"""

    def __init__(self, db: Session):
        super().__init__(db, Company)

    def get_by_id(self, company_id: UUID) -> Optional[Company]:
        return self.db.query(Company).filter(Company.company_id == company_id).first()

    def search_by_name(self, term: str, limit: int = 20) -> List[Company]:
        pattern = f"%{term.lower()}%"
        return (
            self.db.query(Company)
            .filter(func.lower(Company.name).like(pattern))
            .order_by(Company.name)
            .limit(limit)
            .all()
        )

    def list_with_member_counts(self) -> List[tuple]:
        """All companies as (company, member_count) tuples, newest first"""
        return (
            self.db.query(Company, func.count(CompanyMembership.membership_id))
            .outerjoin(
                CompanyMembership,
                CompanyMembership.company_id == Company.company_id,
            )
            .group_by(Company.company_id)
            .order_by(Company.created_at.desc())
            .all()
        )

    def count(self) -> int:
        return self.db.query(func.count(Company.company_id)).scalar() or 0


class MembershipRepository(BaseRepository[CompanyMembership]):
    """Repository for company memberships"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyMembership)

    def get_by_id(self, membership_id: UUID) -> Optional[CompanyMembership]:
        return (
            self.db.query(CompanyMembership)
            .filter(CompanyMembership.membership_id == membership_id)
            .first()
        )

    def get(self, company_id: UUID, user_id: str) -> Optional[CompanyMembership]:
        """Membership of a user in a company, if any"""
        return (
            self.db.query(CompanyMembership)
            .filter(
                and_(
                    CompanyMembership.company_id == company_id,
                    CompanyMembership.user_id == user_id,
                )
            )
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[CompanyMembership]:
        return (
            self.db.query(CompanyMembership)
            .options(joinedload(CompanyMembership.user))
            .filter(CompanyMembership.company_id == company_id)
            .order_by(CompanyMembership.created_at)
            .all()
        )

    def list_for_user(self, user_id: str) -> List[CompanyMembership]:
        return (
            self.db.query(CompanyMembership)
            .options(joinedload(CompanyMembership.company))
            .filter(CompanyMembership.user_id == user_id)
            .order_by(CompanyMembership.created_at)
            .all()
        )

    def company_ids_for_user(self, user_id: str) -> List[UUID]:
        rows = (
            self.db.query(CompanyMembership.company_id)
            .filter(CompanyMembership.user_id == user_id)
            .all()
        )
        return [row[0] for row in rows]

    def delete_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(CompanyMembership)
            .filter(CompanyMembership.company_id == company_id)
            .delete(synchronize_session=False)
        )

    def delete_for_user(self, user_id: str) -> int:
        return (
            self.db.query(CompanyMembership)
            .filter(CompanyMembership.user_id == user_id)
            .delete(synchronize_session=False)
        )

    def count(self) -> int:
        return (
            self.db.query(func.count(CompanyMembership.membership_id)).scalar() or 0
        )


class InvitationRepository(BaseRepository[CompanyInvitation]):
    """Repository for company invitations"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyInvitation)

    def get_by_id(self, invitation_id: UUID) -> Optional[CompanyInvitation]:
        return (
            self.db.query(CompanyInvitation)
            .filter(CompanyInvitation.invitation_id == invitation_id)
            .first()
        )

    def get_pending(
        self, company_id: UUID, invited_user_id: str
    ) -> Optional[CompanyInvitation]:
        return (
            self.db.query(CompanyInvitation)
            .filter(
                and_(
                    CompanyInvitation.company_id == company_id,
                    CompanyInvitation.invited_user_id == invited_user_id,
                    CompanyInvitation.status == RequestStatus.PENDING,
                )
            )
            .first()
        )

    def list_pending_for_user(self, user_id: str) -> List[CompanyInvitation]:
        return (
            self.db.query(CompanyInvitation)
            .options(joinedload(CompanyInvitation.company))
            .filter(
                and_(
                    CompanyInvitation.invited_user_id == user_id,
                    CompanyInvitation.status == RequestStatus.PENDING,
                )
            )
            .order_by(CompanyInvitation.created_at.desc())
            .all()
        )

    def delete_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(CompanyInvitation)
            .filter(CompanyInvitation.company_id == company_id)
            .delete(synchronize_session=False)
        )

    def delete_pending_for_user(self, user_id: str) -> int:
        return (
            self.db.query(CompanyInvitation)
            .filter(
                and_(
                    CompanyInvitation.invited_user_id == user_id,
                    CompanyInvitation.status == RequestStatus.PENDING,
                )
            )
            .delete(synchronize_session=False)
        )


class JoinRequestRepository(BaseRepository[CompanyJoinRequest]):
    """Repository for company join requests"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyJoinRequest)

    def get_by_id(self, request_id: UUID) -> Optional[CompanyJoinRequest]:
        return (
            self.db.query(CompanyJoinRequest)
            .filter(CompanyJoinRequest.request_id == request_id)
            .first()
        )

    def list_for_user_and_company(
        self, company_id: UUID, user_id: str
    ) -> List[CompanyJoinRequest]:
        return (
            self.db.query(CompanyJoinRequest)
            .filter(
                and_(
                    CompanyJoinRequest.company_id == company_id,
                    CompanyJoinRequest.user_id == user_id,
                )
            )
            .all()
        )

    def list_pending_for_company(self, company_id: UUID) -> List[CompanyJoinRequest]:
        return (
            self.db.query(CompanyJoinRequest)
            .options(joinedload(CompanyJoinRequest.user))
            .filter(
                and_(
                    CompanyJoinRequest.company_id == company_id,
                    CompanyJoinRequest.status == RequestStatus.PENDING,
                )
            )
            .order_by(CompanyJoinRequest.created_at)
            .all()
        )

    def count_pending_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(func.count(CompanyJoinRequest.request_id))
            .filter(
                and_(
                    CompanyJoinRequest.company_id == company_id,
                    CompanyJoinRequest.status == RequestStatus.PENDING,
                )
            )
            .scalar()
            or 0
        )

    def pending_company_ids_for_user(self, user_id: str) -> List[UUID]:
        rows = (
            self.db.query(CompanyJoinRequest.company_id)
            .filter(
                and_(
                    CompanyJoinRequest.user_id == user_id,
                    CompanyJoinRequest.status == RequestStatus.PENDING,
                )
            )
            .all()
        )
        return [row[0] for row in rows]

    def delete_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(CompanyJoinRequest)
            .filter(CompanyJoinRequest.company_id == company_id)
            .delete(synchronize_session=False)
        )

    def delete_for_user(self, user_id: str) -> int:
        return (
            self.db.query(CompanyJoinRequest)
            .filter(CompanyJoinRequest.user_id == user_id)
            .delete(synchronize_session=False)
        )


class FeatureRepository(BaseRepository[CompanyFeature]):
    """Repository for per-company feature flags"""

    def __init__(self, db: Session):
        super().__init__(db, CompanyFeature)

    def get_by_id(self, feature_id: UUID) -> Optional[CompanyFeature]:
        return (
            self.db.query(CompanyFeature)
            .filter(CompanyFeature.feature_id == feature_id)
            .first()
        )

    def get(self, company_id: UUID, feature_name: str) -> Optional[CompanyFeature]:
        return (
            self.db.query(CompanyFeature)
            .filter(
                and_(
                    CompanyFeature.company_id == company_id,
                    CompanyFeature.feature_name == feature_name,
                )
            )
            .first()
        )

    def list_for_company(self, company_id: UUID) -> List[CompanyFeature]:
        return (
            self.db.query(CompanyFeature)
            .filter(CompanyFeature.company_id == company_id)
            .order_by(CompanyFeature.feature_name)
            .all()
        )

    def upsert(
        self,
        company_id: UUID,
        feature_name: str,
        is_enabled: bool,
        config: Optional[dict] = None,
        commit: bool = True,
    ) -> CompanyFeature:
        """Create or update the (company, feature_name) row"""
        feature = self.get(company_id, feature_name)
        if feature:
            feature.is_enabled = is_enabled
            if config is not None:
                feature.config = config
            return self.update(feature, commit=commit)
        feature = CompanyFeature(
            company_id=company_id,
            feature_name=feature_name,
            is_enabled=is_enabled,
            config=config,
        )
        return self.create(feature, commit=commit)

    def delete_for_company(self, company_id: UUID) -> int:
        return (
            self.db.query(CompanyFeature)
            .filter(CompanyFeature.company_id == company_id)
            .delete(synchronize_session=False)
        )
