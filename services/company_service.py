from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser, Company, CompanyMembership
from domain.enums import PlatformRole, MembershipRole
from domain.schemas.company_schemas import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    CompanyDetailResponse,
    CompanySearchResult,
    FeatureResponse,
)
from repositories import (
    CompanyRepository,
    MembershipRepository,
    InvitationRepository,
    JoinRequestRepository,
    FeatureRepository,
    CompanyModuleRepository,
    MenuRepository,
)
from services.feature_service import FeatureService
from app.exceptions import NotFoundError, ForbiddenError, ServiceValidationError

logger = logging.getLogger("foodops.companies")

COMPANY_CREATOR_ROLES = (PlatformRole.HEAD_ADMIN, PlatformRole.USER)


class CompanyService:
    @staticmethod
    def get_company(db: Session, company_id: UUID) -> Company:
        company = CompanyRepository(db).get_by_id(company_id)
        if not company:
            raise NotFoundError(f"Company not found: {company_id}")
        return company

    @staticmethod
    def create_company(db: Session, user: AppUser, data: CompanyCreate) -> Company:
        """
        Create a company owned by ``user``.

        The company, the owner membership and the default features are
        written in one transaction.

        Raises:
            ForbiddenError: platform role may not create companies
            ServiceValidationError: name missing or blank
        """
        if user.role not in COMPANY_CREATOR_ROLES:
            raise ForbiddenError("Your account is not allowed to create companies")

        name = (data.name or "").strip()
        if not name:
            raise ServiceValidationError("Company name is required")

        try:
            company = Company(
                name=name,
                description=data.description,
                logo_url=data.logo_url,
                created_by=user.user_id,
            )
            db.add(company)
            db.flush()

            db.add(
                CompanyMembership(
                    company_id=company.company_id,
                    user_id=user.user_id,
                    role=MembershipRole.OWNER,
                )
            )
            FeatureService.enable_default_features(db, company.company_id)
            db.commit()
            db.refresh(company)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create company '{name}': {e}")
            raise

        logger.info(f"Company {company.company_id} created by {user.user_id}")
        return company

    @staticmethod
    def get_company_detail(
        db: Session, membership: CompanyMembership
    ) -> CompanyDetailResponse:
        company = CompanyService.get_company(db, membership.company_id)
        features = FeatureRepository(db).list_for_company(company.company_id)
        return CompanyDetailResponse(
            company=CompanyResponse.model_validate(company),
            features=[FeatureResponse.model_validate(f) for f in features],
            role=membership.role,
        )

    @staticmethod
    def update_company(db: Session, company_id: UUID, data: CompanyUpdate) -> Company:
        company = CompanyService.get_company(db, company_id)
        if data.name is not None:
            name = data.name.strip()
            if len(name) < 2:
                raise ServiceValidationError("Company name must be at least 2 characters")
            company.name = name
        if data.description is not None:
            company.description = data.description
        if data.logo_url is not None:
            company.logo_url = data.logo_url
        return CompanyRepository(db).update(company)

    @staticmethod
    def delete_company(db: Session, company_id: UUID) -> None:
        """Delete a company and its company-level rows in one transaction"""
        company = CompanyService.get_company(db, company_id)
        try:
            InvitationRepository(db).delete_for_company(company_id)
            JoinRequestRepository(db).delete_for_company(company_id)
            MembershipRepository(db).delete_for_company(company_id)
            FeatureRepository(db).delete_for_company(company_id)
            CompanyModuleRepository(db).delete_for_company(company_id)
            # menu lines reference ingredients and must be gone before the cascade
            MenuRepository(db).delete_for_company(company_id)
            db.flush()
            db.expire(company)
            db.delete(company)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete company {company_id}: {e}")
            raise
        logger.info(f"Company {company_id} deleted")

    @staticmethod
    def search_companies(
        db: Session, user_id: str, term: Optional[str]
    ) -> List[CompanySearchResult]:
        term = (term or "").strip()
        if not term:
            return []
        companies = CompanyRepository(db).search_by_name(term)
        member_of = set(MembershipRepository(db).company_ids_for_user(user_id))
        pending = set(JoinRequestRepository(db).pending_company_ids_for_user(user_id))
        return [
            CompanySearchResult(
                **CompanyResponse.model_validate(c).model_dump(),
                is_member=c.company_id in member_of,
                has_pending_request=c.company_id in pending,
            )
            for c in companies
        ]
