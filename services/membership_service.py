from typing import List, Optional, Iterable
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import CompanyMembership, AppUser
from domain.enums import MembershipRole
from domain.schemas.company_schemas import MemberResponse, MemberRemovalResponse
from repositories import CompanyRepository, MembershipRepository
from app.exceptions import (
    NotFoundError,
    ForbiddenError,
    ServiceValidationError,
)

logger = logging.getLogger("foodops.members")

ADMIN_ROLES = (MembershipRole.OWNER, MembershipRole.ADMIN)


class MembershipService:
    @staticmethod
    def get_membership(
        db: Session, user_id: str, company_id: UUID
    ) -> Optional[CompanyMembership]:
        return MembershipRepository(db).get(company_id, user_id)

    @staticmethod
    def is_company_admin(membership: Optional[CompanyMembership]) -> bool:
        return membership is not None and membership.role in ADMIN_ROLES

    @staticmethod
    def require_membership(
        db: Session,
        company_id: UUID,
        user_id: str,
        roles: Optional[Iterable[MembershipRole]] = None,
    ) -> CompanyMembership:
        """
        Membership of ``user_id`` in ``company_id``, enforcing ``roles`` if given.

        Raises:
            NotFoundError: company does not exist
            ForbiddenError: caller is not a member, or lacks one of ``roles``
        """
        company = CompanyRepository(db).get_by_id(company_id)
        if not company:
            raise NotFoundError(f"Company not found: {company_id}")

        membership = MembershipRepository(db).get(company_id, user_id)
        if not membership:
            raise ForbiddenError("You are not a member of this company")
        if roles is not None and membership.role not in tuple(roles):
            raise ForbiddenError("Your role does not allow this action")
        return membership

    @staticmethod
    def _to_response(m: CompanyMembership) -> MemberResponse:
        user: Optional[AppUser] = m.user
        return MemberResponse(
            membership_id=m.membership_id,
            user_id=m.user_id,
            role=m.role,
            joined_at=m.created_at,
            email=user.email if user else None,
            first_name=user.first_name if user else None,
            last_name=user.last_name if user else None,
            image_url=user.image_url if user else None,
            display_name=user.display_name if user else m.user_id,
        )

    @staticmethod
    def list_members(db: Session, company_id: UUID) -> List[MemberResponse]:
        memberships = MembershipRepository(db).list_for_company(company_id)
        return [MembershipService._to_response(m) for m in memberships]

    @staticmethod
    def update_member_role(
        db: Session, company_id: UUID, target_user_id: str, role: MembershipRole
    ) -> MemberResponse:
        """Change a member's role. Callers must already be verified as owner."""
        if role == MembershipRole.OWNER:
            raise ServiceValidationError("Ownership cannot be assigned through a role change")

        repo = MembershipRepository(db)
        target = repo.get(company_id, target_user_id)
        if not target:
            raise NotFoundError(f"Member not found: {target_user_id}")
        if target.role == MembershipRole.OWNER:
            raise ForbiddenError("The owner's role cannot be changed")

        target.role = role
        repo.update(target)
        logger.info(f"Role of {target_user_id} in {company_id} set to {role.value}")
        return MembershipService._to_response(target)

    @staticmethod
    def remove_member(
        db: Session,
        company_id: UUID,
        caller: CompanyMembership,
        target_user_id: str,
    ) -> MemberRemovalResponse:
        """
        Remove a member.

        Anyone but the owner may leave on their own. Removing someone else
        takes the owner, and the owner can never be removed.
        """
        repo = MembershipRepository(db)
        is_self = caller.user_id == target_user_id

        if is_self:
            if caller.role == MembershipRole.OWNER:
                raise ServiceValidationError(
                    "The owner cannot leave the company; delete the company instead"
                )
            target = caller
        else:
            if caller.role != MembershipRole.OWNER:
                raise ForbiddenError("Only the owner can remove members")
            target = repo.get(company_id, target_user_id)
            if not target:
                raise NotFoundError(f"Member not found: {target_user_id}")
            if target.role == MembershipRole.OWNER:
                raise ForbiddenError("The owner cannot be removed")

        repo.delete(target)
        logger.info(f"Removed {target_user_id} from company {company_id}")
        return MemberRemovalResponse(success=True, redirect="/" if is_self else None)
