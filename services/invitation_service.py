from typing import List
from uuid import UUID
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser, CompanyInvitation, CompanyMembership
from domain.enums import MembershipRole, RequestStatus
from domain.schemas.company_schemas import InvitationCreate, InvitationResponse
from repositories import InvitationRepository, MembershipRepository
from app.config import settings
from app.exceptions import NotFoundError, ForbiddenError, ServiceValidationError

logger = logging.getLogger("foodops.invitations")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_response(invitation: CompanyInvitation) -> InvitationResponse:
    response = InvitationResponse.model_validate(invitation)
    if invitation.company is not None:
        response.company_name = invitation.company.name
    return response


class InvitationService:
    @staticmethod
    def create_invitation(
        db: Session, company_id: UUID, inviter: AppUser, data: InvitationCreate
    ) -> InvitationResponse:
        if data.role == MembershipRole.OWNER:
            raise ServiceValidationError("Invitations cannot grant the owner role")
        if MembershipRepository(db).get(company_id, data.invited_user_id):
            raise ServiceValidationError("User is already a member of this company")

        repo = InvitationRepository(db)
        if repo.get_pending(company_id, data.invited_user_id):
            raise ServiceValidationError("A pending invitation already exists for this user")

        invitation = repo.create(
            CompanyInvitation(
                company_id=company_id,
                invited_by=inviter.user_id,
                invited_user_id=data.invited_user_id,
                role=data.role,
                status=RequestStatus.PENDING,
                expires_at=datetime.now(timezone.utc)
                + timedelta(days=settings.invitation_ttl_days),
            )
        )
        logger.info(
            f"{inviter.user_id} invited {data.invited_user_id} to {company_id} as {data.role.value}"
        )
        return _to_response(invitation)

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> List[InvitationResponse]:
        return [
            _to_response(inv)
            for inv in InvitationRepository(db).list_pending_for_user(user_id)
        ]

    @staticmethod
    def _get_own_pending(
        db: Session, invitation_id: UUID, user_id: str
    ) -> CompanyInvitation:
        invitation = InvitationRepository(db).get_by_id(invitation_id)
        if not invitation:
            raise NotFoundError(f"Invitation not found: {invitation_id}")
        if invitation.invited_user_id != user_id:
            raise ForbiddenError("This invitation is addressed to another user")
        if invitation.status != RequestStatus.PENDING:
            raise ServiceValidationError("Invitation has already been processed")
        return invitation

    @staticmethod
    def accept(db: Session, invitation_id: UUID, user_id: str) -> InvitationResponse:
        """
        Accept an invitation and join the company.

        An expired invitation is marked rejected and refused. An existing
        membership gets the invited role instead of a second row.
        """
        invitation = InvitationService._get_own_pending(db, invitation_id, user_id)

        if invitation.expires_at and _as_utc(invitation.expires_at) < datetime.now(
            timezone.utc
        ):
            invitation.status = RequestStatus.REJECTED
            db.commit()
            raise ServiceValidationError("Invitation has expired")

        try:
            invitation.status = RequestStatus.ACCEPTED
            membership = MembershipRepository(db).get(invitation.company_id, user_id)
            if membership:
                membership.role = invitation.role
            else:
                db.add(
                    CompanyMembership(
                        company_id=invitation.company_id,
                        user_id=user_id,
                        role=invitation.role,
                    )
                )
            db.commit()
            db.refresh(invitation)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to accept invitation {invitation_id}: {e}")
            raise

        logger.info(f"{user_id} accepted invitation to {invitation.company_id}")
        return _to_response(invitation)

    @staticmethod
    def reject(db: Session, invitation_id: UUID, user_id: str) -> InvitationResponse:
        invitation = InvitationService._get_own_pending(db, invitation_id, user_id)
        invitation.status = RequestStatus.REJECTED
        invitation = InvitationRepository(db).update(invitation)
        logger.info(f"{user_id} rejected invitation to {invitation.company_id}")
        return _to_response(invitation)
