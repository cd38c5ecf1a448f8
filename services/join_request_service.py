from typing import List
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import CompanyJoinRequest, CompanyMembership
from domain.enums import MembershipRole, RequestStatus
from domain.schemas.company_schemas import JoinRequestCreate, JoinRequestResponse
from repositories import CompanyRepository, JoinRequestRepository, MembershipRepository
from services.membership_service import MembershipService
from app.exceptions import NotFoundError, ForbiddenError, ServiceValidationError

logger = logging.getLogger("foodops.join_requests")


def _to_response(request: CompanyJoinRequest) -> JoinRequestResponse:
    response = JoinRequestResponse.model_validate(request)
    if request.user is not None:
        response.email = request.user.email
        response.display_name = request.user.display_name
    return response


class JoinRequestService:
    @staticmethod
    def create_request(
        db: Session, company_id: UUID, user_id: str, data: JoinRequestCreate
    ) -> JoinRequestResponse:
        """
        Ask to join a company.

        Earlier accepted or rejected requests of the same user are replaced,
        so a user has at most one request row per company.
        """
        if not CompanyRepository(db).get_by_id(company_id):
            raise NotFoundError(f"Company not found: {company_id}")
        if MembershipRepository(db).get(company_id, user_id):
            raise ServiceValidationError("You are already a member of this company")

        repo = JoinRequestRepository(db)
        previous = repo.list_for_user_and_company(company_id, user_id)
        if any(r.status == RequestStatus.PENDING for r in previous):
            raise ServiceValidationError("A join request is already pending")

        try:
            for old in previous:
                db.delete(old)
            request = CompanyJoinRequest(
                company_id=company_id,
                user_id=user_id,
                message=data.message,
                status=RequestStatus.PENDING,
            )
            db.add(request)
            db.commit()
            db.refresh(request)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create join request for {company_id}: {e}")
            raise

        logger.info(f"{user_id} requested to join company {company_id}")
        return _to_response(request)

    @staticmethod
    def list_pending(db: Session, company_id: UUID) -> List[JoinRequestResponse]:
        return [
            _to_response(r)
            for r in JoinRequestRepository(db).list_pending_for_company(company_id)
        ]

    @staticmethod
    def count_pending(db: Session, company_id: UUID) -> int:
        return JoinRequestRepository(db).count_pending_for_company(company_id)

    @staticmethod
    def _get_pending_for_admin(
        db: Session, request_id: UUID, user_id: str
    ) -> CompanyJoinRequest:
        request = JoinRequestRepository(db).get_by_id(request_id)
        if not request or request.status != RequestStatus.PENDING:
            raise NotFoundError(f"Pending join request not found: {request_id}")
        membership = MembershipService.get_membership(db, user_id, request.company_id)
        if not MembershipService.is_company_admin(membership):
            raise ForbiddenError("Only company owners and admins can process join requests")
        return request

    @staticmethod
    def accept(db: Session, request_id: UUID, user_id: str) -> JoinRequestResponse:
        request = JoinRequestService._get_pending_for_admin(db, request_id, user_id)
        try:
            request.status = RequestStatus.ACCEPTED
            if not MembershipRepository(db).get(request.company_id, request.user_id):
                db.add(
                    CompanyMembership(
                        company_id=request.company_id,
                        user_id=request.user_id,
                        role=MembershipRole.MEMBER,
                    )
                )
            db.commit()
            db.refresh(request)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to accept join request {request_id}: {e}")
            raise

        logger.info(f"{user_id} accepted {request.user_id} into {request.company_id}")
        return _to_response(request)

    @staticmethod
    def reject(db: Session, request_id: UUID, user_id: str) -> JoinRequestResponse:
        request = JoinRequestService._get_pending_for_admin(db, request_id, user_id)
        request.status = RequestStatus.REJECTED
        request = JoinRequestRepository(db).update(request)
        logger.info(f"{user_id} rejected join request {request_id}")
        return _to_response(request)
