"""Company invitation routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from typing import List
from uuid import UUID

from api.dependencies import get_db, get_current_user, require_company_admin
from api.responses import COMPANY_ERRORS
from domain.models import AppUser, CompanyMembership
from domain.schemas.company_schemas import InvitationCreate, InvitationResponse
from services.invitation_service import InvitationService

router = APIRouter(tags=["Invitations"], responses=COMPANY_ERRORS)
logger = logging.getLogger("foodops.api.invitations")


@router.post(
    "/companies/{company_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_invitation(
    payload: InvitationCreate,
    membership: CompanyMembership = Depends(require_company_admin),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Invite a user to the company as admin or member"""
    return InvitationService.create_invitation(db, membership.company_id, user, payload)


@router.get("/invitations", response_model=List[InvitationResponse])
def list_my_invitations(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Pending invitations addressed to the caller"""
    return InvitationService.list_for_user(db, user.user_id)


@router.post("/invitations/{invitation_id}/accept", response_model=InvitationResponse)
def accept_invitation(
    invitation_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InvitationService.accept(db, invitation_id, user.user_id)


@router.post("/invitations/{invitation_id}/reject", response_model=InvitationResponse)
def reject_invitation(
    invitation_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InvitationService.reject(db, invitation_id, user.user_id)
