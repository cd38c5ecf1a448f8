"""Join request routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from typing import List
from uuid import UUID

from api.dependencies import get_db, get_current_user, require_company_admin
from api.responses import COMPANY_ERRORS
from domain.models import AppUser, CompanyMembership
from domain.schemas.company_schemas import (
    JoinRequestCreate,
    JoinRequestResponse,
    JoinRequestCount,
)
from services.join_request_service import JoinRequestService

router = APIRouter(tags=["Join Requests"], responses=COMPANY_ERRORS)
logger = logging.getLogger("foodops.api.join_requests")


@router.post(
    "/companies/{company_id}/join-requests",
    response_model=JoinRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_join_request(
    company_id: UUID,
    payload: JoinRequestCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ask to join a company the caller is not a member of"""
    return JoinRequestService.create_request(db, company_id, user.user_id, payload)


@router.get("/companies/{company_id}/join-requests", response_model=List[JoinRequestResponse])
def list_join_requests(
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    return JoinRequestService.list_pending(db, membership.company_id)


@router.get("/companies/{company_id}/join-requests/count", response_model=JoinRequestCount)
def count_join_requests(
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    return JoinRequestCount(count=JoinRequestService.count_pending(db, membership.company_id))


@router.post("/join-requests/{request_id}/accept", response_model=JoinRequestResponse)
def accept_join_request(
    request_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return JoinRequestService.accept(db, request_id, user.user_id)


@router.post("/join-requests/{request_id}/reject", response_model=JoinRequestResponse)
def reject_join_request(
    request_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return JoinRequestService.reject(db, request_id, user.user_id)
