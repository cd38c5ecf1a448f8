"""Company, membership and feature flag routes"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from api.dependencies import (
    get_db,
    get_current_user,
    get_company_membership,
    require_company_admin,
    require_company_owner,
)
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import AppUser, CompanyMembership
from domain.schemas.company_schemas import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    CompanyEnvelope,
    CompanyDetailResponse,
    CompanySearchResult,
    FeatureResponse,
    FeatureUpsert,
    MemberResponse,
    MemberRoleUpdate,
    MemberRemovalResponse,
)
from services.company_service import CompanyService
from services.feature_service import FeatureService
from services.membership_service import MembershipService

router = APIRouter(prefix="/companies", tags=["Companies"], responses=COMPANY_ERRORS)
logger = logging.getLogger("foodops.api.companies")


@router.post("", response_model=CompanyEnvelope, status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a company owned by the caller, with the default features enabled"""
    company = CompanyService.create_company(db, user, payload)
    return CompanyEnvelope(company=CompanyResponse.model_validate(company))


@router.get("/search", response_model=List[CompanySearchResult])
def search_companies(
    q: Optional[str] = Query(None),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Find companies by name, flagged with the caller's membership and request state"""
    return CompanyService.search_companies(db, user.user_id, q)


@router.get("/{company_id}", response_model=CompanyDetailResponse)
def get_company(
    background_tasks: BackgroundTasks,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    detail = CompanyService.get_company_detail(db, membership)
    background_tasks.add_task(
        FeatureService.ensure_required_features, membership.company_id
    )
    return detail


@router.patch("/{company_id}", response_model=CompanyResponse)
def update_company(
    payload: CompanyUpdate,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    company = CompanyService.update_company(db, membership.company_id, payload)
    return CompanyResponse.model_validate(company)


@router.delete("/{company_id}", response_model=DeletedResponse)
def delete_company(
    membership: CompanyMembership = Depends(require_company_owner),
    db: Session = Depends(get_db),
):
    """Delete the company and everything scoped to it"""
    CompanyService.delete_company(db, membership.company_id)
    return deleted(membership.company_id)


# ----- members -----


@router.get("/{company_id}/members", response_model=List[MemberResponse])
def list_members(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return MembershipService.list_members(db, membership.company_id)


@router.patch("/{company_id}/members/{user_id}", response_model=MemberResponse)
def update_member_role(
    user_id: str,
    payload: MemberRoleUpdate,
    membership: CompanyMembership = Depends(require_company_owner),
    db: Session = Depends(get_db),
):
    return MembershipService.update_member_role(
        db, membership.company_id, user_id, payload.role
    )


@router.delete("/{company_id}/members/{user_id}", response_model=MemberRemovalResponse)
def remove_member(
    user_id: str,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Leave the company, or (as owner) remove another member"""
    return MembershipService.remove_member(db, membership.company_id, membership, user_id)


# ----- feature flags -----


@router.get("/{company_id}/features", response_model=List[FeatureResponse])
def list_features(
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    features = FeatureService.list_features(db, membership.company_id)
    return [FeatureResponse.model_validate(f) for f in features]


@router.post("/{company_id}/features", response_model=FeatureResponse)
def set_feature(
    payload: FeatureUpsert,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    feature = FeatureService.set_feature(db, membership.company_id, payload)
    return FeatureResponse.model_validate(feature)
