from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID

from domain.enums import MembershipRole, RequestStatus


class CompanyCreate(BaseModel):
    """Schema for creating a company. Name is checked by the service."""

    name: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None


class CompanyResponse(BaseModel):
    company_id: UUID
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeatureResponse(BaseModel):
    feature_name: str
    is_enabled: bool
    config: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeatureUpsert(BaseModel):
    """Toggle a feature; accepts the camelCase keys the web client sends"""

    feature_name: str = Field(..., alias="featureName", min_length=1)
    is_enabled: bool = Field(..., alias="isEnabled")
    config: Optional[Dict[str, Any]] = None

    model_config = {"populate_by_name": True}


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailResponse(BaseModel):
    company: CompanyResponse
    features: List[FeatureResponse]
    role: MembershipRole


class CompanySearchResult(CompanyResponse):
    is_member: bool = False
    has_pending_request: bool = False


class MemberResponse(BaseModel):
    """Membership joined with the member's user row"""

    membership_id: UUID
    user_id: str
    role: MembershipRole
    joined_at: Optional[datetime] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    display_name: str


class MemberRoleUpdate(BaseModel):
    role: MembershipRole


class MemberRemovalResponse(BaseModel):
    success: bool
    redirect: Optional[str] = None


class InvitationCreate(BaseModel):
    invited_user_id: str = Field(..., min_length=1)
    role: MembershipRole = MembershipRole.MEMBER


class InvitationResponse(BaseModel):
    invitation_id: UUID
    company_id: UUID
    company_name: Optional[str] = None
    invited_by: str
    invited_user_id: str
    role: MembershipRole
    status: RequestStatus
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class JoinRequestCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=500)


class JoinRequestResponse(BaseModel):
    request_id: UUID
    company_id: UUID
    user_id: str
    message: Optional[str] = None
    status: RequestStatus
    created_at: Optional[datetime] = None
    email: Optional[str] = None
    display_name: Optional[str] = None

    model_config = {"from_attributes": True}


class JoinRequestCount(BaseModel):
    count: int
