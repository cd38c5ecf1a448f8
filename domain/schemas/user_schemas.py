from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID

from domain.enums import PlatformRole, MembershipRole


class UserResponse(BaseModel):
    """Mirrored identity-provider user"""

    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    role: PlatformRole
    display_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Fields a user may change on their own profile"""

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserCompanyResponse(BaseModel):
    """A company the caller belongs to, with their role in it"""

    company_id: UUID
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    role: MembershipRole
    joined_at: Optional[datetime] = None


class UserSearchResult(BaseModel):
    user_id: str
    email: Optional[str] = None
    display_name: str
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class UserBatchRequest(BaseModel):
    user_ids: List[str] = Field(..., max_length=200)


class UserBatchResponse(BaseModel):
    """Display name keyed by user id"""

    names: Dict[str, str]


class PlatformRoleUpdate(BaseModel):
    role: PlatformRole
