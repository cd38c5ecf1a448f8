"""
API dependencies for dependency injection
"""

from typing import Callable, Generator, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.exceptions import ForbiddenError, UnauthorizedError
from app.security import verify_session_token
from domain.enums import MembershipRole, PlatformRole
from domain.models import AppUser, CompanyMembership, get_db_session
from services.feature_service import FeatureService
from services.membership_service import ADMIN_ROLES, MembershipService
from services.user_service import UserService


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> AppUser:
    """Resolve the bearer token to the caller's user mirror."""
    if not authorization:
        raise UnauthorizedError("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Authorization header must be a Bearer token")

    claims = verify_session_token(token.strip())
    return UserService.get_or_create(db, claims["sub"], claims)


def get_company_membership(
    company_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CompanyMembership:
    return MembershipService.require_membership(db, company_id, user.user_id)


def require_company_admin(
    membership: CompanyMembership = Depends(get_company_membership),
) -> CompanyMembership:
    if membership.role not in ADMIN_ROLES:
        raise ForbiddenError("Company owner or admin role required")
    return membership


def require_company_owner(
    membership: CompanyMembership = Depends(get_company_membership),
) -> CompanyMembership:
    if membership.role != MembershipRole.OWNER:
        raise ForbiddenError("Company owner role required")
    return membership


def require_feature(feature_name: str) -> Callable[..., CompanyMembership]:
    """
    Build a dependency that admits members of companies with ``feature_name``
    enabled.

    Usage:
        router = APIRouter(dependencies=[Depends(require_feature("menus"))])
    """

    def dependency(
        membership: CompanyMembership = Depends(get_company_membership),
        db: Session = Depends(get_db),
    ) -> CompanyMembership:
        if not FeatureService.is_feature_enabled(db, membership.company_id, feature_name):
            raise ForbiddenError(
                f"Feature '{feature_name}' is not enabled for this company",
                code="FEATURE_DISABLED",
            )
        return membership

    return dependency


def require_platform_admin(user: AppUser = Depends(get_current_user)) -> AppUser:
    if user.role != PlatformRole.HEAD_ADMIN:
        raise ForbiddenError("Platform administrator role required")
    return user
