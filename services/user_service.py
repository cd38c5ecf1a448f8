from typing import List, Dict, Any, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from domain.models import AppUser
from domain.enums import PlatformRole
from domain.schemas.user_schemas import UserUpdate, UserCompanyResponse
from repositories import (
    UserRepository,
    MembershipRepository,
    InvitationRepository,
    JoinRequestRepository,
)
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("foodops.users")


class UserService:
    @staticmethod
    def get_or_create(db: Session, user_id: str, claims: Dict[str, Any] = None) -> AppUser:
        """
        Return the mirrored user for a token subject, creating it on first sight.

        The identity webhook may arrive after the first API call, so a user
        we have never seen is created with the ``pending`` platform role.
        """
        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        if user:
            return user

        claims = claims or {}
        user = AppUser(
            user_id=user_id,
            email=claims.get("email"),
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
            role=PlatformRole.PENDING,
        )
        try:
            user = user_repo.create(user)
        except IntegrityError:
            # Created concurrently by another request or the webhook
            db.rollback()
            user = user_repo.get_by_id(user_id)
            if not user:
                raise
        logger.info(f"Created user mirror for {user_id} on first request")
        return user

    @staticmethod
    def update_profile(db: Session, user: AppUser, data: UserUpdate) -> AppUser:
        if data.first_name is not None:
            user.first_name = data.first_name.strip() or None
        if data.last_name is not None:
            user.last_name = data.last_name.strip() or None
        return UserRepository(db).update(user)

    @staticmethod
    def list_companies(db: Session, user_id: str) -> List[UserCompanyResponse]:
        memberships = MembershipRepository(db).list_for_user(user_id)
        return [
            UserCompanyResponse(
                company_id=m.company.company_id,
                name=m.company.name,
                description=m.company.description,
                logo_url=m.company.logo_url,
                role=m.role,
                joined_at=m.created_at,
            )
            for m in memberships
        ]

    @staticmethod
    def search(db: Session, term: Optional[str]) -> List[AppUser]:
        term = (term or "").strip()
        if len(term) < 2:
            raise ServiceValidationError("Search term must be at least 2 characters")
        return UserRepository(db).search(term)

    @staticmethod
    def display_names(db: Session, user_ids: List[str]) -> Dict[str, str]:
        """Display name for each requested id; unknown ids map to themselves"""
        users = {u.user_id: u for u in UserRepository(db).get_many(list(set(user_ids)))}
        return {
            uid: users[uid].display_name if uid in users else uid for uid in user_ids
        }

    # ----- platform administration -----

    @staticmethod
    def list_users(db: Session, role: Optional[PlatformRole] = None) -> List[AppUser]:
        return UserRepository(db).list_users(role)

    @staticmethod
    def set_platform_role(db: Session, user_id: str, role: PlatformRole) -> AppUser:
        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        user.role = role
        user = user_repo.update(user)
        logger.info(f"Platform role of {user_id} set to {role.value}")
        return user

    # ----- identity provider synchronization -----

    @staticmethod
    def _primary_email(data: Dict[str, Any]) -> Optional[str]:
        addresses = data.get("email_addresses") or []
        primary_id = data.get("primary_email_address_id")
        for address in addresses:
            if address.get("id") == primary_id:
                return address.get("email_address")
        if addresses:
            return addresses[0].get("email_address")
        return data.get("email")

    @staticmethod
    def _metadata_role(data: Dict[str, Any]) -> Optional[PlatformRole]:
        raw = (data.get("public_metadata") or {}).get("role")
        if not raw:
            return None
        try:
            return PlatformRole(raw)
        except ValueError:
            logger.warning(f"Ignoring unknown platform role in identity metadata: {raw}")
            return None

    @staticmethod
    def sync_identity_user(db: Session, data: Dict[str, Any], created: bool) -> AppUser:
        """
        Upsert the user mirror from an identity-provider payload.

        New users get the role carried in metadata, else ``pending``.
        Existing users keep their role unless metadata carries one.
        """
        user_id = data.get("id")
        if not user_id:
            raise ServiceValidationError("Identity event has no user id")

        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        role = UserService._metadata_role(data)

        if user is None:
            user = AppUser(user_id=user_id, role=role or PlatformRole.PENDING)
            db.add(user)
        elif role is not None:
            user.role = role

        user.email = UserService._primary_email(data)
        user.first_name = data.get("first_name")
        user.last_name = data.get("last_name")
        user.image_url = data.get("image_url")

        db.commit()
        db.refresh(user)
        logger.info(f"Synchronized identity user {user_id} (created={created})")
        return user

    @staticmethod
    def delete_identity_user(db: Session, user_id: str) -> bool:
        """Remove a deleted identity-provider user and everything pointing at them"""
        user_repo = UserRepository(db)
        try:
            MembershipRepository(db).delete_for_user(user_id)
            InvitationRepository(db).delete_pending_for_user(user_id)
            JoinRequestRepository(db).delete_for_user(user_id)
            user = user_repo.get_by_id(user_id)
            if user:
                db.delete(user)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete identity user {user_id}: {e}")
            raise
        logger.info(f"Deleted identity user {user_id}")
        return user is not None
