"""
User Repository - Data access layer for mirrored identity-provider users
"""

from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import or_, func

from repositories.base import BaseRepository
from domain.models import AppUser
from domain.enums import PlatformRole


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_id(self, user_id: str) -> Optional[AppUser]:
        """Get user by identity-provider subject"""
        return self.db.query(AppUser).filter(AppUser.user_id == user_id).first()

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email"""
        return self.db.query(AppUser).filter(AppUser.email == email).first()

    def get_many(self, user_ids: List[str]) -> List[AppUser]:
        if not user_ids:
            return []
        return self.db.query(AppUser).filter(AppUser.user_id.in_(user_ids)).all()

    def search(self, term: str, limit: int = 20) -> List[AppUser]:
        """Case-insensitive substring match on email, first and last name"""
        pattern = f"%{term.lower()}%"
        return (
            self.db.query(AppUser)
            .filter(
                or_(
                    func.lower(AppUser.email).like(pattern),
                    func.lower(AppUser.first_name).like(pattern),
                    func.lower(AppUser.last_name).like(pattern),
                )
            )
            .order_by(AppUser.email)
            .limit(limit)
            .all()
        )

    def list_users(self, role: Optional[PlatformRole] = None) -> List[AppUser]:
        query = self.db.query(AppUser)
        if role is not None:
            query = query.filter(AppUser.role == role)
        return query.order_by(AppUser.created_at.desc()).all()

    def count(self, role: Optional[PlatformRole] = None) -> int:
        query = self.db.query(func.count(AppUser.user_id))
        if role is not None:
            query = query.filter(AppUser.role == role)
        return query.scalar() or 0
