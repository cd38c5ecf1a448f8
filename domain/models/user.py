"""
Identity-provider user mirror.
"""

from sqlalchemy import Column, Text, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base, enum_column
from domain.enums import PlatformRole


class AppUser(Base):
    """User account mirrored from the identity provider"""

    __tablename__ = "app_user"

    # Identity provider subject, e.g. "user_2abc..."
    user_id = Column(Text, primary_key=True)
    email = Column(Text, index=True)
    first_name = Column(Text)
    last_name = Column(Text)
    image_url = Column(Text)
    role = Column(
        enum_column(PlatformRole), nullable=False, default=PlatformRole.PENDING
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    memberships = relationship(
        "CompanyMembership", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        if full:
            return full
        if self.email:
            return self.email.split("@")[0]
        return self.user_id
