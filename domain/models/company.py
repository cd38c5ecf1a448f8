"""
Company, membership and company-level configuration models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Boolean,
    JSON,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, enum_column
from domain.enums import MembershipRole, RequestStatus


class Company(Base):
    """A tenant"""

    __tablename__ = "company"

    company_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    description = Column(Text)
    logo_url = Column(Text)
    created_by = Column(Text, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    memberships = relationship(
        "CompanyMembership", back_populates="company", cascade="all, delete-orphan"
    )
    features = relationship(
        "CompanyFeature", back_populates="company", cascade="all, delete-orphan"
    )


class CompanyMembership(Base):
    """Links a user to a company with a role"""

    __tablename__ = "company_membership"
    __table_args__ = (
        UniqueConstraint("company_id", "user_id", name="uq_membership_company_user"),
    )

    membership_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Text, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    role = Column(
        enum_column(MembershipRole), nullable=False, default=MembershipRole.MEMBER
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    company = relationship("Company", back_populates="memberships")
    user = relationship("AppUser", back_populates="memberships")


class CompanyInvitation(Base):
    """Invitation from a company admin to a specific user"""

    __tablename__ = "company_invitation"

    invitation_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    invited_by = Column(Text, nullable=False)
    invited_user_id = Column(Text, nullable=False, index=True)
    role = Column(
        enum_column(MembershipRole), nullable=False, default=MembershipRole.MEMBER
    )
    status = Column(
        enum_column(RequestStatus), nullable=False, default=RequestStatus.PENDING
    )
    expires_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    company = relationship("Company")


class CompanyJoinRequest(Base):
    """A user asking to join a company"""

    __tablename__ = "company_join_request"

    request_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Text, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    message = Column(Text)
    status = Column(
        enum_column(RequestStatus), nullable=False, default=RequestStatus.PENDING
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    company = relationship("Company")
    user = relationship("AppUser")


class CompanyFeature(Base):
    """Per-company feature flag"""

    __tablename__ = "company_feature"
    __table_args__ = (
        UniqueConstraint("company_id", "feature_name", name="uq_feature_company_name"),
    )

    feature_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("company.company_id", ondelete="CASCADE"), nullable=False
    )
    feature_name = Column(Text, nullable=False)
    is_enabled = Column(Boolean, nullable=False, default=False)
    config = Column(JSON)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    company = relationship("Company", back_populates="features")
