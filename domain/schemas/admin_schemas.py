from pydantic import BaseModel

from domain.schemas.company_schemas import CompanyResponse


class AdminDashboard(BaseModel):
    """Platform-wide counters"""

    users: int
    pending_users: int
    companies: int
    memberships: int
    active_subscriptions: int


class AdminCompanyResponse(CompanyResponse):
    member_count: int = 0
