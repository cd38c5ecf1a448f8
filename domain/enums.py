"""
Domain enums for the FoodOps application.
Contains all enumeration types used across the domain models.
"""

import enum


class PlatformRole(str, enum.Enum):
    """Identity-level role, independent of any company"""

    HEAD_ADMIN = "headAdmin"
    USER = "user"
    TESTER = "tester"
    PENDING = "pending"


class MembershipRole(str, enum.Enum):
    """Role of a user inside one company"""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class RequestStatus(str, enum.Enum):
    """Lifecycle of invitations and join requests"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SubscriptionStatus(str, enum.Enum):
    """Company subscription to a marketplace module"""

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class MealTime(str, enum.Enum):
    """Meal slots a plan can be scheduled for"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class StockItemType(str, enum.Enum):
    """Kinds of things kept in stock"""

    INGREDIENT = "ingredient"
    CONTAINER = "container"


class TransactionType(str, enum.Enum):
    """Stock movements"""

    INCOMING = "incoming"
    OUTGOING = "outgoing"
    DISPOSAL = "disposal"
    ADJUSTMENT = "adjustment"


class AuditStatus(str, enum.Enum):
    """Stock audit session lifecycle"""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AuditItemStatus(str, enum.Enum):
    """Per-item counting state within an audit"""

    PENDING = "pending"
    COMPLETED = "completed"
    DISCREPANCY = "discrepancy"


# Meal times in the order plans are listed for a day
MEAL_TIME_ORDER = {
    MealTime.BREAKFAST: 0,
    MealTime.LUNCH: 1,
    MealTime.DINNER: 2,
}
