"""API routes package"""

from . import (
    health,
    users,
    webhooks,
    companies,
    invitations,
    join_requests,
    ingredients,
    containers,
    menus,
    meal_plans,
    marketplace,
    warehouses,
    stock,
    audits,
    admin,
)

__all__ = [
    "health",
    "users",
    "webhooks",
    "companies",
    "invitations",
    "join_requests",
    "ingredients",
    "containers",
    "menus",
    "meal_plans",
    "marketplace",
    "warehouses",
    "stock",
    "audits",
    "admin",
]
