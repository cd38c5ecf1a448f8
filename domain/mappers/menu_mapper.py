"""
Menu domain mappers.
Handles transformation between menu ORM models and DTOs, including the
cost breakdown shown per container.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from domain.models import Menu, MenuContainer
from domain.schemas.menu_schemas import (
    MenuResponse,
    MenuContainerResponse,
    MenuIngredientResponse,
)


def line_cost(amount, price, package_amount) -> Decimal:
    """Cost of ``amount`` of an ingredient bought at ``price`` per package"""
    package_amount = Decimal(package_amount)
    if package_amount <= 0:
        return Decimal("0")
    return Decimal(amount) * Decimal(price) / package_amount


def round_cost(value: Decimal) -> Decimal:
    """Round half up to whole currency units"""
    return Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def menu_cost(lines: Iterable[Tuple[Decimal, Decimal, Decimal]]) -> Decimal:
    """Rounded total of (amount, price, package_amount) lines"""
    return round_cost(sum((line_cost(*line) for line in lines), Decimal("0")))


class MenuMapper:
    """Mapper for menu transformations."""

    @staticmethod
    def container_to_response(menu_container: MenuContainer) -> MenuContainerResponse:
        ingredients = []
        total = Decimal("0")
        for line in menu_container.ingredients:
            ing = line.ingredient
            cost = line_cost(line.amount, ing.price, ing.package_amount)
            total += cost
            ingredients.append(
                MenuIngredientResponse(
                    ingredient_id=ing.ingredient_id,
                    name=ing.name,
                    code_name=ing.code_name,
                    amount=float(line.amount),
                    unit=ing.unit,
                    price=float(ing.price),
                    package_amount=float(ing.package_amount),
                    cost=float(round_cost(cost)),
                )
            )

        container = menu_container.container
        ingredients_cost = round_cost(total)
        container_price = Decimal(container.price or 0)
        return MenuContainerResponse(
            menu_container_id=menu_container.menu_container_id,
            container_id=container.container_id,
            container_name=container.name,
            container_price=float(container_price),
            ingredients=ingredients,
            ingredients_cost=float(ingredients_cost),
            total_cost=float(container_price + ingredients_cost),
        )

    @staticmethod
    def to_response(menu: Menu) -> MenuResponse:
        """
        Convert Menu ORM model to MenuResponse DTO.

        Args:
            menu: Menu with containers, container ingredients and
                ingredients loaded

        Returns:
            MenuResponse with per-container ingredient and total costs
        """
        return MenuResponse(
            menu_id=menu.menu_id,
            company_id=menu.company_id,
            name=menu.name,
            code=menu.code,
            description=menu.description,
            recipe=menu.recipe,
            cost_price=float(menu.cost_price or 0),
            containers=[MenuMapper.container_to_response(mc) for mc in menu.containers],
            created_at=menu.created_at,
            updated_at=menu.updated_at,
        )
