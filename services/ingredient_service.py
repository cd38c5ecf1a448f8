from typing import List, Optional
from uuid import UUID
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from domain.models import Ingredient, Supplier
from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
    IngredientListResponse,
    SupplierCreate,
    SupplierUpdate,
)
from repositories import IngredientRepository, SupplierRepository
from app.exceptions import NotFoundError, ConflictError, ServiceValidationError

logger = logging.getLogger("foodops.ingredients")


def _to_response(ingredient: Ingredient) -> IngredientResponse:
    response = IngredientResponse.model_validate(ingredient)
    if ingredient.supplier is not None:
        response.supplier_name = ingredient.supplier.name
    return response


def _clean_code(code_name: Optional[str]) -> Optional[str]:
    if code_name is None:
        return None
    return code_name.strip() or None


class IngredientService:
    @staticmethod
    def list_ingredients(
        db: Session,
        company_id: UUID,
        term: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> IngredientListResponse:
        page = max(page, 1)
        items, total = IngredientRepository(db).search(
            company_id, term, offset=(page - 1) * limit, limit=limit
        )
        return IngredientListResponse(
            ingredients=[_to_response(i) for i in items],
            total=total,
            page=page,
            limit=limit,
        )

    @staticmethod
    def get_ingredient(db: Session, company_id: UUID, ingredient_id: UUID) -> Ingredient:
        ingredient = IngredientRepository(db).get_for_company(company_id, ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        return ingredient

    @staticmethod
    def get_ingredient_response(
        db: Session, company_id: UUID, ingredient_id: UUID
    ) -> IngredientResponse:
        return _to_response(IngredientService.get_ingredient(db, company_id, ingredient_id))

    @staticmethod
    def _check_refs(
        db: Session,
        company_id: UUID,
        code_name: Optional[str],
        supplier_id: Optional[UUID],
        exclude_id: Optional[UUID] = None,
    ) -> None:
        if code_name and IngredientRepository(db).code_name_taken(
            company_id, code_name, exclude_id
        ):
            raise ConflictError(
                f"Code name '{code_name}' is already used by another ingredient",
                code="DUPLICATE_CODE_NAME",
            )
        if supplier_id and not SupplierRepository(db).get_for_company(
            company_id, supplier_id
        ):
            raise ServiceValidationError(f"Supplier not found: {supplier_id}")

    @staticmethod
    def create_ingredient(
        db: Session, company_id: UUID, data: IngredientCreate
    ) -> IngredientResponse:
        """Create an ingredient and record its initial price"""
        code_name = _clean_code(data.code_name)
        IngredientService._check_refs(db, company_id, code_name, data.supplier_id)

        repo = IngredientRepository(db)
        try:
            ingredient = Ingredient(
                company_id=company_id,
                **data.model_dump(exclude={"code_name"}),
                code_name=code_name,
            )
            ingredient.name = ingredient.name.strip()
            repo.create(ingredient, commit=False)
            repo.add_price_history(ingredient.ingredient_id, ingredient.price, commit=False)
            db.commit()
            db.refresh(ingredient)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create ingredient for {company_id}: {e}")
            raise

        logger.info(f"Ingredient {ingredient.ingredient_id} created in {company_id}")
        return _to_response(ingredient)

    @staticmethod
    def update_ingredient(
        db: Session, company_id: UUID, ingredient_id: UUID, data: IngredientUpdate
    ) -> IngredientResponse:
        """Replace an ingredient's fields; a changed price is added to its history"""
        ingredient = IngredientService.get_ingredient(db, company_id, ingredient_id)
        code_name = _clean_code(data.code_name)
        IngredientService._check_refs(
            db, company_id, code_name, data.supplier_id, exclude_id=ingredient_id
        )

        price_changed = Decimal(ingredient.price) != data.price
        for field, value in data.model_dump(exclude={"code_name"}).items():
            setattr(ingredient, field, value)
        ingredient.name = ingredient.name.strip()
        ingredient.code_name = code_name

        repo = IngredientRepository(db)
        try:
            if price_changed:
                repo.add_price_history(ingredient.ingredient_id, data.price, commit=False)
            db.commit()
            db.refresh(ingredient)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update ingredient {ingredient_id}: {e}")
            raise
        return _to_response(ingredient)

    @staticmethod
    def delete_ingredient(db: Session, company_id: UUID, ingredient_id: UUID) -> None:
        ingredient = IngredientService.get_ingredient(db, company_id, ingredient_id)
        repo = IngredientRepository(db)
        if repo.is_used_by_menu(ingredient_id):
            raise ConflictError(
                "Ingredient is used by one or more menus", code="INGREDIENT_IN_USE"
            )
        repo.delete(ingredient)
        logger.info(f"Ingredient {ingredient_id} deleted from {company_id}")

    @staticmethod
    def is_code_available(
        db: Session, company_id: UUID, code: Optional[str], exclude_id: Optional[UUID] = None
    ) -> bool:
        code = _clean_code(code)
        if not code:
            return True
        return not IngredientRepository(db).code_name_taken(company_id, code, exclude_id)

    @staticmethod
    def price_history(db: Session, company_id: UUID, ingredient_id: UUID):
        IngredientService.get_ingredient(db, company_id, ingredient_id)
        return IngredientRepository(db).price_history(ingredient_id)


class SupplierService:
    @staticmethod
    def list_suppliers(db: Session, company_id: UUID) -> List[Supplier]:
        return SupplierRepository(db).list_for_company(company_id)

    @staticmethod
    def _get(db: Session, company_id: UUID, supplier_id: UUID) -> Supplier:
        supplier = SupplierRepository(db).get_for_company(company_id, supplier_id)
        if not supplier:
            raise NotFoundError(f"Supplier not found: {supplier_id}")
        return supplier

    @staticmethod
    def create_supplier(db: Session, company_id: UUID, data: SupplierCreate) -> Supplier:
        repo = SupplierRepository(db)
        name = data.name.strip()
        if repo.name_taken(company_id, name):
            raise ConflictError(f"Supplier '{name}' already exists", code="DUPLICATE_SUPPLIER")
        return repo.create(Supplier(company_id=company_id, name=name, contact=data.contact))

    @staticmethod
    def update_supplier(
        db: Session, company_id: UUID, supplier_id: UUID, data: SupplierUpdate
    ) -> Supplier:
        repo = SupplierRepository(db)
        supplier = SupplierService._get(db, company_id, supplier_id)
        if data.name is not None:
            name = data.name.strip()
            if repo.name_taken(company_id, name, exclude_id=supplier_id):
                raise ConflictError(
                    f"Supplier '{name}' already exists", code="DUPLICATE_SUPPLIER"
                )
            supplier.name = name
        if data.contact is not None:
            supplier.contact = data.contact
        return repo.update(supplier)

    @staticmethod
    def delete_supplier(db: Session, company_id: UUID, supplier_id: UUID) -> None:
        supplier = SupplierService._get(db, company_id, supplier_id)
        repo = SupplierRepository(db)
        repo.detach_ingredients(supplier_id)
        repo.delete(supplier)
        logger.info(f"Supplier {supplier_id} deleted from {company_id}")
