"""Ingredient and supplier routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.dependencies import (
    get_db,
    get_company_membership,
    require_company_admin,
    require_feature,
)
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import CompanyMembership
from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
    IngredientListResponse,
    IngredientPriceHistoryResponse,
    CodeAvailability,
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
)
from services.ingredient_service import IngredientService, SupplierService

router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["Ingredients"],
    dependencies=[Depends(require_feature("ingredients"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.ingredients")


@router.get("/ingredients", response_model=IngredientListResponse)
def list_ingredients(
    q: Optional[str] = Query(None, description="Match on name or code name"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return IngredientService.list_ingredients(db, membership.company_id, q, page, limit)


@router.post(
    "/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient(
    payload: IngredientCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Create an ingredient and record its first price"""
    return IngredientService.create_ingredient(db, membership.company_id, payload)


@router.get("/ingredients/check-code", response_model=CodeAvailability)
def check_ingredient_code(
    code: Optional[str] = Query(None),
    exclude_id: Optional[UUID] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    available = IngredientService.is_code_available(
        db, membership.company_id, code, exclude_id
    )
    return CodeAvailability(available=available)


@router.get("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(
    ingredient_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return IngredientService.get_ingredient_response(db, membership.company_id, ingredient_id)


@router.put("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    return IngredientService.update_ingredient(
        db, membership.company_id, ingredient_id, payload
    )


@router.delete("/ingredients/{ingredient_id}", response_model=DeletedResponse)
def delete_ingredient(
    ingredient_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    """Delete an ingredient that no menu uses"""
    IngredientService.delete_ingredient(db, membership.company_id, ingredient_id)
    return deleted(ingredient_id)


@router.get(
    "/ingredients/{ingredient_id}/price-history",
    response_model=List[IngredientPriceHistoryResponse],
)
def get_ingredient_price_history(
    ingredient_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    history = IngredientService.price_history(db, membership.company_id, ingredient_id)
    return [IngredientPriceHistoryResponse.model_validate(h) for h in history]


# ----- suppliers -----


@router.get("/suppliers", response_model=List[SupplierResponse])
def list_suppliers(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    suppliers = SupplierService.list_suppliers(db, membership.company_id)
    return [SupplierResponse.model_validate(s) for s in suppliers]


@router.post(
    "/suppliers", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED
)
def create_supplier(
    payload: SupplierCreate,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    supplier = SupplierService.create_supplier(db, membership.company_id, payload)
    return SupplierResponse.model_validate(supplier)


@router.put("/suppliers/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: UUID,
    payload: SupplierUpdate,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    supplier = SupplierService.update_supplier(db, membership.company_id, supplier_id, payload)
    return SupplierResponse.model_validate(supplier)


@router.delete("/suppliers/{supplier_id}", response_model=DeletedResponse)
def delete_supplier(
    supplier_id: UUID,
    membership: CompanyMembership = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    """Delete a supplier; its ingredients are kept without a supplier"""
    SupplierService.delete_supplier(db, membership.company_id, supplier_id)
    return deleted(supplier_id)
