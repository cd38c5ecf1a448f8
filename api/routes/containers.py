"""Container routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_db, get_company_membership, require_feature
from api.responses import COMPANY_ERRORS, DeletedResponse, deleted
from domain.models import CompanyMembership
from domain.schemas.ingredient_schemas import CodeAvailability
from domain.schemas.menu_schemas import (
    ContainerCategoryCreate,
    ContainerCategoryUpdate,
    ContainerCategoryResponse,
    ContainerCreate,
    ContainerUpdate,
    ContainerResponse,
)
from services.container_service import ContainerService

router = APIRouter(
    prefix="/companies/{company_id}/containers",
    tags=["Containers"],
    dependencies=[Depends(require_feature("menus"))],
    responses=COMPANY_ERRORS,
)
logger = logging.getLogger("foodops.api.containers")


@router.get("", response_model=List[ContainerResponse])
def list_containers(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    containers = ContainerService.list_containers(db, membership.company_id)
    return [ContainerResponse.model_validate(c) for c in containers]


@router.post("", response_model=ContainerResponse, status_code=status.HTTP_201_CREATED)
def create_container(
    payload: ContainerCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    container = ContainerService.create_container(db, membership.company_id, payload)
    return ContainerResponse.model_validate(container)


@router.get("/check-code", response_model=CodeAvailability)
def check_container_code(
    code: Optional[str] = Query(None),
    exclude_id: Optional[UUID] = Query(None),
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    available = ContainerService.is_code_available(db, membership.company_id, code, exclude_id)
    return CodeAvailability(available=available)


@router.get("/categories", response_model=List[ContainerCategoryResponse])
def list_container_categories(
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    categories = ContainerService.list_categories(db, membership.company_id)
    return [ContainerCategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/categories",
    response_model=ContainerCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_container_category(
    payload: ContainerCategoryCreate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    category = ContainerService.create_category(db, membership.company_id, payload)
    return ContainerCategoryResponse.model_validate(category)


@router.put("/categories/{category_id}", response_model=ContainerCategoryResponse)
def update_container_category(
    category_id: UUID,
    payload: ContainerCategoryUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    category = ContainerService.update_category(
        db, membership.company_id, category_id, payload
    )
    return ContainerCategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", response_model=DeletedResponse)
def delete_container_category(
    category_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    ContainerService.delete_category(db, membership.company_id, category_id)
    return deleted(category_id)


@router.get("/{container_id}", response_model=ContainerResponse)
def get_container(
    container_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    container = ContainerService.get_container(db, membership.company_id, container_id)
    return ContainerResponse.model_validate(container)


@router.put("/{container_id}", response_model=ContainerResponse)
def update_container(
    container_id: UUID,
    payload: ContainerUpdate,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    container = ContainerService.update_container(
        db, membership.company_id, container_id, payload
    )
    return ContainerResponse.model_validate(container)


@router.delete("/{container_id}", response_model=DeletedResponse)
def delete_container(
    container_id: UUID,
    membership: CompanyMembership = Depends(get_company_membership),
    db: Session = Depends(get_db),
):
    ContainerService.delete_container(db, membership.company_id, container_id)
    return deleted(container_id)
