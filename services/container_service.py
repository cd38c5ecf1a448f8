from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import Container, ContainerCategory
from domain.schemas.menu_schemas import (
    ContainerCategoryCreate,
    ContainerCategoryUpdate,
    ContainerCreate,
    ContainerUpdate,
)
from repositories import ContainerCategoryRepository, ContainerRepository
from app.exceptions import NotFoundError, ConflictError, ServiceValidationError

logger = logging.getLogger("foodops.containers")


class ContainerService:
    @staticmethod
    def list_containers(db: Session, company_id: UUID) -> List[Container]:
        return ContainerRepository(db).list_for_company(company_id)

    @staticmethod
    def get_container(db: Session, company_id: UUID, container_id: UUID) -> Container:
        container = ContainerRepository(db).get_for_company(company_id, container_id)
        if not container:
            raise NotFoundError(f"Container not found: {container_id}")
        return container

    @staticmethod
    def _validate(
        db: Session,
        company_id: UUID,
        data: ContainerCreate,
        container_id: Optional[UUID] = None,
    ) -> Optional[str]:
        repo = ContainerRepository(db)
        code_name = (data.code_name or "").strip() or None
        if code_name and repo.code_name_taken(company_id, code_name, container_id):
            raise ConflictError(
                f"Code name '{code_name}' is already used by another container",
                code="DUPLICATE_CODE_NAME",
            )
        parent_id = data.parent_container_id
        if parent_id is not None:
            if container_id is not None and parent_id == container_id:
                raise ServiceValidationError("A container cannot be its own parent")
            if not repo.get_for_company(company_id, parent_id):
                raise ServiceValidationError(f"Parent container not found: {parent_id}")
        category_id = data.category_id
        if category_id is not None:
            if not ContainerCategoryRepository(db).get_for_company(company_id, category_id):
                raise ServiceValidationError(f"Container category not found: {category_id}")
        return code_name

    @staticmethod
    def create_container(db: Session, company_id: UUID, data: ContainerCreate) -> Container:
        code_name = ContainerService._validate(db, company_id, data)
        container = ContainerRepository(db).create(
            Container(
                company_id=company_id,
                name=data.name.strip(),
                code_name=code_name,
                description=data.description,
                price=data.price,
                parent_container_id=data.parent_container_id,
                category_id=data.category_id,
            )
        )
        logger.info(f"Container {container.container_id} created in {company_id}")
        return container

    @staticmethod
    def update_container(
        db: Session, company_id: UUID, container_id: UUID, data: ContainerUpdate
    ) -> Container:
        container = ContainerService.get_container(db, company_id, container_id)
        code_name = ContainerService._validate(db, company_id, data, container_id)
        container.name = data.name.strip()
        container.code_name = code_name
        container.description = data.description
        container.price = data.price
        container.parent_container_id = data.parent_container_id
        container.category_id = data.category_id
        return ContainerRepository(db).update(container)

    @staticmethod
    def delete_container(db: Session, company_id: UUID, container_id: UUID) -> None:
        container = ContainerService.get_container(db, company_id, container_id)
        repo = ContainerRepository(db)
        if repo.is_used_by_menu(container_id):
            raise ConflictError(
                "Container is used by one or more menus", code="CONTAINER_IN_USE"
            )
        for child in repo.list_children(container_id):
            child.parent_container_id = None
        repo.delete(container)
        logger.info(f"Container {container_id} deleted from {company_id}")

    @staticmethod
    def is_code_available(
        db: Session, company_id: UUID, code: Optional[str], exclude_id: Optional[UUID] = None
    ) -> bool:
        code = (code or "").strip()
        if not code:
            return True
        return not ContainerRepository(db).code_name_taken(company_id, code, exclude_id)

    # ----- categories -----

    @staticmethod
    def list_categories(db: Session, company_id: UUID) -> List[ContainerCategory]:
        return ContainerCategoryRepository(db).list_for_company(company_id)

    @staticmethod
    def _get_category(db: Session, company_id: UUID, category_id: UUID) -> ContainerCategory:
        category = ContainerCategoryRepository(db).get_for_company(company_id, category_id)
        if not category:
            raise NotFoundError(f"Container category not found: {category_id}")
        return category

    @staticmethod
    def _clean_category(
        db: Session,
        company_id: UUID,
        data: ContainerCategoryCreate,
        category_id: Optional[UUID] = None,
    ) -> tuple:
        name = data.name.strip()
        code = data.code.strip()
        if not name or not code:
            raise ServiceValidationError("Category name and code are required")
        if ContainerCategoryRepository(db).code_taken(company_id, code, category_id):
            raise ConflictError(
                f"Category code '{code}' is already in use", code="DUPLICATE_CODE"
            )
        return name, code

    @staticmethod
    def create_category(
        db: Session, company_id: UUID, data: ContainerCategoryCreate
    ) -> ContainerCategory:
        name, code = ContainerService._clean_category(db, company_id, data)
        category = ContainerCategoryRepository(db).create(
            ContainerCategory(company_id=company_id, name=name, code=code)
        )
        logger.info(f"Container category {category.category_id} created in {company_id}")
        return category

    @staticmethod
    def update_category(
        db: Session, company_id: UUID, category_id: UUID, data: ContainerCategoryUpdate
    ) -> ContainerCategory:
        category = ContainerService._get_category(db, company_id, category_id)
        category.name, category.code = ContainerService._clean_category(
            db, company_id, data, category_id
        )
        return ContainerCategoryRepository(db).update(category)

    @staticmethod
    def delete_category(db: Session, company_id: UUID, category_id: UUID) -> None:
        category = ContainerService._get_category(db, company_id, category_id)
        repo = ContainerCategoryRepository(db)
        if repo.is_in_use(category_id):
            raise ConflictError(
                "Category is assigned to one or more containers", code="CATEGORY_IN_USE"
            )
        repo.delete(category)
        logger.info(f"Container category {category_id} deleted from {company_id}")
