"""Routes for the caller's own user record and user lookups"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from api.dependencies import get_db, get_current_user
from api.responses import AUTH_ERRORS
from domain.models import AppUser
from domain.schemas.user_schemas import (
    UserResponse,
    UserUpdate,
    UserCompanyResponse,
    UserSearchResult,
    UserBatchRequest,
    UserBatchResponse,
)
from domain.mappers import UserMapper
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"], responses=AUTH_ERRORS)
logger = logging.getLogger("foodops.api.users")


@router.get("/me", response_model=UserResponse)
def get_me(user: AppUser = Depends(get_current_user)):
    """Return the caller's user record"""
    return UserMapper.to_response(user)


@router.patch("/me", response_model=UserResponse)
def update_me(
    payload: UserUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's first and last name"""
    return UserMapper.to_response(UserService.update_profile(db, user, payload))


@router.get("/me/companies", response_model=List[UserCompanyResponse])
def get_my_companies(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    return UserService.list_companies(db, user.user_id)


@router.get("/search", response_model=List[UserSearchResult])
def search_users(
    q: Optional[str] = Query(None, description="At least 2 characters of an email or name"),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users = UserService.search(db, q)
    return [UserMapper.to_search_result(u) for u in users]


@router.post("/batch", response_model=UserBatchResponse)
def get_display_names(
    payload: UserBatchRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Resolve display names for a list of user ids"""
    return UserBatchResponse(names=UserService.display_names(db, payload.user_ids))
