"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

from domain.models import AppUser
from domain.schemas.user_schemas import UserResponse, UserSearchResult


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_response(user: AppUser) -> UserResponse:
        """
        Convert AppUser ORM model to UserResponse DTO.

        Args:
            user: AppUser ORM instance

        Returns:
            UserResponse DTO including the computed display name
        """
        return UserResponse(
            user_id=user.user_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            image_url=user.image_url,
            role=user.role,
            display_name=user.display_name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    def to_search_result(user: AppUser) -> UserSearchResult:
        return UserSearchResult(
            user_id=user.user_id,
            email=user.email,
            display_name=user.display_name,
            image_url=user.image_url,
        )
