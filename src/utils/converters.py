"""Conversions between ORM rows and API payloads."""

from models.user import SysUserModel
from schemas.user import UserPublic


def model_to_user(model: SysUserModel) -> UserPublic:
    return UserPublic.model_validate(model)


def user_to_dict(user: UserPublic) -> dict:
    """Serialize a user for a response body with camelCase keys."""
    return user.model_dump(mode="json", by_alias=True)
