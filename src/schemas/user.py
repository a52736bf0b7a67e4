"""User schema definitions.

Request and response models for the user endpoints. Fields are snake_case in
Python and camelCase on the wire (``birthDate``, ``createTime``).
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

import config


class UserSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserProfile(UserSchema):
    """Free-text profile attributes shared by every user payload."""

    sex: Optional[str] = None
    birth_date: Optional[date] = None
    department: Optional[str] = None
    telephone: Optional[str] = None
    email: Optional[str] = None


class UserCreate(UserProfile):
    name: str = Field(min_length=1, description="Unique login name.")
    password: str = Field(min_length=1, description="Plain text password, stored hashed.")
    role: Optional[str] = Field(
        default=config.DEFAULT_USER_ROLE, description="e.g. ADMIN or USER"
    )

    @field_validator("role")
    @classmethod
    def default_role(cls, role: Optional[str]) -> str:
        return role or config.DEFAULT_USER_ROLE


class UserUpdate(UserProfile):
    """Partial overwrite of a stored user; only non-null fields are applied."""

    # Optional here so that a missing id is reported as a bad request by the
    # flow instead of a validation error.
    id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = None

    def changes(self) -> dict:
        """Return the fields to overwrite, keyed by column name."""
        return self.model_dump(exclude={"id"}, exclude_none=True)


class LoginRequest(BaseModel):
    # Missing values are answered like any other mismatch.
    name: Optional[str] = None
    password: Optional[str] = None


class UserPublic(UserProfile):
    """Outbound user record. Has no password field at all."""

    id: int
    name: str
    role: Optional[str] = None
    create_time: Optional[datetime] = None
