"""User persistence (the Credential Store).

This module owns the ``sys_user`` table: exact-match lookups, inserts,
id-addressed updates and deletes, and paged listing. Password hashing lives
here too, so no password or hash ever leaves this module; every read returns
a ``UserPublic``.
"""

import logging
import secrets
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import List, Optional

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import config
from core.exceptions import DuplicateUserError, StoreError, UserNotFoundError
from models.user import SysUserModel
from schemas.user import UserCreate, UserPublic
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


@dataclass
class UserPage:
    """One page of users plus the counts needed to render a pager."""

    items: List[UserPublic]
    total: int
    pages: int
    current: int
    size: int


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string).
    """
    password_bytes = password.encode("utf-8")
    # bcrypt only looks at the first 72 bytes
    if len(password_bytes) > 72:
        logger.warning(
            "Password exceeds 72 bytes (%d bytes), truncating", len(password_bytes)
        )
        password_bytes = password_bytes[:72]

    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> bytes:
    """A throwaway hash to check against when the name is unknown."""
    return bcrypt.hashpw(b"unknown-user", bcrypt.gensalt(rounds=rounds))


def verify_password(plain_password: str, stored_password: str) -> bool:
    """Check a password against the stored value.

    Stored values that are not bcrypt hashes are legacy plaintext rows; they
    only match when ``ALLOW_PLAINTEXT_PASSWORDS`` is enabled.

    Args:
        plain_password: Plain text password to verify.
        stored_password: Value of the password column.

    Returns:
        True if password matches, False otherwise.
    """
    if not stored_password.startswith(BCRYPT_PREFIXES):
        if not config.ALLOW_PLAINTEXT_PASSWORDS:
            return False
        return secrets.compare_digest(
            plain_password.encode("utf-8"), stored_password.encode("utf-8")
        )

    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, stored_password.encode("utf-8"))
    except ValueError as e:
        logger.error("Password verification error: %s", e)
        return False


class UserStore:
    """Manages user data persistence using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserStore.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    @contextmanager
    def _reading(self):
        try:
            yield
        except SQLAlchemyError as e:
            raise StoreError(f"Database read failed: {e}") from e

    def _commit(self, name: Optional[str], user_id: Optional[int] = None) -> None:
        """Commit the pending write, translating database failures.

        A unique-constraint rejection is the authority on name uniqueness, so
        an IntegrityError is reported as a duplicate whenever another row
        holds ``name``.
        """
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if name is not None and self._name_taken(name, exclude_id=user_id):
                logger.info("Rejected duplicate user name: %s", name)
                raise DuplicateUserError(name) from e
            raise StoreError(f"Database write failed: {e}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Database write failed: {e}") from e

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        with self._reading():
            query = self.db.query(SysUserModel.id).filter(SysUserModel.name == name)
            if exclude_id is not None:
                query = query.filter(SysUserModel.id != exclude_id)
            return query.first() is not None

    def _get_model(self, user_id: int) -> Optional[SysUserModel]:
        with self._reading():
            return (
                self.db.query(SysUserModel)
                .filter(SysUserModel.id == user_id)
                .first()
            )

    def find_by_name(self, name: str) -> Optional[UserPublic]:
        """Get a user by exact name.

        Args:
            name: User name to look up.

        Returns:
            UserPublic if found, None otherwise.
        """
        with self._reading():
            model = self.db.query(SysUserModel).filter(SysUserModel.name == name).first()
        if model:
            return model_to_user(model)
        return None

    def find_by_name_and_password(self, name: str, password: str) -> Optional[UserPublic]:
        """Get the user whose name and password both match.

        Args:
            name: User name.
            password: Plain text password.

        Returns:
            UserPublic if both match, None otherwise.
        """
        with self._reading():
            model = self.db.query(SysUserModel).filter(SysUserModel.name == name).first()
        if model is None:
            # Same bcrypt cost as a wrong password, so timing does not reveal
            # whether the name exists.
            bcrypt.checkpw(
                password.encode("utf-8")[:72], _dummy_hash(config.BCRYPT_ROUNDS)
            )
            return None
        if not verify_password(password, model.password):
            return None
        return model_to_user(model)

    def find_by_id(self, user_id: int) -> Optional[UserPublic]:
        model = self._get_model(user_id)
        if model:
            return model_to_user(model)
        return None

    def insert(self, user: UserCreate) -> UserPublic:
        """Store a new user.

        Args:
            user: Registration payload.

        Returns:
            The stored user, with its assigned id.

        Raises:
            DuplicateUserError: If the name is already taken.
            StoreError: On any other database failure.
        """
        model = SysUserModel(
            **user.model_dump(exclude={"password"}),
            password=hash_password(user.password),
            create_time=datetime.now(pytz.utc),
        )
        self.db.add(model)
        self._commit(user.name)
        self.db.refresh(model)
        logger.info("Created user: %s (id=%s)", model.name, model.id)
        return model_to_user(model)

    def update_by_id(self, user_id: int, changes: dict) -> UserPublic:
        """Overwrite the given columns of an existing user.

        Args:
            user_id: ID of the user to update.
            changes: Column values to write; a ``password`` entry is hashed.

        Returns:
            The updated user.

        Raises:
            UserNotFoundError: If no user has this id.
            DuplicateUserError: If the new name belongs to another user.
            StoreError: On any other database failure.
        """
        model = self._get_model(user_id)
        if model is None:
            raise UserNotFoundError(user_id)

        for field, value in changes.items():
            if field == "password":
                value = hash_password(value)
            setattr(model, field, value)
        self._commit(changes.get("name"), user_id=user_id)
        self.db.refresh(model)
        logger.info("Updated user %s: %s", user_id, sorted(changes))
        return model_to_user(model)

    def delete_by_id(self, user_id: int) -> None:
        """Delete a user.

        Raises:
            UserNotFoundError: If no user has this id.
            StoreError: On any other database failure.
        """
        model = self._get_model(user_id)
        if model is None:
            raise UserNotFoundError(user_id)
        self.db.delete(model)
        self._commit(None)
        logger.info("Deleted user: %s", user_id)

    def list_page(
        self, page_num: Optional[int] = None, page_size: Optional[int] = None
    ) -> UserPage:
        """List users ordered by id, one page at a time.

        Pages are 1-based. Missing or non-positive arguments fall back to the
        configured defaults. A page past the end is empty.

        Args:
            page_num: Page number.
            page_size: Users per page.

        Returns:
            UserPage with the items and totals.
        """
        if not page_num or page_num < 1:
            page_num = config.DEFAULT_PAGE_NUM
        if not page_size or page_size < 1:
            page_size = config.DEFAULT_PAGE_SIZE

        with self._reading():
            total = self.db.query(SysUserModel).count()
            models = (
                self.db.query(SysUserModel)
                .order_by(SysUserModel.id)
                .offset((page_num - 1) * page_size)
                .limit(page_size)
                .all()
            )
        pages = (total + page_size - 1) // page_size
        return UserPage(
            items=[model_to_user(m) for m in models],
            total=total,
            pages=pages,
            current=page_num,
            size=page_size,
        )
