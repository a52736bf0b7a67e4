"""Registration, login, logout and profile update orchestration.

The flow never touches HTTP objects. Login and logout hand back a
``SessionCookie`` describing the cookie the transport layer must set.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import config
from core.exceptions import BadRequestError, DuplicateUserError, InvalidCredentialsError
from schemas.user import UserCreate, UserPublic, UserUpdate
from utils.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionCookie:
    name: str
    value: str
    max_age: int
    path: str = config.TOKEN_COOKIE_PATH
    http_only: bool = True


@dataclass(frozen=True)
class LoginResult:
    user: UserPublic
    cookie: SessionCookie


class AuthFlow:
    """Auth operations on top of a user store and a token generator."""

    def __init__(self, store: UserStore, token_generator: Callable[[str], str]):
        """Initialize AuthFlow.

        Args:
            store: Credential store for the user table.
            token_generator: Callable issuing a session token for a user name.
        """
        self.store = store
        self.token_generator = token_generator

    def register(self, user: UserCreate) -> UserPublic:
        """Register a new user.

        The name lookup only gives an early answer; the store's unique
        constraint still decides when two registrations race.

        Args:
            user: Registration payload.

        Returns:
            The stored user.

        Raises:
            DuplicateUserError: If the name is already taken.
            StoreError: On any other database failure.
        """
        if self.store.find_by_name(user.name) is not None:
            logger.info("Registration rejected, name exists: %s", user.name)
            raise DuplicateUserError(user.name)
        return self.store.insert(user)

    def login(self, name: Optional[str], password: Optional[str]) -> LoginResult:
        """Log a user in.

        Args:
            name: User name.
            password: Plain text password.

        Returns:
            LoginResult with the user and the session cookie to set.

        Raises:
            InvalidCredentialsError: If either value is missing, the name is
                unknown or the password is wrong.
        """
        user = None
        if name is not None and password is not None:
            user = self.store.find_by_name_and_password(name, password)
        if user is None:
            logger.info("Failed login for name: %s", name)
            raise InvalidCredentialsError()

        token = self.token_generator(name)
        cookie = SessionCookie(
            name=config.TOKEN_COOKIE_NAME,
            value=token,
            max_age=config.TOKEN_COOKIE_MAX_AGE,
        )
        logger.info("User logged in: %s", name)
        return LoginResult(user=user, cookie=cookie)

    def logout(self) -> SessionCookie:
        """Return the cookie that overwrites and expires the session cookie."""
        return SessionCookie(name=config.TOKEN_COOKIE_NAME, value="", max_age=0)

    def update(self, user: UserUpdate) -> UserPublic:
        """Apply a profile update.

        Raises:
            BadRequestError: If ``user.id`` is missing.
            UserNotFoundError: If no user has this id.
            DuplicateUserError: If the new name belongs to another user.
            StoreError: On any other database failure.
        """
        if user.id is None:
            raise BadRequestError("User id is required")
        return self.store.update_by_id(user.id, user.changes())
