"""Custom exception classes for the user administration service.

This module defines application-specific exceptions following Google Python
Style Guide. The Credential Store raises the persistence-level errors and the
Auth Flow raises the request-level ones; the HTTP layer maps each of them to a
response envelope code.
"""


class UserServiceError(Exception):
    """Base exception for all user service errors."""

    pass


class DuplicateUserError(UserServiceError):
    """Raised when a user name is already taken."""

    def __init__(self, name: str):
        """Initialize the exception.

        Args:
            name: The user name that collided with an existing user.
        """
        self.name = name
        super().__init__(f"User '{name}' already exists")


class InvalidCredentialsError(UserServiceError):
    """Raised when a login does not match any user.

    Unknown names and wrong passwords both raise this error so callers cannot
    tell which one happened.
    """

    def __init__(self):
        super().__init__("Invalid username or password")


class UserNotFoundError(UserServiceError):
    """Raised when a user addressed by id does not exist."""

    def __init__(self, user_id: int):
        """Initialize the exception.

        Args:
            user_id: The ID of the user that was not found.
        """
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class BadRequestError(UserServiceError):
    """Raised when a request is missing a required field."""

    pass


class StoreError(UserServiceError):
    """Raised when the database fails for any other reason."""

    pass
