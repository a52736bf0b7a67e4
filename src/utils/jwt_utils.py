"""Session token issuance.

Tokens are HS256 JWTs whose ``sub`` claim is the user name. Nothing in the
service verifies them yet; clients are treated as logged in while they hold
the cookie.
"""

from datetime import datetime, timedelta

import pytz
from jose import jwt

from config import JWT_ALGORITHM, JWT_SECRET_KEY, TOKEN_COOKIE_MAX_AGE


def create_access_token(data: dict) -> str:
    """Create a JWT access token that expires with the session cookie.

    Args:
        data: Data to encode in the token.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    expire = datetime.now(pytz.utc) + timedelta(seconds=TOKEN_COOKIE_MAX_AGE)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt


def generate_token(name: str) -> str:
    """Issue a session token bound to ``name``."""
    return create_access_token({"sub": name})
