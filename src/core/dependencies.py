"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import auth_flow
from utils import jwt_utils
from utils import user_store


def get_user_store(db: Session = Depends(get_db)) -> user_store.UserStore:
    """Get UserStore instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserStore instance.
    """
    return user_store.UserStore(db)


def get_auth_flow(
    store: user_store.UserStore = Depends(get_user_store),
) -> auth_flow.AuthFlow:
    """Get AuthFlow instance sharing the request's UserStore.

    Args:
        store: Request-scoped UserStore.

    Returns:
        AuthFlow instance.
    """
    return auth_flow.AuthFlow(store, jwt_utils.generate_token)


# Type aliases for dependency injection
UserStoreDep = Annotated[user_store.UserStore, Depends(get_user_store)]
AuthFlowDep = Annotated[auth_flow.AuthFlow, Depends(get_auth_flow)]
