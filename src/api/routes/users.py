"""User routes.

This module handles HTTP endpoints for registration, login, logout and user
administration. Every endpoint answers with the ``{code, message, data}``
envelope; the envelope code carries the outcome. Database failure details are
logged on the server only; the envelope carries a fixed message.
"""

import logging

from fastapi import APIRouter, Response

from config import DEFAULT_PAGE_NUM, DEFAULT_PAGE_SIZE
from core.dependencies import AuthFlowDep, UserStoreDep
from core.exceptions import (
    BadRequestError,
    DuplicateUserError,
    InvalidCredentialsError,
    StoreError,
    UserNotFoundError,
)
from schemas.response import ApiResponse
from schemas.user import LoginRequest, UserCreate, UserUpdate
from utils.auth_flow import SessionCookie
from utils.converters import user_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def _apply_cookie(response: Response, cookie: SessionCookie) -> None:
    response.set_cookie(
        key=cookie.name,
        value=cookie.value,
        max_age=cookie.max_age,
        path=cookie.path,
        httponly=cookie.http_only,
    )


@router.post("/register", summary="用户注册")
def register(user: UserCreate, auth_flow: AuthFlowDep) -> dict:
    """Register a new user.

    Args:
        user: Registration payload with name, password and profile fields.
        auth_flow: Injected AuthFlow instance.

    Returns:
        Envelope with the stored user (code 200), or code 400 for a taken
        name, or code 500 for a database failure.
    """
    try:
        stored = auth_flow.register(user)
    except DuplicateUserError:
        return ApiResponse.fail(400, "User name already exists").body()
    except StoreError as e:
        logger.error("Registration failed: %s", e)
        return ApiResponse.fail(500, "Registration failed").body()
    return ApiResponse.success("Registration successful", user_to_dict(stored)).body()


@router.post("/login", summary="用户登录")
def login(req: LoginRequest, response: Response, auth_flow: AuthFlowDep) -> dict:
    """Login with name and password.

    On success the session token is set as an HTTP-only cookie.

    Args:
        req: Login request with name and password.
        response: Response whose cookies are written.
        auth_flow: Injected AuthFlow instance.

    Returns:
        Envelope with the user (code 200), code 401 for bad credentials, or
        code 500 for a database failure.
    """
    try:
        result = auth_flow.login(req.name, req.password)
    except InvalidCredentialsError:
        return ApiResponse.fail(401, "Invalid username or password").body()
    except StoreError as e:
        logger.error("Login failed: %s", e)
        return ApiResponse.fail(500, "Login failed").body()

    _apply_cookie(response, result.cookie)
    return ApiResponse.success("Login successful", user_to_dict(result.user)).body()


@router.post("/logout", summary="用户登出")
def logout(response: Response, auth_flow: AuthFlowDep) -> dict:
    """Logout by expiring the session cookie.

    Returns:
        Envelope with code 200.
    """
    _apply_cookie(response, auth_flow.logout())
    return ApiResponse.success("Logout successful").body()


# Registered before "/{user_id}" so "page" is not parsed as an id.
@router.get("/page", summary="分页查询用户")
def get_user_page(
    user_store: UserStoreDep,
    pageNum: int = DEFAULT_PAGE_NUM,
    pageSize: int = DEFAULT_PAGE_SIZE,
) -> dict:
    """List users one page at a time.

    Args:
        user_store: Injected UserStore instance.
        pageNum: 1-based page number.
        pageSize: Users per page.

    Returns:
        Envelope with ``data``, ``total``, ``pages``, ``current`` and ``size``.
    """
    try:
        page = user_store.list_page(pageNum, pageSize)
    except StoreError as e:
        logger.error("Paged query failed: %s", e)
        return ApiResponse.fail(500, "Paged query failed").body()
    return ApiResponse.page(
        "Query successful",
        data=[user_to_dict(u) for u in page.items],
        total=page.total,
        pages=page.pages,
        current=page.current,
        size=page.size,
    ).body()


@router.put("/update", summary="更新用户信息")
def update_user(user: UserUpdate, auth_flow: AuthFlowDep) -> dict:
    """Update a user by id; only the supplied fields are written.

    Returns:
        Envelope with the updated user (code 200), code 400 for a missing id
        or a taken name, or code 500 for an unknown id or database failure.
    """
    try:
        updated = auth_flow.update(user)
    except BadRequestError:
        return ApiResponse.fail(400, "Invalid parameters: id is required").body()
    except DuplicateUserError:
        return ApiResponse.fail(400, "Update failed: user name already exists").body()
    except UserNotFoundError:
        return ApiResponse.fail(500, "Update failed: user does not exist").body()
    except StoreError as e:
        logger.error("Update failed: %s", e)
        return ApiResponse.fail(500, "Update failed").body()
    return ApiResponse.success("Update successful", user_to_dict(updated)).body()


@router.delete("/del/{user_id}", summary="删除用户")
def delete_user(user_id: int, user_store: UserStoreDep) -> dict:
    try:
        user_store.delete_by_id(user_id)
    except UserNotFoundError:
        return ApiResponse.fail(500, "Delete failed: user does not exist").body()
    except StoreError as e:
        logger.error("Delete failed: %s", e)
        return ApiResponse.fail(500, "Delete failed").body()
    return ApiResponse.success("Delete successful").body()


@router.get("/{user_id}", summary="根据ID查询用户")
def get_user_by_id(user_id: int, user_store: UserStoreDep) -> dict:
    try:
        user = user_store.find_by_id(user_id)
    except StoreError as e:
        logger.error("Query failed: %s", e)
        return ApiResponse.fail(500, "Query failed").body()
    if user is None:
        return ApiResponse.fail(404, "User does not exist").body()
    return ApiResponse.success("Query successful", user_to_dict(user)).body()
