"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from core.database import init_db
from api.routes import users
from schemas.response import ApiResponse

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="User Admin API",
    description="Backend API service for user registration, login and administration.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(users.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Create database tables if they do not exist."""
    init_db()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and parameters in the envelope."""
    fields = ", ".join(
        ".".join(str(part) for part in error["loc"][1:]) or "body"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=200,
        content=ApiResponse.fail(400, f"Invalid parameters: {fields}").body(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Report unexpected failures in the envelope."""
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ApiResponse.fail(500, "Internal server error").body(),
    )


@app.get("/", summary="API 根路径", tags=["Info"])
def root() -> dict:
    """API 根路径，返回 API 信息和文档链接。

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "User Admin API",
        "version": "1.0.0",
        "description": "Backend API service for user registration, login and administration.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="健康检查", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"🌐 服务地址(后端服务): {server_url}")
    print(f"📚 API 文档: {server_url}/docs")
    print()

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
