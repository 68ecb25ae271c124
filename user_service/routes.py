# API route definitions (HTTP layer)

import os
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncEngine

from . import services
from .auth import forget_user, remember_user
from .config import settings
from .db import check_db_connection, get_db_pool
from .dependencies import get_current_user
from .schemas import CreateUser, DeleteResponse, User, UserLogin

limiter = Limiter(key_func=get_remote_address)


def conditional_limit(limit_string):
    """Apply a rate limit unless running under tests."""
    if os.getenv('TEST_MODE'):
        def decorator(func):
            return func
        return decorator
    return limiter.limit(limit_string)


router = APIRouter()


@router.get("/")
def root():
    return {"app": settings.APP_NAME, "env": settings.APP_ENV}


@router.get("/health")
async def health_check(pool: AsyncEngine = Depends(get_db_pool)):
    """Health check for load balancers: 200 when the database answers, 503 otherwise."""
    health_status = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "environment": settings.APP_ENV,
    }
    is_db_healthy = await check_db_connection(
        pool,
        max_retries=settings.HEALTH_RETRY_ATTEMPTS,
        base_delay=settings.HEALTH_RETRY_BASE_DELAY,
    )
    if not is_db_healthy:
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"
        raise HTTPException(status_code=503, detail=health_status)

    health_status["database"] = "connected"
    return health_status


@router.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


# ============================================================================
# Authentication Endpoints
# ============================================================================

@router.post("/auth/register", response_model=User, status_code=201)
@conditional_limit(settings.RATE_LIMIT_WRITE)
async def register(data: CreateUser, request: Request, pool: AsyncEngine = Depends(get_db_pool)):
    """Register a new user.

    Raises:
        400: Email already exists
    """
    return await services.register_user(data, pool)


@router.post("/auth/login", response_model=User)
@conditional_limit(settings.RATE_LIMIT_WRITE)
async def login(credentials: UserLogin, request: Request, pool: AsyncEngine = Depends(get_db_pool)):
    """Verify credentials and store the user in the identity cookie.

    Raises:
        401: Invalid credentials
    """
    user = await services.authenticate_user(credentials, pool)
    # Nothing from a previous session survives a login
    request.session.clear()
    remember_user(request, user)
    return user


@router.post("/auth/logout", status_code=204)
async def logout(request: Request):
    forget_user(request)
    return Response(status_code=204)


# ============================================================================
# User Endpoints
# ============================================================================

@router.get("/users/me", response_model=User)
@conditional_limit(settings.RATE_LIMIT_READ)
async def read_current_user(request: Request, current_user: User = Depends(get_current_user)):
    """Return the user carried by the identity cookie, without a database lookup."""
    return current_user


@router.get("/users/{user_id}", response_model=User)
@conditional_limit(settings.RATE_LIMIT_READ)
async def get_user(user_id: int, request: Request, pool: AsyncEngine = Depends(get_db_pool)):
    return await services.get_user(user_id, pool)


@router.delete("/users/{user_id}", response_model=DeleteResponse)
@conditional_limit(settings.RATE_LIMIT_WRITE)
async def delete_user(
    user_id: int,
    request: Request,
    pool: AsyncEngine = Depends(get_db_pool),
    current_user: User = Depends(get_current_user),
):
    """Physically delete a user. Requires an authenticated caller."""
    return await services.delete_user(user_id, pool)
