"""Service layer: turns repository results and errors into HTTP outcomes.

Repository functions raise SQLAlchemy exceptions; this module maps the ones
with a client-facing meaning to structured HTTPExceptions and logs the rest
on their way out.
"""

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.ext.asyncio import AsyncEngine

from . import crud
from .auth import verify_password
from .logger import logger
from .schemas import CreateUser, DeleteResponse, ErrorCode, User, UserLogin


# ==================== Helper Functions ====================

def _user_not_found(user_id: int, message: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": ErrorCode.USER_NOT_FOUND,
            "message": message,
            "details": {"user_id": user_id}
        }
    )


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={
            "error": ErrorCode.INVALID_CREDENTIALS,
            "message": "Invalid email or password",
            "details": {}
        }
    )


# ==================== User Operations ====================

async def get_user(user_id: int, pool: AsyncEngine) -> User:
    """Retrieve an active user by ID."""
    logger.debug(f"Fetching user: id={user_id}")
    try:
        user = await crud.find(user_id, pool)
    except NoResultFound:
        logger.warning(f"User not found: id={user_id}")
        raise _user_not_found(user_id, f"User with ID {user_id} does not exist")
    return user


async def delete_user(user_id: int, pool: AsyncEngine) -> DeleteResponse:
    """Physically delete a user by ID."""
    logger.info(f"Deleting user: id={user_id}")
    deleted = await crud.delete(user_id, pool)
    if deleted == 0:
        logger.warning(f"Cannot delete - user not found: id={user_id}")
        raise _user_not_found(user_id, f"Cannot delete user with ID {user_id}: user does not exist")

    logger.info(f"User deleted: id={user_id}")
    return DeleteResponse(deleted=deleted)


# ==================== Authentication ====================

async def register_user(data: CreateUser, pool: AsyncEngine) -> User:
    """Create a user. Uniqueness of the email is left to the database."""
    logger.info(f"Registering new user: {data.email}")
    try:
        user = await crud.create(data, pool)
    except IntegrityError as e:
        logger.warning(f"Registration failed - email already exists: {data.email}")
        raise HTTPException(
            status_code=400,
            detail={
                "error": ErrorCode.DUPLICATE_EMAIL,
                "message": f"User with email '{data.email}' already exists",
                "details": {"email": data.email}
            }
        ) from e

    logger.info(f"User registered successfully: id={user.id} email={user.email}")
    return user


async def authenticate_user(data: UserLogin, pool: AsyncEngine) -> User:
    """Check credentials against the active user with that email."""
    logger.info(f"Authentication attempt for user: {data.email}")
    try:
        user = await crud.find_by_email(data.email, pool)
    except NoResultFound:
        logger.warning(f"Authentication failed - user not found: {data.email}")
        raise _invalid_credentials()

    if not verify_password(data.password, user.password):
        logger.warning(f"Authentication failed - invalid password for user: {data.email}")
        raise _invalid_credentials()

    logger.info(f"Authentication successful for user: {data.email} (id={user.id})")
    return user
