"""Repository queries for the users table.

Each function takes the pool explicitly, runs exactly one statement on a
borrowed connection, and lets SQLAlchemy errors propagate:

- ``NoResultFound`` when a lookup matches no active row
- ``IntegrityError`` when an insert violates the unique email constraint
- ``OperationalError`` / ``DBAPIError`` on connection or query failure
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from .auth import hash_password
from .logger import logger
from .models import users
from .schemas import CreateUser, User


# Bind parameters are rendered by the driver ($1, $2, ... under asyncpg)
FIND_USER_SQL = text(
    "SELECT * FROM users WHERE id = :id AND deleted_at ISNULL"
).columns(*users.c)

FIND_USER_BY_EMAIL_SQL = text(
    "SELECT * FROM users WHERE email = :email AND deleted_at ISNULL"
).columns(*users.c)

CREATE_USER_SQL = text(
    "INSERT INTO users (email, password, full_name) "
    "VALUES (:email, :password, :full_name) RETURNING *"
).columns(*users.c)

DELETE_USER_SQL = text("DELETE FROM users WHERE id = :id")


async def find(user_id: int, pool: AsyncEngine) -> User:
    """Fetch the active user with the given id."""
    async with pool.connect() as conn:
        result = await conn.execute(FIND_USER_SQL, {"id": user_id})
        row = result.mappings().one()
    return User.model_validate(dict(row))


async def find_by_email(email: str, pool: AsyncEngine) -> User:
    """Fetch the active user with the given email."""
    async with pool.connect() as conn:
        result = await conn.execute(FIND_USER_BY_EMAIL_SQL, {"email": email})
        row = result.mappings().one()
    return User.model_validate(dict(row))


async def create(data: CreateUser, pool: AsyncEngine) -> User:
    """Hash the password, insert the row, and return it as stored."""
    password = hash_password(data.password)
    async with pool.begin() as conn:
        result = await conn.execute(
            CREATE_USER_SQL,
            {"email": data.email, "password": password, "full_name": data.full_name},
        )
        row = result.mappings().one()
    logger.debug(f"User row inserted: id={row['id']}")
    return User.model_validate(dict(row))


async def delete(user_id: int, pool: AsyncEngine) -> int:
    """Physically remove the row with the given id, soft-deleted or not.

    Returns the number of rows removed (0 or 1).
    """
    async with pool.begin() as conn:
        result = await conn.execute(DELETE_USER_SQL, {"id": user_id})
        deleted = result.rowcount
    logger.debug(f"User rows deleted: id={user_id} count={deleted}")
    return deleted
