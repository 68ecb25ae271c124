"""FastAPI dependencies for authentication."""

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from .auth import IDENTITY_KEY
from .logger import logger
from .schemas import ErrorCode, User


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": ErrorCode.UNAUTHORIZED,
            "message": "Authentication required",
            "details": {}
        },
    )


# ==================== Identity ====================

def user_from_identity(payload: str | None) -> User:
    """Parse an identity payload into a User.

    Raises a 401 HTTPException when the payload is missing, is not JSON,
    or does not have the shape of a User. Values are not coerced, and any
    password in the payload is discarded.
    """
    if not isinstance(payload, str) or not payload:
        raise _unauthorized()
    try:
        user = User.model_validate_json(payload, strict=True)
    except ValidationError:
        logger.debug("Identity payload rejected: not a serialized user")
        raise _unauthorized()
    return user.model_copy(update={"password": ""})


def read_identity(request: Request) -> str | None:
    """Return the identity payload carried by the request's signed cookie, if any."""
    # SessionMiddleware not installed
    if "session" not in request.scope:
        return None
    return request.session.get(IDENTITY_KEY)


async def get_current_user(request: Request) -> User:
    """Resolve the authenticated user from the identity cookie.

    The cached payload is trusted as-is; the database is not consulted.
    """
    return user_from_identity(read_identity(request))
