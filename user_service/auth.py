"""Password hashing and identity cookie helpers."""

import bcrypt
from fastapi import Request

from .schemas import User


# Key under which the identity payload lives in the signed session cookie
IDENTITY_KEY = "identity"


# ==================== Password Hashing ====================

def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ==================== Identity ====================

def remember_user(request: Request, user: User) -> None:
    """Store the user as the identity payload of the current session."""
    request.session[IDENTITY_KEY] = user.model_dump_json()


def forget_user(request: Request) -> None:
    """Drop the identity payload from the current session."""
    request.session.pop(IDENTITY_KEY, None)
