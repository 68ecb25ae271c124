"""Table definition for the users table."""

from sqlalchemy import BigInteger, Column, DateTime, Integer, MetaData, String, Table, func
from .config import settings


metadata = MetaData()

# SQLite only autoincrements INTEGER PRIMARY KEY, not BIGINT
_id_type = BigInteger().with_variant(Integer(), "sqlite")

# Column order matters: SELECT * / RETURNING * rows are mapped positionally
users = Table(
    "users",
    metadata,
    Column("id", _id_type, primary_key=True, autoincrement=True),
    Column("email", String(settings.USER_EMAIL_MAX_LENGTH), nullable=False, unique=True, index=True),
    Column("password", String(255), nullable=False),
    Column("full_name", String(settings.USER_NAME_MAX_LENGTH), nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("deleted_at", DateTime(timezone=True), nullable=True),
)
