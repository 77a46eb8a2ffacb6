"""User account model for admin authentication.

Passwords are stored as salted PBKDF2 hashes, never in plaintext.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from klystra_agency.data.db import Base
from klystra_agency.data.models._columns import new_id, utcnow
from klystra_agency.data.types import UTCDateTime


class User(Base):
    """Application user account.

    Attributes:
        id: Generated UUID primary key.
        username: Unique handle used for login.
        password_hash: Salted hash of the user's password.
        is_admin: ``"true"`` or ``"false"``; only admins may mutate content.
        created_at: UTC timestamp when the account was created.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column("password", String(256), nullable=False)
    is_admin: Mapped[str] = mapped_column(String(5), nullable=False, default="false")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )