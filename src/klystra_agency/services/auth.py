"""Authentication helpers for the admin backend.

This module provides a minimal username/password authentication layer
backed by the users table. Passwords are stored as salted PBKDF2 hashes.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
from dataclasses import dataclass

from klystra_agency.data.models import User
from klystra_agency.data.repository import Repository
from klystra_agency.errors import AuthenticationError, FieldError, ValidationError

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. Never carries the password hash."""

    id: str
    username: str
    is_admin: str

    @property
    def has_admin_role(self) -> bool:
        return self.is_admin == "true"

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(id=user.id, username=user.username, is_admin=user.is_admin)


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


def hash_password(password: str) -> str:
    """Return ``<salt_hex>:<hash_hex>`` for ``password`` with a fresh random salt."""
    salt = os.urandom(_SALT_BYTES)
    return f"{salt.hex()}:{_derive(password, salt).hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check ``password`` against a stored hash; malformed hashes never match."""
    salt_hex, _, hash_hex = stored_hash.partition(":")
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    if not salt or not expected:
        return False
    return hmac.compare_digest(_derive(password, salt), expected)


# Verified against when the username is unknown so both failure paths do the
# same amount of hashing work.
_DUMMY_HASH = hash_password("klystra-placeholder-password")


def authenticate(repository: Repository, username: str, password: str) -> Principal:
    """Check credentials and return the matching principal.

    Raises:
        AuthenticationError: For an unknown user or a wrong password alike.
    """
    username_clean = username.strip()
    user = repository.get_user_by_username(username_clean) if username_clean else None

    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Rejected login for unknown username")
        raise AuthenticationError()

    if not verify_password(password, user.password_hash):
        logger.info("Rejected login for user %s", user.username)
        raise AuthenticationError()

    return Principal.from_user(user)


def create_user(
    repository: Repository, username: str, password: str, *, is_admin: bool = False
) -> Principal:
    """Create a new user account with a hashed password.

    Raises:
        ValidationError: If the username or password is empty.
        ConflictError: If the username already exists.
    """
    username_clean = username.strip()
    errors: list[FieldError] = []
    if not username_clean:
        errors.append(FieldError(field="username", message="must not be empty"))
    if not password:
        errors.append(FieldError(field="password", message="must not be empty"))
    if errors:
        raise ValidationError(errors)

    user = repository.create_user(username_clean, hash_password(password), is_admin=is_admin)
    logger.info("Created user %s (admin=%s)", user.username, user.is_admin)
    return Principal.from_user(user)
