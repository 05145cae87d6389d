"""
auth/service.py -- Registration and login.

Both operations end the same way: the user record (password hash stays
inside auth/) plus a freshly issued session token. Failures are raised as
core.errors exceptions and mapped to HTTP responses by api/main.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from auth.models import ROLE_ADMIN, ROLE_STUDENT, User
from auth.store import UserStore
from auth.tokens import (
    MAX_PASSWORD_BYTES,
    authenticate_user,
    create_access_token,
    hash_password,
    password_too_long,
)
from core.errors import AuthError, ConflictError, InternalError, ValidationError

logger = logging.getLogger("libcat.auth")


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


def resolve_role(requested_role: str | None) -> str:
    """Only the literal string "admin" grants admin; anything else is a student."""
    return ROLE_ADMIN if requested_role == ROLE_ADMIN else ROLE_STUDENT


def register_user(
    store: UserStore,
    name: str | None,
    email: str | None,
    password: str | None,
    requested_role: str | None = None,
) -> AuthResult:
    """Create a user and issue a token.

    The email pre-check gives the common duplicate case a clean error; the
    IntegrityError branch covers two concurrent registrations of one email.
    """
    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required.")
    if password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

    if store.email_exists(email):
        raise ConflictError("A user with this email already exists.")

    user = User(
        name=name,
        email=email,
        role=resolve_role(requested_role),
        password_hash=hash_password(password),
    )
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        raise ConflictError("A user with this email already exists.") from exc

    created = store.get_by_id(user_id)
    if created is None:
        raise InternalError("User not found after write.")
    logger.info("Registered user id=%s role=%s", user_id, created.role)
    return AuthResult(user=created, token=create_access_token(created.id, created.role))


def login_user(store: UserStore, email: str | None, password: str | None) -> AuthResult:
    """Authenticate and issue a token.

    Unknown email and wrong password raise the same AuthError so the response
    never reveals which emails are registered.
    """
    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = authenticate_user(store, email, password)
    if user is None:
        logger.info("Failed login attempt")
        raise AuthError("Invalid email or password.")

    return AuthResult(user=user, token=create_access_token(user.id, user.role))
