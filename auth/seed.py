"""
auth/seed.py -- Bootstrap and maintenance of the admin account.

ensure_admin() runs on every startup and from `python main.py seed-admin`.
It is idempotent: once any admin exists it does nothing.
"""

from __future__ import annotations

import logging

from auth.models import ROLE_ADMIN, User
from auth.store import UserStore
from auth.tokens import hash_password
from core.errors import NotFoundError

logger = logging.getLogger("libcat.auth")


def ensure_admin(store: UserStore, name: str, email: str, password: str) -> int | None:
    """Create an admin account unless one already exists.

    Returns the new user's id, or None when seeding was skipped (an admin is
    present, or no credentials are configured).
    """
    if store.get_first_admin() is not None:
        logger.info("Admin already exists, skipping admin seed")
        return None
    if not email or not password:
        logger.warning("No admin exists and ADMIN_EMAIL/ADMIN_PASSWORD are not set; skipping admin seed")
        return None

    user_id = store.create_user(
        User(name=name, email=email, role=ROLE_ADMIN, password_hash=hash_password(password))
    )
    logger.info("Seed admin created: %s", email)
    return user_id


def update_admin_credentials(store: UserStore, new_email: str, new_password: str, old_email: str = "") -> User:
    """Replace the email and password of an existing admin.

    The admin is looked up by old_email first; when that finds nothing (or is
    not an admin) the first admin by id is used. Raises NotFoundError when the
    database has no admin at all.
    """
    target = store.get_by_email(old_email) if old_email else None
    if target is None or target.role != ROLE_ADMIN:
        target = store.get_first_admin()
    if target is None:
        raise NotFoundError("No admin user found.")

    store.update_credentials(target.id, new_email, hash_password(new_password))
    logger.info("Admin id=%s credentials updated", target.id)
    return store.get_by_id(target.id)
