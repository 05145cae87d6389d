"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors
catalogue/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or catalogue/.
"""

from __future__ import annotations

from dataclasses import dataclass

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


@dataclass
class User:
    """A registered catalogue user.

    email is unique and compared case-sensitively, exactly as stored.
    password_hash is a bcrypt hash; it stays inside auth/ and is never copied
    into an API response model.
    """

    name: str
    email: str
    role: str = ROLE_STUDENT  # "student" | "admin"
    id: int | None = None
    password_hash: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified contents of a session token.

    Built by auth.tokens.decode_access_token() and attached to the request by
    the access guard. Timestamps are Unix seconds, as carried in the JWT.
    """

    user_id: int
    role: str
    issued_at: int
    expires_at: int

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
