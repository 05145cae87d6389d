"""
auth/tokens.py -- JWT and password hashing utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       id, role, iat and exp. Verification returns None on any failure --
       the access guard turns that into a 401.

  Passwords: bcrypt used directly with a fixed cost factor
       (Settings.bcrypt_rounds, default 10). bcrypt.checkpw does the
       comparison, so there is no hand-written equality check on hashes.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup: dev mode (DEBUG=true) auto-generates a
       random key with a warning; production mode refuses to start without one.

Layer rule: no imports from api/ or catalogue/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims
from core.config import get_settings
from core.errors import ValidationError

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("libcat.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


# Hard limit of the bcrypt algorithm; bcrypt>=5 raises instead of truncating.
MAX_PASSWORD_BYTES = 72


def password_too_long(plain: str) -> bool:
    """True when the UTF-8 encoding of plain exceeds what bcrypt accepts."""
    return len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(plain: str, rounds: int = 0) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    The limit is 72 bytes, not characters: a 30-character password in CJK
    script is already 90 bytes. Over-long passwords raise ValidationError.
    """
    if password_too_long(plain):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    cost = rounds if rounds > 0 else _settings.bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    if password_too_long(plain):
        # Could never have been hashed; no stored hash can match.
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash -- treat as a failed comparison.
        logger.warning("Stored password hash could not be parsed")
        return False


# Timing equalization dummy hash.
# Always run bcrypt during login, even for an unknown email, so response time
# does not reveal which emails are registered.
_DUMMY_HASH: str = hash_password("libcat_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None or not user.password_hash:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: int, role: str, expire_seconds: int = 0) -> str:
    """Encode a signed JWT carrying the user's id and role.

    Args:
        user_id:        Numeric user ID stored in the DB.
        role:           "student" or "admin".
        expire_seconds: Token lifetime. If 0 (default), uses
                        Settings.token_expire_seconds (7 days).
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued_at = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims | None:
    """Decode and verify a JWT. Returns TokenClaims or None on any failure.

    Signature, algorithm and expiry are checked by python-jose; a token
    without exp is rejected. A token that verifies but lacks the id/role
    claims is rejected too.
    """
    try:
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"require_exp": True},
        )
    except JWTError as exc:
        logger.info("Token rejected: %s", exc)
        return None
    user_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(user_id, int) or not isinstance(role, str):
        return None
    return TokenClaims(
        user_id=user_id,
        role=role,
        issued_at=int(payload.get("iat", 0)),
        expires_at=int(payload["exp"]),
    )
