"""
auth/dependencies.py -- FastAPI Depends() helpers for the access guard.

Two gates, chained through FastAPI's dependency injection:

  get_current_claims()  -- authentication. Requires
                           "Authorization: Bearer <token>", verifies the JWT
                           and stores the claims on request.state.claims.
  require_admin()       -- authorization. Depends on get_current_claims, so it
                           only ever runs with claims already attached, then
                           requires role == "admin".

Verification is stateless: the token is the session, no user lookup happens
on the request path.

Layer rule: no imports from api/ or catalogue/.
"""

from __future__ import annotations

from fastapi import Depends, Request

from auth.models import TokenClaims
from auth.tokens import decode_access_token
from core.errors import Forbidden, Unauthenticated

_BEARER_PREFIX = "Bearer "


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(_BEARER_PREFIX):
        return None
    token = auth_header[len(_BEARER_PREFIX) :].strip()
    return token or None


def get_current_claims(request: Request) -> TokenClaims:
    """Require a valid Bearer token. Raises Unauthenticated (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(claims: TokenClaims = Depends(get_current_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise Unauthenticated("No token provided. Authorization denied.")

    claims = decode_access_token(token)
    if claims is None:
        raise Unauthenticated("Invalid or expired token.")

    request.state.claims = claims
    return claims


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Require admin role. 401 if unauthenticated, 403 if not admin.

    Use as a FastAPI dependency:
        @router.post("/admin-only")
        async def route(claims: TokenClaims = Depends(require_admin)): ...
    """
    if not claims.is_admin:
        raise Forbidden("Admin access required.")
    return claims
