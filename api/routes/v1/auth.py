"""
api/routes/v1/auth.py -- Registration and login endpoints.

Routes:
  POST /api/v1/auth/register  -- create account; returns user + token (public)
  POST /api/v1/auth/login     -- password login; returns user + token (public)
  GET  /api/v1/auth/me        -- verified token claims (requires auth)

Security:
  authenticate_user() (via login_user) provides timing equalization -- use
  it, never inline get_by_email() + verify_password().
  Cache-Control: no-store on responses that carry a token.

Handlers that touch the store are plain `def`: FastAPI runs them in its
thread pool, so a slow database call never blocks the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from auth.dependencies import get_current_claims
from auth.models import TokenClaims
from auth.service import login_user, register_user
from auth.store import UserStore

# Auth policy:
# - POST /api/v1/auth/register: public
# - POST /api/v1/auth/login:    public
# - GET  /api/v1/auth/me:       requires auth (get_current_claims)
router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Register a new account and log it in.

    role is honoured only when it is exactly "admin"; anything else,
    including a missing role, creates a student.
    """
    user_store: UserStore = request.app.state.user_store
    result = register_user(user_store, body.name, body.email, body.password, body.role)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(
        message="User registered successfully.",
        user=UserResponse.from_user(result.user),
        token=result.token,
    )


@router.post("/auth/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password.

    Returns the same error for an unknown email and a wrong password to avoid
    leaking which emails are registered.
    """
    user_store: UserStore = request.app.state.user_store
    result = login_user(user_store, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(
        message="Login successful.",
        user=UserResponse.from_user(result.user),
        token=result.token,
    )


@router.get("/auth/me", response_model=MeResponse)
async def me(claims: TokenClaims = Depends(get_current_claims)) -> MeResponse:
    """Return the identity carried by the presented token."""
    return MeResponse(id=claims.user_id, role=claims.role, expires_at=claims.expires_at)
