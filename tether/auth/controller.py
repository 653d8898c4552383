"""
Tether service: auth controller (request orchestration layer).

Responsibilities:
  - Receive validated input from the router.
  - Call service functions (which own business logic).
  - Compose and return the response model.

No framework validation logic here: that belongs in schemas.py.
No business logic here: that belongs in service.py.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.models import User
from tether.auth.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from tether.auth.service import authenticate_user, create_access_token, register_user
from tether.config import Settings
from tether.social_graph.service import get_graph


# ── Helper ────────────────────────────────────────────────────────────────────

def _issue_token(user: User, settings: Settings) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=settings.jwt_expire_seconds,
    )


async def _auth_response(
    session: AsyncSession, user: User, settings: Settings, message: str
) -> AuthResponse:
    graph = await get_graph(session, user.id)
    return AuthResponse(
        message=message,
        user=UserResponse.from_user(user, graph),
        token=_issue_token(user, settings),
    )


# ── Register ──────────────────────────────────────────────────────────────────

async def register(
    session: AsyncSession,
    body: RegisterRequest,
    settings: Settings,
) -> AuthResponse:
    user = await register_user(
        session,
        username=body.username,
        email=str(body.email),
        password=body.password,
        bio=body.bio,
        profile_image=body.profile_image,
    )
    return await _auth_response(session, user, settings, "User created successfully")


# ── Login ─────────────────────────────────────────────────────────────────────

async def login(
    session: AsyncSession,
    body: LoginRequest,
    settings: Settings,
) -> AuthResponse:
    user = await authenticate_user(session, str(body.email), body.password)
    return await _auth_response(session, user, settings, "Login successful.")
