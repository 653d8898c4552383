"""
Tether service: auth router.

Only HTTP concerns live here:
  - Route declarations, HTTP methods, status codes, response_model
  - Dependency injection (session, settings)
  - Forwarding to the controller

Zero business logic. Zero DB queries.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth import controller as ctrl
from tether.auth.schemas import AuthResponse, LoginRequest, RegisterRequest
from tether.config import Settings
from tether.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_db, scope="function"),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await ctrl.register(session, body, settings)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in with email and password",
)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db, scope="function"),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await ctrl.login(session, body, settings)
