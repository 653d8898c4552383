"""
Bearer-token authentication gate.

    missing header            → 401
    not "Bearer <token>"      → 400
    bad signature / claims    → 401
    expired                   → 401 (distinct message)
    valid                     → CurrentUser
"""
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from jose import ExpiredSignatureError, JWTError, jwt

from tether_shared.auth.config import AuthSettings
from tether_shared.models.user import CurrentUser

authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer <access_token>",
)

_BEARER_PREFIX = "Bearer "


def get_auth_settings(request: Request) -> AuthSettings:
    """Settings attached by the app factory win over environment defaults."""
    settings = getattr(request.app.state, "auth_settings", None)
    return settings if settings is not None else AuthSettings()


def _decode_token(token: str, settings: AuthSettings) -> dict:
    payload = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    return payload


def _payload_to_user(payload: dict) -> CurrentUser:
    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Missing sub in token")
    email = payload.get("email") or ""
    return CurrentUser(id=UUID(user_id), email=email)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer(header_value: str) -> str:
    if not header_value.startswith(_BEARER_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid token format. Expected 'Bearer <token>'.",
        )
    token = header_value[len(_BEARER_PREFIX):].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid token format. Expected 'Bearer <token>'.",
        )
    return token


async def get_current_user_required(
    authorization: str | None = Depends(authorization_header),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser:
    if not authorization:
        raise _unauthenticated("Access denied. No token provided.")
    token = _extract_bearer(authorization)
    try:
        payload = _decode_token(token, settings)
        return _payload_to_user(payload)
    except ExpiredSignatureError:
        raise _unauthenticated("Token has expired.")
    except (JWTError, ValueError, KeyError):
        raise _unauthenticated("Token is invalid.")
