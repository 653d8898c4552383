"""
Tether service: domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site.  The error handlers registered
from tether_shared turn them into the standard error envelope.
"""
from fastapi import HTTPException, status


# ── Authentication ────────────────────────────────────────────────────────────

class InvalidCredentials(HTTPException):
    """Same message for unknown email and wrong password (no user enumeration)."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
        )


# ── Registration / conflict ───────────────────────────────────────────────────

class UserAlreadyExists(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )


class UsernameTaken(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username is already taken.",
        )


# ── Users ─────────────────────────────────────────────────────────────────────

class InvalidUserId(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format.",
        )


class UserNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No such user. Invalid ID!",
        )


class CurrentUserNotFound(HTTPException):
    """The token is valid but its subject has since been deleted."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Current user not found.",
        )


class NoUsersFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No users found.",
        )


class NotProfileOwner(HTTPException):
    def __init__(self, action: str) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can {action} only your own profile!",
        )


class FieldsNotUpdatable(HTTPException):
    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Fields not updatable: {', '.join(fields)}.",
        )


# ── Social graph ──────────────────────────────────────────────────────────────

class CannotFollowSelf(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You can't follow yourself.",
        )


class FollowTargetsNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User(s) not found.",
        )


class ConcurrentGraphUpdate(HTTPException):
    """A concurrent toggle on the same pair won the race; the client may retry."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="This relationship was modified by another request. Please retry.",
        )


# ── Posts ─────────────────────────────────────────────────────────────────────

class InvalidPostId(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid post ID format.",
        )


class PostNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found.",
        )
