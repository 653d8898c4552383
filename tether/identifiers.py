"""
Path identifiers arrive as raw strings so a malformed id is reported as a 400
with a domain message rather than FastAPI's generic 422.
"""
from __future__ import annotations

import uuid

from tether.exceptions import InvalidPostId, InvalidUserId


def try_parse_uuid(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError, AttributeError):
        return None


def parse_user_id(raw: str) -> uuid.UUID:
    parsed = try_parse_uuid(raw)
    if parsed is None:
        raise InvalidUserId()
    return parsed


def parse_post_id(raw: str) -> uuid.UUID:
    parsed = try_parse_uuid(raw)
    if parsed is None:
        raise InvalidPostId()
    return parsed
