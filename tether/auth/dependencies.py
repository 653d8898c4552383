"""
Tether service: auth-specific FastAPI dependencies and guards.

These wrap the shared bearer-token gate and add the self-scope rule used by
mutation routes on a user resource.
"""
from __future__ import annotations

import logging
import uuid

from tether.exceptions import NotProfileOwner
from tether.identifiers import try_parse_uuid
from tether_shared.auth.dependencies import get_current_user_required
from tether_shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

# Alias the shared dependency so routes import from here, not from shared
# directly.  If we ever need to augment it (e.g. DB lookup), only this file
# changes.
get_current_user = get_current_user_required


# ── Self-scope guard ──────────────────────────────────────────────────────────

def ensure_self_scope(current_user: CurrentUser, target_user_id: str, *, action: str) -> uuid.UUID:
    """
    Return the target id when it is the caller's own id; raise 403 otherwise.

    A malformed id can never be the caller's, so it is a 403 rather than a 400.
    """
    target = try_parse_uuid(target_user_id)
    if target is None or target != current_user.id:
        logger.warning(
            "Forbidden %s attempt by user %s on user %s", action, current_user.id, target_user_id
        )
        raise NotProfileOwner(action)
    return target
