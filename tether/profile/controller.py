"""
Profile domain: request orchestration (thin glue between router and service).
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.dependencies import ensure_self_scope
from tether.auth.schemas import UserResponse
from tether.identifiers import parse_user_id
from tether.profile.schemas import (
    UpdateUserRequest,
    UserEnvelope,
    UserSummary,
    UserSummaryListResponse,
)
from tether.profile.service import delete_profile, get_profile, list_users, update_profile
from tether.social_graph.service import get_graph
from tether_shared.models import Envelope
from tether_shared.models.user import CurrentUser


async def get_user(session: AsyncSession, user_id: str) -> UserEnvelope:
    user = await get_profile(session, parse_user_id(user_id))
    graph = await get_graph(session, user.id)
    return UserEnvelope(
        message="User fetched successfully",
        user=UserResponse.from_user(user, graph),
    )


async def get_all_users(session: AsyncSession) -> UserSummaryListResponse:
    users = await list_users(session)
    return UserSummaryListResponse(
        message="Users fetched successfully",
        count=len(users),
        users=[UserSummary.model_validate(u) for u in users],
    )


async def update_user(
    session: AsyncSession,
    current_user: CurrentUser,
    user_id: str,
    body: UpdateUserRequest,
) -> UserEnvelope:
    target_id = ensure_self_scope(current_user, user_id, action="update")
    # Explicit nulls are ignored: every updatable column is non-nullable
    fields = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if "email" in fields:
        fields["email"] = str(fields["email"])
    user = await update_profile(session, target_id, fields)
    graph = await get_graph(session, user.id)
    return UserEnvelope(
        message="User updated successfully",
        user=UserResponse.from_user(user, graph),
    )


async def delete_user(
    session: AsyncSession,
    current_user: CurrentUser,
    user_id: str,
) -> Envelope:
    target_id = ensure_self_scope(current_user, user_id, action="delete")
    await delete_profile(session, target_id)
    return Envelope(message="Successfully deleted user.")
