"""
Posts domain: router.

Routes:
  POST  /api/v1/post/create-post          Create a post owned by the caller
  GET   /api/v1/post/get-post/{post_id}   One post with its owner expanded
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.dependencies import get_current_user
from tether.database import get_db
from tether.posts import controller as ctrl
from tether.posts.schemas import CreatePostRequest, PostEnvelope
from tether_shared.models.user import CurrentUser

router = APIRouter(prefix="/post", tags=["posts"])


@router.post(
    "/create-post",
    response_model=PostEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_post(
    body: CreatePostRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> PostEnvelope:
    return await ctrl.create_post(session, current_user.id, body)


@router.get(
    "/get-post/{post_id}",
    response_model=PostEnvelope,
    summary="Get a post with its owner",
)
async def get_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),  # noqa: ARG001  auth gate only
    session: AsyncSession = Depends(get_db, scope="function"),
) -> PostEnvelope:
    return await ctrl.get_post(session, post_id)
