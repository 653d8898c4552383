"""
Posts domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from tether.identifiers import parse_post_id
from tether.posts import service as svc
from tether.posts.schemas import CreatePostRequest, PostEnvelope, PostResponse


async def create_post(
    session: AsyncSession,
    owner_id: uuid.UUID,
    body: CreatePostRequest,
) -> PostEnvelope:
    post = await svc.create_post(session, owner_id, content=body.content, image=body.image)
    return PostEnvelope(message="Post created successfully", post=PostResponse.model_validate(post))


async def get_post(session: AsyncSession, post_id: str) -> PostEnvelope:
    post = await svc.get_post(session, parse_post_id(post_id))
    return PostEnvelope(message="Post fetched successfully", post=PostResponse.model_validate(post))
