from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tether_shared.models import Envelope


class CreatePostRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    content: str = Field(min_length=1, max_length=5000)
    image: str | None = Field(None, max_length=500)


class PostOwnerRef(BaseModel):
    """Owner expansion: public fields only."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    profile_image: str


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    image: str
    owner: PostOwnerRef
    created_at: datetime
    updated_at: datetime


class PostEnvelope(Envelope):
    post: PostResponse
