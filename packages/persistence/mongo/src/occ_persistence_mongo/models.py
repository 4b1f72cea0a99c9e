"""Base pydantic model for documents stored with a version field."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class VersionedModel(BaseModel):
    """A document with a string id and an optimistic-locking version.

    ``version`` is 0 until the first insert assigns 1.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    version: int = Field(default=0, ge=0)
