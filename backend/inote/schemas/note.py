"""
iNote Backend - Note Request/Response Schemas
=============================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against NoteCreate/NoteUpdate and
       serializes NoteResponse. NoteResponse is frozen because the services
       share cached instances across requests.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Body of POST /inote/notes."""
    title: str = Field(min_length=1, max_length=255, description="Note title")
    content: str = Field(description="Note body text, may be empty")
    user_id: Optional[int] = Field(
        default=None,
        ge=1,
        description="Owning user id; omit for an ownerless note",
    )


class NoteUpdate(BaseModel):
    """Body of PUT /inote/notes/{id}. Only title and content are mutable."""
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(description="Note body text, may be empty")


class NoteResponse(BaseModel):
    """Full representation of a stored note."""
    id: int = Field(description="Server-assigned note identifier")
    title: str
    content: str
    user_id: Optional[int] = Field(default=None, description="Owning user id, if any")
    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: datetime = Field(description="Last modification time (UTC)")

    model_config = {"from_attributes": True, "frozen": True}
