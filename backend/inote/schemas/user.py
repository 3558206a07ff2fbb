"""
iNote Backend - User Request/Response Schemas
=============================================

What:  Pydantic models for the users API.
How:   Passwords are accepted on input and never serialized back out.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from inote.models.user import Role


class UserCreate(BaseModel):
    """Body of POST /inote/users."""
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=255)
    role: Role = Field(default=Role.USER)


class UserUpdate(BaseModel):
    """
    Body of PUT /inote/users/{id}.

    username, email and password are replaced; role is replaced only when
    present in the body.
    """
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=255)
    role: Optional[Role] = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None

    model_config = {"from_attributes": True, "frozen": True}
