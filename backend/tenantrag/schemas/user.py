"""User and auth schemas."""
from datetime import datetime
from pydantic import BaseModel, Field

from tenantrag.schemas.base import ApiModel


class UserCreate(ApiModel):
    """Registration request."""
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8)
    first_name: str | None = None
    last_name: str | None = None


class UserRead(ApiModel):
    """User response; never carries the password hash."""
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_super_admin: bool
    created_at: datetime
    updated_at: datetime | None = None


class Token(BaseModel):
    """OAuth2 token response (snake_case, as OAuth2 clients expect)."""
    access_token: str
    token_type: str = "bearer"
