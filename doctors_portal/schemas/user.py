from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import ConfigDict, Field

from .base import CamelModel, UpdateResult

class UserUpsert(CamelModel):
    """Sign-in payload. Unknown fields are kept and stored on the profile."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = Field(None, max_length=200)

class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    profile: Dict[str, Any] = {}
    created_at: Optional[datetime] = None

class UserEmailRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=255)

class TokenIssueResponse(CamelModel):
    result: UpdateResult
    access_token: str

class AdminStatusResponse(CamelModel):
    is_admin: bool
