from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """Authenticated user profile."""
    id: str | int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = Field(..., description="admin, accountant, parent or student")

    model_config = ConfigDict(extra="allow")


class TokenPair(BaseModel):
    """Access/refresh token pair as issued by /auth/login and /auth/refresh."""
    token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = Field(None, alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)
