"""Auth and user-facing DTOs."""
from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field


class UserPublic(BaseModel):
    """Safe user representation."""
    id: str = Field(..., description="User identifier")
    email: EmailStr = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="Display name")
    kind: Literal["candidate", "recruiter"] = Field(..., description="User role")


class MeResponse(UserPublic):
    """Response for /auth/me."""
    roadmap_id: Optional[str] = Field(None, description="Linked roadmap (candidates)")
    company: Optional[str] = Field(None, description="Employer (recruiters)")
