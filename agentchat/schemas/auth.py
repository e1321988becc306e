# agentchat/schemas/auth.py
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from agentchat.models.base import as_utc
from agentchat.models.profile import ProfileRole

class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: ProfileRole
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile: ProfileResponse

def profile_response(profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role,
        avatar_url=profile.avatar_url,
        created_at=as_utc(profile.created_at),
        updated_at=as_utc(profile.updated_at),
    )
