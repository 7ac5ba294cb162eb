# File: app/schemas/profile.py
from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import datetime
from app.models.profile import ProfileRole


class ProfileSummary(BaseModel):
    """Contact projection used inside stall listings"""
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class Profile(BaseModel):
    id: str
    email: EmailStr
    full_name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: ProfileRole
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile. Role is not one of them."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @validator('full_name')
    def full_name_not_null(cls, v):
        if v is None:
            raise ValueError('Full name cannot be null')
        return v
