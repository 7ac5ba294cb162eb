# File: app/schemas/contact.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class ContactSubmissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactSubmission(ContactSubmissionCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
