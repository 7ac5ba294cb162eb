# File: app/schemas/communication.py
from pydantic import BaseModel, Field
from typing import List, Optional
import enum


class RecipientScope(str, enum.Enum):
    ALL = "all"          # Every profile
    STALL = "stall"      # Leaders and members of registered stalls


class Recipient(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class BroadcastRequest(BaseModel):
    recipient_ids: List[str] = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class BroadcastResult(BaseModel):
    requested: int
    sent: int
    failed: int
    failed_emails: List[str] = []
