# File: app/schemas/stall.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.stall import StallStatus
from app.schemas.profile import ProfileSummary


class StallRegister(BaseModel):
    """Registration form submitted by the team leader.

    Content rules (empty name, duplicate or unknown members, team size) are
    checked by the lifecycle service so they come back as domain errors.
    """
    event_id: str
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    member_emails: List[str] = []
    phone: Optional[str] = Field(None, max_length=20)


class StallDecision(BaseModel):
    decision: StallStatus


class StallNumberAssign(BaseModel):
    stall_number: int


class Stall(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    event_id: str
    leader_id: str
    members: List[str] = []
    status: StallStatus
    stall_number: Optional[int] = None
    attachments: List[str] = []
    applied_at: datetime
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StallWithEvent(Stall):
    """Stall joined with its event name and leader contact"""
    event_name: str
    leader: ProfileSummary


class StallWithMembers(StallWithEvent):
    member_profiles: List[ProfileSummary] = []
