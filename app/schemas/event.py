# File: app/schemas/event.py
from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, date


class EventBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: date
    end_date: date
    registration_open: bool = False


class EventCreate(EventBase):

    @validator('end_date')
    def validate_date_range(cls, v, values):
        if 'start_date' in values and values['start_date'] and v < values['start_date']:
            raise ValueError('End date must be on or after start date')
        return v


class EventUpdate(BaseModel):
    """Partial update. Omit a field to keep it; only ``description`` may be cleared."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    registration_open: Optional[bool] = None

    @validator('name', 'start_date', 'end_date', 'registration_open')
    def reject_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class Event(EventBase):
    id: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
