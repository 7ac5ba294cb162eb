# File: app/schemas/entrepreneur.py
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class EntrepreneurApplicationBase(BaseModel):
    full_name: str
    email: EmailStr
    phone: str
    department: str
    year: str
    idea_title: str
    idea_summary: str
    problem_solution: str
    validation: str
    expected_support: str
    prior_experience: str
    availability_hours: str
    why_join: str
    has_prototype: bool = False
    prototype_details: Optional[str] = None


class EntrepreneurApplicationCreate(EntrepreneurApplicationBase):
    """Text part of the application; the files arrive alongside as uploads"""
    consent: bool = False


class EntrepreneurApplication(EntrepreneurApplicationBase):
    id: str
    portfolio_url: str
    resume_url: str
    pitch_deck_url: str
    prototype_url: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
