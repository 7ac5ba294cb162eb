# File: app/models/entrepreneur.py
from sqlalchemy import Column, String, Text, Boolean
from app.models.base import BaseModel


class EntrepreneurApplication(BaseModel):
    """Incubator application from the entrepreneur cell sign-up page. No account needed."""
    __tablename__ = "entrepreneur_applications"

    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    department = Column(String(255), nullable=False)
    year = Column(String(50), nullable=False)

    # The idea
    idea_title = Column(String(255), nullable=False)
    idea_summary = Column(Text, nullable=False)
    problem_solution = Column(Text, nullable=False)
    validation = Column(Text, nullable=False)
    expected_support = Column(Text, nullable=False)

    # The applicant
    prior_experience = Column(Text, nullable=False)
    availability_hours = Column(String(100), nullable=False)
    why_join = Column(Text, nullable=False)

    has_prototype = Column(Boolean, default=False, nullable=False)
    prototype_details = Column(Text, nullable=True)

    # Object store URLs
    portfolio_url = Column(String(500), nullable=False)
    resume_url = Column(String(500), nullable=False)
    pitch_deck_url = Column(String(500), nullable=False)
    prototype_url = Column(String(500), nullable=True)

    status = Column(String(20), default="registered", nullable=False)
