# File: app/models/event.py
from sqlalchemy import Column, String, Text, Boolean, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel


class Event(BaseModel):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_events_date_range"),
    )

    name = Column(String(255), nullable=False)
    description = Column(Text)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Registration
    registration_open = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_by = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    stalls = relationship("Stall", back_populates="event", cascade="all, delete-orphan")
    certificates = relationship("Certificate", back_populates="event", cascade="all, delete-orphan")
    gallery_items = relationship("GalleryItem", back_populates="event")
