# File: app/models/stall.py
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Enum, Text, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel, utcnow
import enum


class StallStatus(enum.Enum):
    PENDING = "pending"      # Leader registered, waiting for review
    APPROVED = "approved"    # Admin or junior admin approved
    REJECTED = "rejected"    # Admin or junior admin rejected


class Stall(BaseModel):
    __tablename__ = "stalls"
    __table_args__ = (
        UniqueConstraint("event_id", "stall_number", name="uq_stalls_event_number"),
    )

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    leader_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    # Profile ids of the other team members, leader excluded
    members = Column(JSON, nullable=False, default=list)

    status = Column(
        Enum(StallStatus, values_callable=lambda e: [s.value for s in e], name="stall_status"),
        nullable=False,
        default=StallStatus.PENDING,
        index=True,
    )
    stall_number = Column(Integer, nullable=True)

    # Pitch deck / report URLs
    attachments = Column(JSON, nullable=False, default=list)

    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    event = relationship("Event", back_populates="stalls")
    leader = relationship("Profile", back_populates="led_stalls", foreign_keys=[leader_id])
    certificates = relationship("Certificate", back_populates="stall")

    @property
    def team_size(self) -> int:
        return 1 + len(self.members or [])

    def __repr__(self):
        return f"<Stall(id={self.id}, name={self.name}, status={self.status})>"
