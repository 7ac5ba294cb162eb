# File: app/models/profile.py
from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
import enum


class ProfileRole(enum.Enum):
    STUDENT = "student"
    JUNIOR_ADMIN = "junior_admin"
    ADMIN = "admin"


class Profile(BaseModel):
    """Mirror of an identity-provider account.

    ``id`` is the identity provider's user id, so it is supplied on insert
    rather than generated.
    """
    __tablename__ = "profiles"

    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(
        Enum(ProfileRole, values_callable=lambda e: [r.value for r in e], name="user_role"),
        nullable=False,
        default=ProfileRole.STUDENT,
    )

    # Relationships
    led_stalls = relationship("Stall", back_populates="leader", foreign_keys="Stall.leader_id")
    certificates = relationship("Certificate", back_populates="user")

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, role={self.role})>"
