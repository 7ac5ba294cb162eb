# File: app/models/certificate.py
from sqlalchemy import Column, String, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import Base, generate_uuid, utcnow
import enum


class CertificateType(enum.Enum):
    LEADER = "leader"
    MEMBER = "member"
    PARTICIPATION = "participation"


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("stall_id", "user_id", "type", name="uq_certificates_stall_user_type"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    type = Column(
        Enum(CertificateType, values_callable=lambda e: [t.value for t in e], name="certificate_type"),
        nullable=False,
    )
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    stall_id = Column(String(36), ForeignKey("stalls.id", ondelete="SET NULL"), nullable=True, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    generated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    certificate_url = Column(String(500), nullable=True)
    # Generation-time token, not a hash of the certificate content
    blockchain_hash = Column(String(255), nullable=True)

    # Relationships
    user = relationship("Profile", back_populates="certificates")
    stall = relationship("Stall", back_populates="certificates")
    event = relationship("Event", back_populates="certificates")

    def __repr__(self):
        return f"<Certificate(id={self.id}, type={self.type}, user_id={self.user_id})>"
