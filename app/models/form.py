# File: app/models/form.py
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from app.models.base import Base, BaseModel, generate_uuid, utcnow


class Form(BaseModel):
    __tablename__ = "forms"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # [{"id", "type", "question", "options", "required"}, ...]
    questions = Column(JSON, nullable=False, default=list)
    settings = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    admin_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)

    responses = relationship("FormResponse", back_populates="form", cascade="all, delete-orphan")


class FormResponse(Base):
    __tablename__ = "form_responses"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    form_id = Column(String(36), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    # Answers keyed by question id
    responses = Column(JSON, nullable=False)
    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    form = relationship("Form", back_populates="responses")
