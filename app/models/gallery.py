# File: app/models/gallery.py
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import Base, generate_uuid, utcnow


class GalleryItem(Base):
    __tablename__ = "gallery"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    image_url = Column(String(500), nullable=False)
    caption = Column(Text, nullable=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    uploaded_by = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    event = relationship("Event", back_populates="gallery_items")
