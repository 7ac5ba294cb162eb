# File: app/schemas/gallery.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class GalleryItem(BaseModel):
    id: str
    image_url: str
    caption: Optional[str] = None
    event_id: Optional[str] = None
    uploaded_by: str
    created_at: datetime

    class Config:
        from_attributes = True
