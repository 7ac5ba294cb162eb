# File: app/crud/gallery.py
from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.gallery import GalleryItem
from app.schemas.gallery import GalleryItem as GalleryItemSchema


class CRUDGallery(CRUDBase[GalleryItem, GalleryItemSchema, GalleryItemSchema]):

    def get_multi_recent(
        self, db: Session, *, event_id: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[GalleryItem]:
        query = db.query(GalleryItem)
        if event_id:
            query = query.filter(GalleryItem.event_id == event_id)
        return query.order_by(GalleryItem.created_at.desc()).offset(skip).limit(limit).all()


gallery = CRUDGallery(GalleryItem)
