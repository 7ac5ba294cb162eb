# File: app/api/v1/endpoints/gallery.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.config import settings
from app.core.exceptions import EventNotFoundError, NotFoundError
from app.db.database import get_db
from app.schemas.auth import ActorContext
from app.services import storage
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[schemas.GalleryItem])
def list_gallery(
    *,
    db: Session = Depends(get_db),
    event_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100
) -> Any:
    return crud.gallery.get_multi_recent(db, event_id=event_id, skip=skip, limit=limit)


@router.post("/", response_model=schemas.GalleryItem, status_code=status.HTTP_201_CREATED)
async def upload_gallery_image(
    *,
    db: Session = Depends(get_db),
    file: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    event_id: Optional[str] = Form(None),
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    """Upload an image to the public gallery"""
    if event_id and not crud.event.get(db, event_id):
        raise EventNotFoundError(event_id)

    data = await file.read()
    storage.validate_upload(data, file.content_type, settings.ALLOWED_IMAGE_TYPES)
    image_url = storage.upload(storage.build_path("gallery", file.filename), data, file.content_type)

    item = crud.gallery.create(
        db,
        obj_in={
            "image_url": image_url,
            "caption": caption,
            "event_id": event_id,
            "uploaded_by": current_admin.user_id,
        },
    )
    logger.info(f"Gallery image {item.id} uploaded by {current_admin.user_id}")
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_gallery_image(
    *,
    db: Session = Depends(get_db),
    item_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> None:
    if not crud.gallery.remove(db, id=item_id):
        raise NotFoundError("gallery_item", item_id)
