# File: app/api/v1/endpoints/profile.py
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.exceptions import ProfileNotFoundError
from app.db.database import get_db
from app.schemas.auth import ActorContext
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=schemas.Profile)
def get_my_profile(
    current_actor: ActorContext = Depends(deps.get_current_actor),
    db: Session = Depends(get_db)
) -> Any:
    """Get current user's profile"""
    profile = crud.profile.get(db, current_actor.user_id)
    if not profile:
        raise ProfileNotFoundError(current_actor.user_id)
    return profile


@router.put("/me", response_model=schemas.Profile)
def update_my_profile(
    profile_update: schemas.ProfileUpdate,
    current_actor: ActorContext = Depends(deps.get_current_actor),
    db: Session = Depends(get_db)
) -> Any:
    """Update name, phone or avatar. Roles are managed by admins only."""
    profile = crud.profile.get(db, current_actor.user_id)
    if not profile:
        raise ProfileNotFoundError(current_actor.user_id)

    updated = crud.profile.update(db, db_obj=profile, obj_in=profile_update)
    logger.info(f"Profile updated for {current_actor.email}")
    return updated
