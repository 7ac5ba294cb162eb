# File: app/api/v1/endpoints/events.py
from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.exceptions import EventNotFoundError, ValidationError
from app.db.database import get_db
from app.schemas.auth import ActorContext
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[schemas.Event])
def list_events(
    *,
    db: Session = Depends(get_db),
    open_only: bool = False,
    skip: int = 0,
    limit: int = 100
) -> Any:
    """List events by start date. ``open_only`` keeps events still taking registrations."""
    return crud.event.get_multi_ordered(db, open_only=open_only, skip=skip, limit=limit)


@router.get("/{event_id}", response_model=schemas.Event)
def get_event(*, db: Session = Depends(get_db), event_id: str) -> Any:
    event = crud.event.get(db, event_id)
    if not event:
        raise EventNotFoundError(event_id)
    return event


@router.post("/", response_model=schemas.Event, status_code=status.HTTP_201_CREATED)
def create_event(
    *,
    db: Session = Depends(get_db),
    event_in: schemas.EventCreate,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    event = crud.event.create_with_owner(db, obj_in=event_in, created_by=current_admin.user_id)
    logger.info(f"Event '{event.name}' ({event.id}) created by {current_admin.user_id}")
    return event


@router.put("/{event_id}", response_model=schemas.Event)
def update_event(
    *,
    db: Session = Depends(get_db),
    event_id: str,
    event_in: schemas.EventUpdate,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    event = crud.event.get(db, event_id)
    if not event:
        raise EventNotFoundError(event_id)

    start_date = event_in.start_date or event.start_date
    end_date = event_in.end_date or event.end_date
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date", field="end_date")

    return crud.event.update(db, db_obj=event, obj_in=event_in)


@router.post("/{event_id}/toggle-registration", response_model=schemas.Event)
def toggle_registration(
    *,
    db: Session = Depends(get_db),
    event_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    """Open or close stall registration for an event"""
    event = crud.event.get(db, event_id)
    if not event:
        raise EventNotFoundError(event_id)

    event = crud.event.update(db, db_obj=event, obj_in={"registration_open": not event.registration_open})
    logger.info(f"Registration for event {event.id} is now {'open' if event.registration_open else 'closed'}")
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    *,
    db: Session = Depends(get_db),
    event_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> None:
    if not crud.event.remove(db, id=event_id):
        raise EventNotFoundError(event_id)
    logger.info(f"Event {event_id} deleted by {current_admin.user_id}")
