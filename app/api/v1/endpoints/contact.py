# File: app/api/v1/endpoints/contact.py
from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.exceptions import NotFoundError
from app.db.database import get_db
from app.schemas.auth import ActorContext
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=schemas.ContactSubmission, status_code=status.HTTP_201_CREATED)
def submit_contact_form(
    *,
    db: Session = Depends(get_db),
    submission_in: schemas.ContactSubmissionCreate
) -> Any:
    """Public contact form"""
    submission = crud.contact_submission.create(db, obj_in=submission_in)
    logger.info(f"Contact submission {submission.id} received")
    return submission


@router.get("/", response_model=List[schemas.ContactSubmission])
def list_contact_submissions(
    *,
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return crud.contact_submission.get_multi_recent(db, skip=skip, limit=limit)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact_submission(
    *,
    db: Session = Depends(get_db),
    submission_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> None:
    if not crud.contact_submission.remove(db, id=submission_id):
        raise NotFoundError("contact_submission", submission_id)
