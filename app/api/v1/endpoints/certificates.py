# File: app/api/v1/endpoints/certificates.py
from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app import schemas
from app.core import deps
from app.db.database import get_db
from app.schemas.auth import ActorContext
from app.services import stall_lifecycle

router = APIRouter()


@router.post(
    "/stalls/{stall_id}",
    response_model=schemas.StallCertificateResult,
    status_code=status.HTTP_201_CREATED,
)
def issue_stall_certificates(
    *,
    db: Session = Depends(get_db),
    stall_id: str,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    """Issue leader and member certificates for an approved stall.

    Certificates that already exist are skipped, so the call can be repeated.
    """
    return stall_lifecycle.issue_certificates(db, current_reviewer, stall_id)


@router.post("/events/{event_id}", response_model=schemas.EventCertificateResult)
def issue_event_certificates(
    *,
    db: Session = Depends(get_db),
    event_id: str,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    """Issue certificates for every approved stall of an event, reporting per stall"""
    return stall_lifecycle.issue_certificates_for_event(db, current_reviewer, event_id)


@router.post(
    "/participation",
    response_model=schemas.Certificate,
    status_code=status.HTTP_201_CREATED,
)
def issue_participation_certificate(
    *,
    db: Session = Depends(get_db),
    certificate_in: schemas.ParticipationCertificateCreate,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    return stall_lifecycle.issue_participation_certificate(
        db, current_reviewer, certificate_in.event_id, certificate_in.user_id
    )


@router.get("/mine", response_model=List[schemas.CertificateWithDetails])
def list_my_certificates(
    *,
    db: Session = Depends(get_db),
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    return stall_lifecycle.list_my_certificates(db, current_actor)


@router.get("/", response_model=List[schemas.CertificateWithDetails])
def list_event_certificates(
    *,
    db: Session = Depends(get_db),
    event_id: str,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    return stall_lifecycle.list_event_certificates(db, current_reviewer, event_id)
