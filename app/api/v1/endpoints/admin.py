# File: app/api/v1/endpoints/admin.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.db.database import get_db
from app.models.stall import StallStatus
from app.schemas.auth import ActorContext
from app.schemas.communication import RecipientScope
from app.services import communications

router = APIRouter()


@router.get("/dashboard", response_model=schemas.DashboardStats)
def get_dashboard_stats(
    *,
    db: Session = Depends(get_db),
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    """Counters for the admin dashboard"""
    by_status = crud.stall.count_by_status(db)
    return schemas.DashboardStats(
        total_stalls=sum(by_status.values()),
        pending_stalls=by_status.get(StallStatus.PENDING, 0),
        approved_stalls=by_status.get(StallStatus.APPROVED, 0),
        rejected_stalls=by_status.get(StallStatus.REJECTED, 0),
        total_events=crud.event.count(db),
        active_events=crud.event.count_open(db),
        total_certificates=crud.certificate.count(db),
        total_users=crud.profile.count(db),
        total_forms=crud.form.count(db),
        contact_submissions=crud.contact_submission.count(db),
    )


@router.get("/communications/recipients", response_model=List[schemas.Recipient])
def list_recipients(
    *,
    db: Session = Depends(get_db),
    scope: RecipientScope = RecipientScope.ALL,
    event_id: Optional[str] = None,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return communications.list_recipients(db, scope, event_id=event_id)


@router.post("/communications/broadcast", response_model=schemas.BroadcastResult)
def broadcast(
    *,
    db: Session = Depends(get_db),
    request: schemas.BroadcastRequest,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    """Email an announcement to the selected profiles"""
    return communications.broadcast(db, current_admin, request)
