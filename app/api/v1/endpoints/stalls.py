# File: app/api/v1/endpoints/stalls.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from app import schemas
from app.core import deps
from app.db.database import get_db
from app.models.stall import StallStatus
from app.schemas.auth import ActorContext
from app.services import stall_lifecycle

router = APIRouter()


@router.post("/", response_model=schemas.Stall, status_code=status.HTTP_201_CREATED)
def register_stall(
    *,
    db: Session = Depends(get_db),
    registration: schemas.StallRegister,
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    """Register a stall for an open event. The caller becomes the team leader."""
    return stall_lifecycle.register_stall(db, current_actor, registration)


@router.get("/", response_model=List[schemas.StallWithEvent])
def list_stalls(
    *,
    db: Session = Depends(get_db),
    event_id: Optional[str] = None,
    status: Optional[StallStatus] = None,
    search: Optional[str] = Query(None, max_length=100),
    skip: int = 0,
    limit: int = Query(100, le=500),
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    """Approved stalls for everyone; reviewers may filter on any status"""
    return stall_lifecycle.list_stalls(
        db, current_actor, event_id=event_id, status=status, search_text=search, skip=skip, limit=limit
    )


@router.get("/mine", response_model=List[schemas.StallWithEvent])
def list_my_stalls(
    *,
    db: Session = Depends(get_db),
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    """Stalls the caller leads or is a member of"""
    return stall_lifecycle.list_my_stalls(db, current_actor)


@router.get("/{stall_id}", response_model=schemas.StallWithMembers)
def get_stall(
    *,
    db: Session = Depends(get_db),
    stall_id: str,
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    return stall_lifecycle.get_stall_detail(db, current_actor, stall_id)


@router.post("/{stall_id}/decision", response_model=schemas.Stall)
def decide_stall(
    *,
    db: Session = Depends(get_db),
    stall_id: str,
    decision_in: schemas.StallDecision,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    """Approve or reject a pending stall"""
    return stall_lifecycle.decide_stall(db, current_reviewer, stall_id, decision_in.decision)


@router.put("/{stall_id}/number", response_model=schemas.Stall)
def assign_stall_number(
    *,
    db: Session = Depends(get_db),
    stall_id: str,
    number_in: schemas.StallNumberAssign,
    current_reviewer: ActorContext = Depends(deps.get_current_reviewer)
) -> Any:
    return stall_lifecycle.assign_stall_number(db, current_reviewer, stall_id, number_in.stall_number)


@router.post("/{stall_id}/attachments", response_model=schemas.Stall)
async def upload_attachment(
    *,
    db: Session = Depends(get_db),
    stall_id: str,
    file: UploadFile = File(...),
    current_actor: ActorContext = Depends(deps.get_current_actor)
) -> Any:
    """Attach a pitch deck, poster or report to the caller's stall"""
    data = await file.read()
    return stall_lifecycle.add_attachment(
        db, current_actor, stall_id, file.filename, data, file.content_type
    )
