# File: app/api/v1/endpoints/entrepreneurs.py
import io
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import EmailStr
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.exceptions import NotFoundError
from app.db.database import get_db
from app.schemas.auth import ActorContext
from app.services import entrepreneur_service

logger = logging.getLogger(__name__)
router = APIRouter()


async def _read(upload: Optional[UploadFile]):
    if upload is None:
        return None
    return upload.filename, await upload.read(), upload.content_type


@router.post("/", response_model=schemas.EntrepreneurApplication, status_code=status.HTTP_201_CREATED)
async def submit_application(
    *,
    db: Session = Depends(get_db),
    full_name: str = Form(..., min_length=1, max_length=255),
    email: EmailStr = Form(...),
    phone: str = Form(..., min_length=1, max_length=20),
    department: str = Form(..., min_length=1, max_length=255),
    year: str = Form(..., min_length=1, max_length=50),
    idea_title: str = Form(..., min_length=1, max_length=255),
    idea_summary: str = Form(..., min_length=1),
    problem_solution: str = Form(..., min_length=1),
    validation: str = Form(..., min_length=1),
    expected_support: str = Form(..., min_length=1),
    prior_experience: str = Form(..., min_length=1),
    availability_hours: str = Form(..., min_length=1, max_length=100),
    why_join: str = Form(..., min_length=1),
    has_prototype: bool = Form(False),
    prototype_details: Optional[str] = Form(None),
    consent: bool = Form(False),
    portfolio: UploadFile = File(...),
    resume: UploadFile = File(...),
    pitch_deck: UploadFile = File(...),
    prototype: Optional[UploadFile] = File(None)
) -> Any:
    """Public incubator application. No login required."""
    application_in = schemas.EntrepreneurApplicationCreate(
        full_name=full_name,
        email=email,
        phone=phone,
        department=department,
        year=year,
        idea_title=idea_title,
        idea_summary=idea_summary,
        problem_solution=problem_solution,
        validation=validation,
        expected_support=expected_support,
        prior_experience=prior_experience,
        availability_hours=availability_hours,
        why_join=why_join,
        has_prototype=has_prototype,
        prototype_details=prototype_details,
        consent=consent,
    )
    return entrepreneur_service.submit_application(
        db,
        application_in,
        portfolio=await _read(portfolio),
        resume=await _read(resume),
        pitch_deck=await _read(pitch_deck),
        prototype=await _read(prototype),
    )


@router.get("/", response_model=List[schemas.EntrepreneurApplication])
def list_applications(
    *,
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, max_length=100),
    skip: int = 0,
    limit: int = Query(100, le=500),
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return crud.entrepreneur_application.get_multi_recent(db, search_text=search, skip=skip, limit=limit)


@router.get("/export")
def export_applications(
    *,
    db: Session = Depends(get_db),
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> StreamingResponse:
    """Every application as CSV, newest first"""
    applications = crud.entrepreneur_application.get_multi_recent(db, limit=None)
    content = entrepreneur_service.export_csv(applications)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    logger.info(f"{len(applications)} entrepreneur applications exported by {current_admin.user_id}")

    return StreamingResponse(
        io.BytesIO(content.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="entrepreneurs_{stamp}.csv"'}
    )


@router.get("/{application_id}", response_model=schemas.EntrepreneurApplication)
def get_application(
    *,
    db: Session = Depends(get_db),
    application_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    application = crud.entrepreneur_application.get(db, application_id)
    if not application:
        raise NotFoundError("entrepreneur_application", application_id)
    return application
