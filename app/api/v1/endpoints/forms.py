# File: app/api/v1/endpoints/forms.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.core import deps
from app.core.exceptions import FormNotFoundError
from app.db.database import get_db
from app.schemas.auth import ActorContext
from app.services import form_service

router = APIRouter()


@router.get("/", response_model=List[schemas.Form])
def list_forms(
    *,
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return crud.form.get_multi_recent(db, skip=skip, limit=limit)


@router.post("/", response_model=schemas.Form, status_code=status.HTTP_201_CREATED)
def create_form(
    *,
    db: Session = Depends(get_db),
    form_in: schemas.FormCreate,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return form_service.create_form(db, current_admin, form_in)


@router.put("/{form_id}", response_model=schemas.Form)
def update_form(
    *,
    db: Session = Depends(get_db),
    form_id: str,
    form_in: schemas.FormUpdate,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    return form_service.update_form(db, form_id, form_in)


@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_form(
    *,
    db: Session = Depends(get_db),
    form_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> None:
    if not crud.form.remove(db, id=form_id):
        raise FormNotFoundError(form_id)


@router.get("/{form_id}/public", response_model=schemas.Form)
def get_public_form(*, db: Session = Depends(get_db), form_id: str) -> Any:
    """Active form as shown to respondents; no login needed"""
    return form_service.get_active_form(db, form_id)


@router.post(
    "/{form_id}/responses",
    response_model=schemas.FormResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_response(
    *,
    db: Session = Depends(get_db),
    form_id: str,
    response_in: schemas.FormResponseCreate,
    current_actor: Optional[ActorContext] = Depends(deps.get_optional_actor)
) -> Any:
    return form_service.submit_response(db, form_id, response_in.responses, current_actor)


@router.get("/{form_id}/responses", response_model=List[schemas.FormResponse])
def list_responses(
    *,
    db: Session = Depends(get_db),
    form_id: str,
    current_admin: ActorContext = Depends(deps.get_current_admin)
) -> Any:
    if not crud.form.get(db, form_id):
        raise FormNotFoundError(form_id)
    return crud.form_response.get_by_form(db, form_id=form_id)
