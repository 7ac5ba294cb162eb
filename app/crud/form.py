# File: app/crud/form.py
from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.form import Form, FormResponse
from app.schemas.form import FormCreate, FormUpdate, FormResponseCreate


class CRUDForm(CRUDBase[Form, FormCreate, FormUpdate]):

    def get_multi_recent(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Form]:
        return db.query(Form).order_by(Form.created_at.desc()).offset(skip).limit(limit).all()

    def get_active(self, db: Session, *, form_id: str) -> Optional[Form]:
        return db.query(Form).filter(Form.id == form_id, Form.is_active == True).first()

    def create_with_admin(self, db: Session, *, obj_in: FormCreate, admin_id: str) -> Form:
        # JSON columns need plain values, not enum members
        form_data = obj_in.model_dump(mode="json")
        form_data["admin_id"] = admin_id
        return self.create(db, obj_in=form_data)

    def update_form(self, db: Session, *, db_obj: Form, obj_in: FormUpdate) -> Form:
        return self.update(db, db_obj=db_obj, obj_in=obj_in.model_dump(mode="json", exclude_unset=True))


class CRUDFormResponse(CRUDBase[FormResponse, FormResponseCreate, FormResponseCreate]):

    def get_by_form(self, db: Session, *, form_id: str) -> List[FormResponse]:
        return (
            db.query(FormResponse)
            .filter(FormResponse.form_id == form_id)
            .order_by(FormResponse.submitted_at.desc())
            .all()
        )


form = CRUDForm(Form)
form_response = CRUDFormResponse(FormResponse)
