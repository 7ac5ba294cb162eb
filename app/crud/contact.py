# File: app/crud/contact.py
from typing import List
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.contact_submission import ContactSubmission
from app.schemas.contact import ContactSubmissionCreate


class CRUDContactSubmission(CRUDBase[ContactSubmission, ContactSubmissionCreate, ContactSubmissionCreate]):

    def get_multi_recent(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[ContactSubmission]:
        return (
            db.query(ContactSubmission)
            .order_by(ContactSubmission.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )


contact_submission = CRUDContactSubmission(ContactSubmission)
