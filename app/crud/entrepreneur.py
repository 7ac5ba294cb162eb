# File: app/crud/entrepreneur.py
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase, LIKE_ESCAPE, escape_like
from app.models.entrepreneur import EntrepreneurApplication
from app.schemas.entrepreneur import EntrepreneurApplicationCreate


class CRUDEntrepreneurApplication(
    CRUDBase[EntrepreneurApplication, EntrepreneurApplicationCreate, EntrepreneurApplicationCreate]
):

    def get_multi_recent(
        self, db: Session, *, search_text: Optional[str] = None, skip: int = 0, limit: Optional[int] = 100
    ) -> List[EntrepreneurApplication]:
        """Newest first, optionally matching name, email, phone, idea or support fields"""
        query = db.query(EntrepreneurApplication)
        if search_text and search_text.strip():
            pattern = f"%{escape_like(search_text.strip())}%"
            query = query.filter(or_(*[
                column.ilike(pattern, escape=LIKE_ESCAPE)
                for column in (
                    EntrepreneurApplication.full_name,
                    EntrepreneurApplication.email,
                    EntrepreneurApplication.phone,
                    EntrepreneurApplication.idea_title,
                    EntrepreneurApplication.validation,
                    EntrepreneurApplication.expected_support,
                )
            ]))

        query = query.order_by(EntrepreneurApplication.created_at.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


entrepreneur_application = CRUDEntrepreneurApplication(EntrepreneurApplication)
