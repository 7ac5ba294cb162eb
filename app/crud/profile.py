# File: app/crud/profile.py
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.profile import Profile
from app.schemas.profile import ProfileUpdate


class CRUDProfile(CRUDBase[Profile, ProfileUpdate, ProfileUpdate]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[Profile]:
        return db.query(Profile).filter(func.lower(Profile.email) == email.strip().lower()).first()

    def get_many(self, db: Session, *, ids: List[str]) -> List[Profile]:
        """Batch lookup, returned in the order of ``ids``"""
        if not ids:
            return []
        found: Dict[str, Profile] = {
            p.id: p for p in db.query(Profile).filter(Profile.id.in_(ids)).all()
        }
        return [found[i] for i in ids if i in found]

    def list_ordered(self, db: Session, *, ids: Optional[List[str]] = None) -> List[Profile]:
        query = db.query(Profile)
        if ids is not None:
            query = query.filter(Profile.id.in_(ids))
        return query.order_by(Profile.full_name).all()

    def update_phone(self, db: Session, *, db_obj: Profile, phone: str, commit: bool = True) -> Profile:
        return self.update(db, db_obj=db_obj, obj_in={"phone": phone}, commit=commit)


profile = CRUDProfile(Profile)
