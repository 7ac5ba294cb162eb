# File: app/crud/stall.py
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func, or_, String, cast
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase, LIKE_ESCAPE, escape_like
from app.models.event import Event
from app.models.profile import Profile
from app.models.stall import Stall, StallStatus
from app.schemas.stall import StallRegister

StallRow = Tuple[Stall, str, Profile]


class CRUDStall(CRUDBase[Stall, StallRegister, StallRegister]):
    """Stall store. Writes here only flush; the lifecycle service owns the commit."""

    def create_pending(
        self, db: Session, *, event_id: str, leader_id: str, name: str,
        description: Optional[str], members: List[str], applied_at: datetime
    ) -> Stall:
        db_obj = Stall(
            event_id=event_id,
            leader_id=leader_id,
            name=name,
            description=description,
            members=list(members),
            status=StallStatus.PENDING,
            stall_number=None,
            attachments=[],
            applied_at=applied_at,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def decide(
        self, db: Session, *, stall_id: str, status: StallStatus, approved_at: Optional[datetime]
    ) -> bool:
        """Move a stall out of pending in one conditional UPDATE.

        Returns False when the row was no longer pending.
        """
        changed = (
            db.query(Stall)
            .filter(Stall.id == stall_id, Stall.status == StallStatus.PENDING)
            .update({Stall.status: status, Stall.approved_at: approved_at}, synchronize_session=False)
        )
        return changed == 1

    def get_status(self, db: Session, *, stall_id: str) -> Optional[StallStatus]:
        return db.query(Stall.status).filter(Stall.id == stall_id).scalar()

    def set_number(self, db: Session, *, db_obj: Stall, number: int) -> Stall:
        db_obj.stall_number = number
        db.flush()
        return db_obj

    def add_attachment(self, db: Session, *, db_obj: Stall, url: str) -> Stall:
        # Reassign so the JSON column is marked dirty
        db_obj.attachments = list(db_obj.attachments or []) + [url]
        db.flush()
        return db_obj

    def get_by_number(self, db: Session, *, event_id: str, number: int) -> Optional[Stall]:
        return db.query(Stall).filter(
            Stall.event_id == event_id,
            Stall.stall_number == number
        ).first()

    def max_number(self, db: Session, *, event_id: str) -> Optional[int]:
        return db.query(func.max(Stall.stall_number)).filter(Stall.event_id == event_id).scalar()

    def get_approved_for_event(self, db: Session, *, event_id: str) -> List[Stall]:
        return (
            db.query(Stall)
            .filter(Stall.event_id == event_id, Stall.status == StallStatus.APPROVED)
            .order_by(Stall.stall_number.is_(None), Stall.stall_number, Stall.applied_at)
            .all()
        )

    def _joined(self, db: Session):
        return (
            db.query(Stall, Event.name, Profile)
            .join(Event, Stall.event_id == Event.id)
            .join(Profile, Stall.leader_id == Profile.id)
        )

    def get_with_event(self, db: Session, *, stall_id: str) -> Optional[StallRow]:
        return self._joined(db).filter(Stall.id == stall_id).first()

    def list_with_event(
        self, db: Session, *, event_id: Optional[str] = None, status: Optional[StallStatus] = None,
        search_text: Optional[str] = None, skip: int = 0, limit: Optional[int] = None
    ) -> List[StallRow]:
        query = self._joined(db)
        if event_id:
            query = query.filter(Stall.event_id == event_id)
        if status:
            query = query.filter(Stall.status == status)
        if search_text and search_text.strip():
            pattern = f"%{escape_like(search_text.strip())}%"
            query = query.filter(or_(
                Stall.name.ilike(pattern, escape=LIKE_ESCAPE),
                Profile.full_name.ilike(pattern, escape=LIKE_ESCAPE),
                Profile.email.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        if event_id:
            query = query.order_by(Stall.stall_number.is_(None), Stall.stall_number, Stall.applied_at.desc())
        else:
            query = query.order_by(Stall.applied_at.desc())

        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_for_participant(self, db: Session, *, user_id: str) -> List[StallRow]:
        """Stalls the user leads or belongs to"""
        # Member ids are stored as a JSON array of quoted uuids
        member_match = cast(Stall.members, String).contains(f'"{user_id}"')
        return (
            self._joined(db)
            .filter(or_(Stall.leader_id == user_id, member_match))
            .order_by(Stall.applied_at.desc())
            .all()
        )

    def count_by_status(self, db: Session) -> dict:
        rows = db.query(Stall.status, func.count(Stall.id)).group_by(Stall.status).all()
        return {status: total for status, total in rows}

    def participant_ids(self, db: Session, *, event_id: Optional[str] = None) -> List[str]:
        """Leader and member ids across stalls, optionally for one event"""
        query = db.query(Stall.leader_id, Stall.members)
        if event_id:
            query = query.filter(Stall.event_id == event_id)
        ids = set()
        for leader_id, members in query.all():
            ids.add(leader_id)
            ids.update(members or [])
        return sorted(ids)


stall = CRUDStall(Stall)
