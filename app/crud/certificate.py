# File: app/crud/certificate.py
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.certificate import Certificate, CertificateType
from app.models.event import Event
from app.models.stall import Stall
from app.schemas.certificate import ParticipationCertificateCreate


class CRUDCertificate(CRUDBase[Certificate, ParticipationCertificateCreate, ParticipationCertificateCreate]):

    def create_many(self, db: Session, *, objs_in: List[Dict[str, Any]]) -> List[Certificate]:
        """Bulk insert; flushes only"""
        db_objs = [Certificate(**data) for data in objs_in]
        db.add_all(db_objs)
        db.flush()
        return db_objs

    def existing_subjects(self, db: Session, *, stall_id: str) -> set:
        """(user_id, type) pairs that already hold a certificate for the stall"""
        rows = db.query(Certificate.user_id, Certificate.type).filter(Certificate.stall_id == stall_id).all()
        return {(user_id, cert_type) for user_id, cert_type in rows}

    def get_participation(self, db: Session, *, event_id: str, user_id: str) -> Optional[Certificate]:
        return db.query(Certificate).filter(
            Certificate.event_id == event_id,
            Certificate.user_id == user_id,
            Certificate.type == CertificateType.PARTICIPATION,
        ).first()

    def list_for_user(self, db: Session, *, user_id: str) -> List[Tuple[Certificate, str, Optional[str]]]:
        return (
            db.query(Certificate, Event.name, Stall.name)
            .join(Event, Certificate.event_id == Event.id)
            .outerjoin(Stall, Certificate.stall_id == Stall.id)
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.generated_at.desc())
            .all()
        )

    def list_for_event(self, db: Session, *, event_id: str) -> List[Tuple[Certificate, str, Optional[str]]]:
        return (
            db.query(Certificate, Event.name, Stall.name)
            .join(Event, Certificate.event_id == Event.id)
            .outerjoin(Stall, Certificate.stall_id == Stall.id)
            .filter(Certificate.event_id == event_id)
            .order_by(Certificate.generated_at.desc())
            .all()
        )


certificate = CRUDCertificate(Certificate)
