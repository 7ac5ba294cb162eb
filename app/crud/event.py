# File: app/crud/event.py
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.event import Event
from app.schemas.event import EventCreate, EventUpdate


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):

    def get_multi_ordered(
        self, db: Session, *, open_only: bool = False, today: Optional[date] = None,
        descending: bool = False, skip: int = 0, limit: int = 100
    ) -> List[Event]:
        query = db.query(Event)
        if open_only:
            query = query.filter(
                Event.registration_open == True,
                Event.end_date >= (today or date.today())
            )
        order = Event.start_date.desc() if descending else Event.start_date.asc()
        return query.order_by(order).offset(skip).limit(limit).all()

    def create_with_owner(self, db: Session, *, obj_in: EventCreate, created_by: str) -> Event:
        event_data = obj_in.model_dump()
        event_data["created_by"] = created_by

        return self.create(db, obj_in=event_data)

    def count_open(self, db: Session) -> int:
        return db.query(Event).filter(Event.registration_open == True).count()


event = CRUDEvent(Event)
