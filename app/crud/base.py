# File: app/crud/base.py
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.database import Base, transaction

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Make % and _ in user search text match literally"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Default create/read/update/delete for a model.

    Writes commit by default, through ``transaction`` so store failures come
    out as domain errors. Pass ``commit=False`` to leave the change flushed
    but uncommitted so a service can group several writes into one
    transaction.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return db.query(self.model).offset(skip).limit(limit).all()

    def count(self, db: Session) -> int:
        return db.query(self.model).count()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        if isinstance(obj_in, dict):
            create_data = obj_in
        else:
            create_data = obj_in.model_dump()
        db_obj = self.model(**create_data)
        db.add(db_obj)
        self._persist(db, db_obj, commit)
        return db_obj

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        self._persist(db, db_obj, commit)
        return db_obj

    def remove(self, db: Session, *, id: Any) -> Optional[ModelType]:
        obj = self.get(db, id)
        if obj is None:
            return None
        with transaction(db):
            db.delete(obj)
        return obj

    @staticmethod
    def _persist(db: Session, db_obj: Any, commit: bool) -> None:
        if commit:
            with transaction(db):
                db.flush()
            db.refresh(db_obj)
        else:
            db.flush()
