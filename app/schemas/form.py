# File: app/schemas/form.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
import enum


class QuestionType(str, enum.Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    SCALE = "scale"


CHOICE_TYPES = {QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOX, QuestionType.DROPDOWN}


class Question(BaseModel):
    id: str = Field(..., min_length=1)
    type: QuestionType
    question: str = Field(..., min_length=1)
    options: Optional[List[str]] = None
    required: bool = False


class FormBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    questions: List[Question] = []
    settings: Optional[Dict[str, Any]] = None
    is_active: bool = True


class FormCreate(FormBase):
    pass


class FormUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    questions: Optional[List[Question]] = None
    settings: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class Form(FormBase):
    id: str
    admin_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FormResponseCreate(BaseModel):
    # Answers keyed by question id
    responses: Dict[str, Any]


class FormResponse(BaseModel):
    id: str
    form_id: str
    user_id: Optional[str] = None
    responses: Dict[str, Any]
    submitted_at: datetime

    class Config:
        from_attributes = True
