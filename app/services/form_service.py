"""
Form service

Admin-built questionnaires and the answers submitted against them.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import FormNotFoundError, ValidationError
from app.db.database import transaction
from app.models.form import Form, FormResponse
from app.schemas.auth import ActorContext
from app.schemas.form import CHOICE_TYPES, FormCreate, FormUpdate, Question, QuestionType

logger = logging.getLogger(__name__)

SCALE_MIN = 1
SCALE_MAX = 10


def validate_questions(questions: List[Question]) -> None:
    """Question ids must be unique and choice questions need options"""
    seen = set()
    for question in questions:
        if question.id in seen:
            raise ValidationError(f"Duplicate question id '{question.id}'", field="questions")
        seen.add(question.id)

        if question.type in CHOICE_TYPES:
            options = [o for o in (question.options or []) if o and o.strip()]
            if not options:
                raise ValidationError(
                    f"Question '{question.question}' needs at least one option",
                    field="questions"
                )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or (isinstance(value, list) and not value)


def _check_answer(question: Question, answer: Any) -> Any:
    options = question.options or []

    if question.type in (QuestionType.TEXT, QuestionType.TEXTAREA):
        if not isinstance(answer, str):
            raise ValidationError(f"'{question.question}' expects text", field=question.id)
        return answer.strip()

    if question.type in (QuestionType.MULTIPLE_CHOICE, QuestionType.DROPDOWN):
        if answer not in options:
            raise ValidationError(f"'{answer}' is not an option for '{question.question}'", field=question.id)
        return answer

    if question.type == QuestionType.CHECKBOX:
        if not isinstance(answer, list) or any(a not in options for a in answer):
            raise ValidationError(f"Invalid selection for '{question.question}'", field=question.id)
        return answer

    # Scale
    if isinstance(answer, bool) or not isinstance(answer, int) or not SCALE_MIN <= answer <= SCALE_MAX:
        raise ValidationError(
            f"'{question.question}' expects a number from {SCALE_MIN} to {SCALE_MAX}",
            field=question.id
        )
    return answer


def validate_answers(questions: List[Question], responses: Dict[str, Any]) -> Dict[str, Any]:
    """Check a submission against the form and return the cleaned answers.

    Unknown question ids are dropped. Blank answers are allowed only for
    optional questions.
    """
    cleaned: Dict[str, Any] = {}
    for question in questions:
        answer = responses.get(question.id)
        if _is_blank(answer):
            if question.required:
                raise ValidationError(f"'{question.question}' is required", field=question.id)
            continue
        cleaned[question.id] = _check_answer(question, answer)
    return cleaned


def create_form(db: Session, actor: ActorContext, form_in: FormCreate) -> Form:
    validate_questions(form_in.questions)
    form = crud.form.create_with_admin(db, obj_in=form_in, admin_id=actor.user_id)
    logger.info(f"Form '{form.title}' ({form.id}) created by {actor.user_id}")
    return form


def update_form(db: Session, form_id: str, form_in: FormUpdate) -> Form:
    form = crud.form.get(db, form_id)
    if form is None:
        raise FormNotFoundError(form_id)
    if form_in.questions is not None:
        validate_questions(form_in.questions)
    return crud.form.update_form(db, db_obj=form, obj_in=form_in)


def get_active_form(db: Session, form_id: str) -> Form:
    form = crud.form.get_active(db, form_id=form_id)
    if form is None:
        raise FormNotFoundError(form_id)
    return form


def submit_response(
    db: Session, form_id: str, responses: Dict[str, Any], actor: Optional[ActorContext] = None
) -> FormResponse:
    """Store an answer set for an active form; anonymous submissions allowed"""
    form = get_active_form(db, form_id)
    questions = [Question.model_validate(q) for q in (form.questions or [])]
    cleaned = validate_answers(questions, responses)

    with transaction(db):
        response = crud.form_response.create(
            db,
            obj_in={"form_id": form.id, "responses": cleaned, "user_id": actor.user_id if actor else None},
            commit=False,
        )

    db.refresh(response)
    logger.info(f"Response {response.id} submitted to form {form.id}")
    return response
