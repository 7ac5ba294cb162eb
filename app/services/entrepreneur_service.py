"""
Entrepreneur cell applications

Anyone can apply for incubation support without an account. The portfolio,
resume and pitch deck (plus the prototype, when there is one) go to the
object store first; the application row stores their URLs with status
``registered``. Admins list, search and export the applications.
"""

import csv
import io
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.db.database import transaction
from app.models.entrepreneur import EntrepreneurApplication
from app.schemas.entrepreneur import EntrepreneurApplicationCreate
from app.services import storage

logger = logging.getLogger(__name__)

# (filename, data, content_type) of one uploaded file
UploadedFile = Tuple[Optional[str], bytes, Optional[str]]

REQUIRED_TEXT_FIELDS = (
    "full_name", "phone", "department", "year", "idea_title", "idea_summary",
    "problem_solution", "validation", "expected_support", "prior_experience",
    "availability_hours", "why_join",
)

EXPORT_COLUMNS = [
    "id", "created_at", "full_name", "email", "phone", "idea_title", "idea_summary",
    "validation", "expected_support", "portfolio_url", "resume_url", "pitch_deck_url",
    "prototype_url", "status",
]


def _check_fields(application_in: EntrepreneurApplicationCreate, prototype: Optional[UploadedFile]) -> Optional[str]:
    """Returns the cleaned prototype details"""
    if not application_in.consent:
        raise ValidationError("Please accept the consent to submit your application", field="consent")

    for field in REQUIRED_TEXT_FIELDS:
        if not (getattr(application_in, field) or "").strip():
            raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field=field)

    if not application_in.has_prototype:
        return None

    details = (application_in.prototype_details or "").strip()
    if not details:
        raise ValidationError("Describe your prototype", field="prototype_details")
    if prototype is None:
        raise ValidationError("Upload your prototype", field="prototype")
    return details


def submit_application(
    db: Session,
    application_in: EntrepreneurApplicationCreate,
    *,
    portfolio: UploadedFile,
    resume: UploadedFile,
    pitch_deck: UploadedFile,
    prototype: Optional[UploadedFile] = None,
) -> EntrepreneurApplication:
    """Upload the applicant's files and record the application"""
    prototype_details = _check_fields(application_in, prototype)

    files: Dict[str, UploadedFile] = {
        "portfolio": portfolio,
        "resumes": resume,
        "pitchdecks": pitch_deck,
    }
    if application_in.has_prototype:
        files["prototypes"] = prototype

    allowed = settings.ALLOWED_DOCUMENT_TYPES + settings.ALLOWED_IMAGE_TYPES
    for folder, (_, data, content_type) in files.items():
        storage.validate_upload(data, content_type, allowed)

    urls = {
        folder: storage.upload(storage.build_path(f"entrepreneur/{folder}", filename), data, content_type)
        for folder, (filename, data, content_type) in files.items()
    }

    row = application_in.model_dump(exclude={"consent"})
    row.update(
        prototype_details=prototype_details,
        portfolio_url=urls["portfolio"],
        resume_url=urls["resumes"],
        pitch_deck_url=urls["pitchdecks"],
        prototype_url=urls.get("prototypes"),
        status="registered",
    )

    with transaction(db):
        application = crud.entrepreneur_application.create(db, obj_in=row, commit=False)

    db.refresh(application)
    logger.info(f"Entrepreneur application {application.id} received for '{application.idea_title}'")
    return application


def export_csv(applications: List[EntrepreneurApplication]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for application in applications:
        writer.writerow([
            "" if getattr(application, column) is None else getattr(application, column)
            for column in EXPORT_COLUMNS
        ])
    return output.getvalue()
