"""
Unit tests for entrepreneur cell applications
"""
import csv
import io

import pytest

from app import crud
from app.core.exceptions import ExternalServiceError, ValidationError
from app.models import EntrepreneurApplication
from app.schemas.entrepreneur import EntrepreneurApplicationCreate
from app.services import entrepreneur_service, storage

PDF = ("file.pdf", b"%PDF-1.4 content", "application/pdf")


def _application(**overrides) -> EntrepreneurApplicationCreate:
    fields = dict(
        full_name="Wangari Maathai",
        email="wangari@campus.edu",
        phone="0712000000",
        department="Environmental Science",
        year="3rd",
        idea_title="Seed Bank",
        idea_summary="Community seed library",
        problem_solution="Farmers lose heirloom seeds",
        validation="Interviewed 40 farmers",
        expected_support="Mentorship and a pilot budget",
        prior_experience="Ran the campus garden",
        availability_hours="10 per week",
        why_join="To scale the pilot",
        consent=True,
    )
    fields.update(overrides)
    return EntrepreneurApplicationCreate(**fields)


@pytest.fixture
def uploads(monkeypatch):
    paths = []

    def fake_upload(path, data, content_type=None):
        paths.append(path)
        return f"https://res.cloudinary.com/demo/raw/upload/{path}"

    monkeypatch.setattr(storage, "upload", fake_upload)
    return paths


def _submit(db, application_in, **files):
    files.setdefault("portfolio", PDF)
    files.setdefault("resume", PDF)
    files.setdefault("pitch_deck", PDF)
    return entrepreneur_service.submit_application(db, application_in, **files)


class TestSubmitApplication:

    def test_uploads_files_and_records_application(self, db_session, uploads):
        application = _submit(db_session, _application())

        assert application.status == "registered"
        assert application.has_prototype is False
        assert application.prototype_url is None
        assert [p.split("/")[1] for p in uploads] == ["portfolio", "resumes", "pitchdecks"]
        assert all(p.startswith("entrepreneur/") and p.endswith(".pdf") for p in uploads)
        assert application.pitch_deck_url.endswith(uploads[2])

    def test_prototype_file_uploaded_when_declared(self, db_session, uploads):
        application = _submit(
            db_session,
            _application(has_prototype=True, prototype_details="  Arduino sensor rig  "),
            prototype=("demo.png", b"\x89PNG", "image/png"),
        )

        assert application.prototype_details == "Arduino sensor rig"
        assert application.prototype_url.endswith(uploads[3])
        assert uploads[3].startswith("entrepreneur/prototypes/")

    def test_prototype_needs_details_and_file(self, db_session, uploads):
        with pytest.raises(ValidationError) as exc_info:
            _submit(db_session, _application(has_prototype=True), prototype=PDF)
        assert exc_info.value.details["field"] == "prototype_details"

        with pytest.raises(ValidationError) as exc_info:
            _submit(db_session, _application(has_prototype=True, prototype_details="A rig"))
        assert exc_info.value.details["field"] == "prototype"

        assert uploads == []

    def test_details_dropped_without_prototype(self, db_session, uploads):
        application = _submit(db_session, _application(prototype_details="Leftover text"), prototype=PDF)

        assert application.prototype_details is None
        assert application.prototype_url is None
        assert len(uploads) == 3

    def test_consent_required(self, db_session, uploads):
        with pytest.raises(ValidationError) as exc_info:
            _submit(db_session, _application(consent=False))

        assert exc_info.value.details["field"] == "consent"
        assert db_session.query(EntrepreneurApplication).count() == 0

    def test_blank_text_field_rejected(self, db_session, uploads):
        with pytest.raises(ValidationError) as exc_info:
            _submit(db_session, _application(idea_title="   "))

        assert exc_info.value.details["field"] == "idea_title"

    def test_bad_file_rejected_before_any_upload(self, db_session, uploads):
        with pytest.raises(ValidationError):
            _submit(db_session, _application(), pitch_deck=("deck.exe", b"MZ", "application/x-msdownload"))

        assert uploads == []

    def test_store_failure_writes_nothing(self, db_session, monkeypatch):
        def broken_upload(path, data, content_type=None):
            raise ExternalServiceError("object_store")

        monkeypatch.setattr(storage, "upload", broken_upload)

        with pytest.raises(ExternalServiceError):
            _submit(db_session, _application())

        assert db_session.query(EntrepreneurApplication).count() == 0


class TestListAndExport:

    def test_search_matches_idea_and_contact(self, db_session, uploads):
        _submit(db_session, _application(full_name="Wangari Maathai", idea_title="Seed Bank"))
        _submit(db_session, _application(full_name="Thomas Odhiambo", idea_title="Solar Kiosk", phone="0733999999"))

        by_idea = crud.entrepreneur_application.get_multi_recent(db_session, search_text="solar")
        by_phone = crud.entrepreneur_application.get_multi_recent(db_session, search_text="0733")

        assert [a.full_name for a in by_idea] == ["Thomas Odhiambo"]
        assert [a.full_name for a in by_phone] == ["Thomas Odhiambo"]
        assert len(crud.entrepreneur_application.get_multi_recent(db_session)) == 2

    def test_export_has_header_and_one_row_per_application(self, db_session, uploads):
        application = _submit(db_session, _application(idea_summary='Seeds, "saved" locally'))

        rows = list(csv.reader(io.StringIO(entrepreneur_service.export_csv([application]))))

        assert rows[0] == entrepreneur_service.EXPORT_COLUMNS
        assert len(rows) == 2
        record = dict(zip(rows[0], rows[1]))
        assert record["id"] == application.id
        assert record["idea_summary"] == 'Seeds, "saved" locally'
        assert record["prototype_url"] == ""
        assert record["status"] == "registered"
