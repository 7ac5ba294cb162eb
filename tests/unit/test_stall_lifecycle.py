"""
Unit tests for the stall lifecycle service
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app import crud
from app.core.exceptions import (
    EventNotOpenError, ExternalServiceError, ForbiddenError, MemberNotFoundError,
    SelfReferenceError, DuplicateMemberError, StallAlreadyDecidedError,
    StallNotApprovedError, StallNotFoundError, StallNumberTakenError,
    TeamTooLargeError, ValidationError, ConflictError,
)
from app.models import Certificate, CertificateType, Stall, StallStatus
from app.schemas.stall import StallRegister
from app.services import stall_lifecycle, storage


def _register(db, actor, event, emails=(), **kwargs):
    registration = StallRegister(
        event_id=event.id,
        name=kwargs.pop("name", "Tech Innovators"),
        member_emails=list(emails),
        **kwargs
    )
    return stall_lifecycle.register_stall(db, actor, registration)


class TestRegisterStall:

    def test_registers_pending_stall_with_members(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        a = make_profile(email="a@campus.edu")
        b = make_profile(email="b@campus.edu")

        stall = _register(db_session, actor_for(leader), open_event, ["a@campus.edu", "b@campus.edu"])

        assert stall.status == StallStatus.PENDING
        assert stall.stall_number is None
        assert stall.leader_id == leader.id
        assert stall.members == [a.id, b.id]
        assert stall.team_size == 3
        assert stall.approved_at is None

    def test_member_emails_match_case_insensitively(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        member = make_profile(email="mixed.case@campus.edu")

        stall = _register(db_session, actor_for(leader), open_event, ["  Mixed.Case@Campus.edu "])

        assert stall.members == [member.id]

    def test_blank_member_rows_are_ignored(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()

        stall = _register(db_session, actor_for(leader), open_event, ["", "   "])

        assert stall.members == []
        assert stall.team_size == 1

    def test_self_reference_rejected(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile(email="leader@campus.edu")

        with pytest.raises(SelfReferenceError) as exc_info:
            _register(db_session, actor_for(leader), open_event, ["leader@campus.edu"])

        assert exc_info.value.code == "SELF_REFERENCE"
        assert db_session.query(Stall).count() == 0

    def test_unknown_member_rejected_without_writing(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        make_profile(email="known@campus.edu")

        with pytest.raises(MemberNotFoundError) as exc_info:
            _register(db_session, actor_for(leader), open_event, ["known@campus.edu", "ghost@campus.edu"])

        assert exc_info.value.details["email"] == "ghost@campus.edu"
        assert exc_info.value.status_code == 404
        assert exc_info.value.kind == "not_found"
        assert db_session.query(Stall).count() == 0

    def test_duplicate_member_rejected(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        make_profile(email="dup@campus.edu")

        with pytest.raises(DuplicateMemberError):
            _register(db_session, actor_for(leader), open_event, ["dup@campus.edu", "DUP@campus.edu"])

    def test_fifth_member_rejected(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        emails = [make_profile().email for _ in range(5)]

        with pytest.raises(TeamTooLargeError) as exc_info:
            _register(db_session, actor_for(leader), open_event, emails)

        assert exc_info.value.details["limit"] == 4
        assert db_session.query(Stall).count() == 0

    def test_four_members_is_the_maximum_team(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()
        emails = [make_profile().email for _ in range(4)]

        stall = _register(db_session, actor_for(leader), open_event, emails)

        assert stall.team_size == 5

    def test_closed_event_rejected(self, db_session, make_profile, make_event, actor_for):
        leader = make_profile()
        closed = make_event(registration_open=False)

        with pytest.raises(EventNotOpenError) as exc_info:
            _register(db_session, actor_for(leader), closed)

        assert exc_info.value.kind == "validation_error"

    def test_unknown_event_rejected(self, db_session, make_profile, actor_for):
        leader = make_profile()
        registration = StallRegister(event_id="missing", name="Robotics", member_emails=[])

        with pytest.raises(EventNotOpenError):
            stall_lifecycle.register_stall(db_session, actor_for(leader), registration)

    def test_blank_name_rejected(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()

        with pytest.raises(ValidationError) as exc_info:
            _register(db_session, actor_for(leader), open_event, name="   ")

        assert exc_info.value.details["field"] == "name"

    def test_phone_saved_on_leader_profile(self, db_session, make_profile, open_event, actor_for):
        leader = make_profile()

        _register(db_session, actor_for(leader), open_event, phone=" 0712345678 ")

        db_session.refresh(leader)
        assert leader.phone == "0712345678"

    def test_failed_insert_rolls_back_phone_update(self, db_session, make_profile, open_event, actor_for, monkeypatch):
        leader = make_profile()

        def broken_insert(db, **kwargs):
            raise OperationalError("INSERT INTO stalls", {}, Exception("database is locked"))

        monkeypatch.setattr(crud.stall, "create_pending", broken_insert)

        with pytest.raises(ExternalServiceError):
            _register(db_session, actor_for(leader), open_event, phone="0712345678")

        db_session.refresh(leader)
        assert leader.phone is None
        assert db_session.query(Stall).count() == 0


class TestDecideStall:

    def test_approve_sets_approved_at(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile())

        decided = stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.APPROVED)

        assert decided.status == StallStatus.APPROVED
        assert decided.approved_at is not None
        assert decided.stall_number is None

    def test_junior_admin_can_reject(self, db_session, make_profile, open_event, make_stall, junior_admin, actor_for):
        stall = make_stall(open_event, make_profile())

        decided = stall_lifecycle.decide_stall(db_session, actor_for(junior_admin), stall.id, StallStatus.REJECTED)

        assert decided.status == StallStatus.REJECTED
        assert decided.approved_at is None

    def test_student_cannot_decide(self, db_session, make_profile, open_event, make_stall, student, actor_for):
        stall = make_stall(open_event, make_profile())

        with pytest.raises(ForbiddenError):
            stall_lifecycle.decide_stall(db_session, actor_for(student), stall.id, StallStatus.APPROVED)

    def test_second_decision_is_a_conflict(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile())
        stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.APPROVED)

        with pytest.raises(StallAlreadyDecidedError) as exc_info:
            stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.REJECTED)

        assert isinstance(exc_info.value, ConflictError)
        assert exc_info.value.details["status"] == "approved"
        db_session.refresh(stall)
        assert stall.status == StallStatus.APPROVED

    def test_decision_refused_when_row_changed_underneath(
        self, db_session, make_profile, open_event, make_stall, admin, actor_for
    ):
        stall = make_stall(open_event, make_profile())
        # Another reviewer approves after this session loaded the stall as pending
        db_session.query(Stall).filter(Stall.id == stall.id).update(
            {Stall.status: StallStatus.APPROVED}, synchronize_session=False
        )
        assert stall.status == StallStatus.PENDING

        with pytest.raises(StallAlreadyDecidedError) as exc_info:
            stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.REJECTED)

        assert exc_info.value.details["status"] == "approved"

    def test_reject_clears_approved_at(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile(), approved_at=datetime(2026, 1, 5, tzinfo=timezone.utc))

        decided = stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.REJECTED)

        assert decided.status == StallStatus.REJECTED
        assert decided.approved_at is None

    def test_pending_is_not_a_decision(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile())

        with pytest.raises(ValidationError):
            stall_lifecycle.decide_stall(db_session, actor_for(admin), stall.id, StallStatus.PENDING)

    def test_unknown_stall(self, db_session, admin, actor_for):
        with pytest.raises(StallNotFoundError):
            stall_lifecycle.decide_stall(db_session, actor_for(admin), "missing", StallStatus.APPROVED)


class TestAssignStallNumber:

    def test_assigns_number_to_approved_stall(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile(), status=StallStatus.APPROVED)

        numbered = stall_lifecycle.assign_stall_number(db_session, actor_for(admin), stall.id, 7)

        assert numbered.stall_number == 7
        assert stall_lifecycle.next_stall_number(db_session, open_event.id) == 8

    def test_pending_stall_cannot_be_numbered(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile())

        with pytest.raises(StallNotApprovedError):
            stall_lifecycle.assign_stall_number(db_session, actor_for(admin), stall.id, 1)

    def test_number_unique_within_event(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        first = make_stall(open_event, make_profile(), status=StallStatus.APPROVED)
        second = make_stall(open_event, make_profile(), status=StallStatus.APPROVED)
        stall_lifecycle.assign_stall_number(db_session, actor_for(admin), first.id, 3)

        with pytest.raises(StallNumberTakenError) as exc_info:
            stall_lifecycle.assign_stall_number(db_session, actor_for(admin), second.id, 3)

        assert exc_info.value.status_code == 409
        db_session.refresh(second)
        assert second.stall_number is None

    def test_same_number_allowed_in_another_event(
        self, db_session, make_profile, make_event, make_stall, admin, actor_for
    ):
        first = make_stall(make_event(), make_profile(), status=StallStatus.APPROVED)
        second = make_stall(make_event(), make_profile(), status=StallStatus.APPROVED)

        stall_lifecycle.assign_stall_number(db_session, actor_for(admin), first.id, 1)
        numbered = stall_lifecycle.assign_stall_number(db_session, actor_for(admin), second.id, 1)

        assert numbered.stall_number == 1

    def test_reassigning_same_number_is_a_no_op(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile(), status=StallStatus.APPROVED, stall_number=2)

        numbered = stall_lifecycle.assign_stall_number(db_session, actor_for(admin), stall.id, 2)

        assert numbered.stall_number == 2

    @pytest.mark.parametrize("number", [0, -4])
    def test_non_positive_number_rejected(self, db_session, make_profile, open_event, make_stall, admin, actor_for, number):
        stall = make_stall(open_event, make_profile(), status=StallStatus.APPROVED)

        with pytest.raises(ValidationError):
            stall_lifecycle.assign_stall_number(db_session, actor_for(admin), stall.id, number)

    def test_next_number_starts_at_one(self, db_session, open_event):
        assert stall_lifecycle.next_stall_number(db_session, open_event.id) == 1


class TestIssueCertificates:

    @pytest.fixture
    def approved_stall(self, make_profile, open_event, make_stall):
        leader = make_profile()
        members = [make_profile(), make_profile()]
        return make_stall(open_event, leader, members=members, status=StallStatus.APPROVED)

    def test_one_certificate_per_team_member(self, db_session, approved_stall, admin, actor_for):
        result = stall_lifecycle.issue_certificates(db_session, actor_for(admin), approved_stall.id)

        assert [c.type for c in result.created] == [
            CertificateType.LEADER, CertificateType.MEMBER, CertificateType.MEMBER
        ]
        assert [c.user_id for c in result.created] == [approved_stall.leader_id] + approved_stall.members
        assert result.skipped == 0
        assert db_session.query(Certificate).count() == 3

    def test_certificate_references(self, db_session, approved_stall, admin, actor_for):
        result = stall_lifecycle.issue_certificates(db_session, actor_for(admin), approved_stall.id)

        leader_cert, member_cert = result.created[0], result.created[1]
        assert leader_cert.certificate_url == f"cert_{approved_stall.id}_leader.pdf"
        assert member_cert.certificate_url == f"cert_{approved_stall.id}_{approved_stall.members[0]}.pdf"
        assert leader_cert.blockchain_hash.startswith("hash_")
        assert leader_cert.blockchain_hash.endswith("_leader")
        assert all(c.event_id == approved_stall.event_id for c in result.created)

    def test_second_run_creates_nothing(self, db_session, approved_stall, admin, actor_for):
        stall_lifecycle.issue_certificates(db_session, actor_for(admin), approved_stall.id)

        again = stall_lifecycle.issue_certificates(db_session, actor_for(admin), approved_stall.id)

        assert again.created == []
        assert again.skipped == 3
        assert db_session.query(Certificate).count() == 3

    def test_pending_stall_rejected(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        stall = make_stall(open_event, make_profile())

        with pytest.raises(StallNotApprovedError):
            stall_lifecycle.issue_certificates(db_session, actor_for(admin), stall.id)

        assert db_session.query(Certificate).count() == 0

    def test_student_cannot_issue(self, db_session, approved_stall, student, actor_for):
        with pytest.raises(ForbiddenError):
            stall_lifecycle.issue_certificates(db_session, actor_for(student), approved_stall.id)

    def test_bulk_issue_continues_past_failed_stall(
        self, db_session, make_profile, open_event, make_stall, admin, actor_for, monkeypatch
    ):
        good = make_stall(open_event, make_profile(), members=[make_profile()],
                          status=StallStatus.APPROVED, stall_number=1)
        broken = make_stall(open_event, make_profile(), status=StallStatus.APPROVED, stall_number=2)
        make_stall(open_event, make_profile())  # pending, not part of the run
        good_id, broken_id = good.id, broken.id

        original = crud.certificate.create_many

        def flaky_create_many(db, *, objs_in):
            if objs_in and objs_in[0]["stall_id"] == broken_id:
                raise OperationalError("INSERT INTO certificates", {}, Exception("disk I/O error"))
            return original(db, objs_in=objs_in)

        monkeypatch.setattr(crud.certificate, "create_many", flaky_create_many)

        result = stall_lifecycle.issue_certificates_for_event(db_session, actor_for(admin), open_event.id)

        assert result.stalls_processed == 2
        assert result.stalls_failed == 1
        assert result.certificates_created == 2
        by_stall = {r.stall_id: r for r in result.results}
        assert by_stall[good_id].error is None
        assert by_stall[broken_id].error["kind"] == "external_service_error"
        assert db_session.query(Certificate).filter(Certificate.stall_id == good_id).count() == 2
        assert db_session.query(Certificate).filter(Certificate.stall_id == broken_id).count() == 0

    def test_participation_certificate_issued_once(self, db_session, open_event, student, admin, actor_for):
        first = stall_lifecycle.issue_participation_certificate(db_session, actor_for(admin), open_event.id, student.id)
        second = stall_lifecycle.issue_participation_certificate(db_session, actor_for(admin), open_event.id, student.id)

        assert first.id == second.id
        assert first.type == CertificateType.PARTICIPATION
        assert first.stall_id is None

    def test_list_my_certificates(self, db_session, approved_stall, admin, actor_for):
        stall_lifecycle.issue_certificates(db_session, actor_for(admin), approved_stall.id)
        member = crud.profile.get(db_session, approved_stall.members[0])

        mine = stall_lifecycle.list_my_certificates(db_session, actor_for(member))

        assert len(mine) == 1
        assert mine[0].type == CertificateType.MEMBER
        assert mine[0].stall_name == approved_stall.name
        assert mine[0].event_name == "Innovation Fair"


class TestStallQueries:

    def test_list_stalls_filters_and_searches(self, db_session, make_profile, make_event, make_stall, admin, actor_for):
        fair = make_event(name="Spring Fair")
        expo = make_event(name="Tech Expo")
        ada = make_profile(full_name="Ada Lovelace")
        make_stall(fair, ada, name="Analytical Engines", status=StallStatus.APPROVED)
        make_stall(fair, make_profile(full_name="Grace Hopper"), name="Compilers")
        make_stall(expo, make_profile(full_name="Alan Turing"), name="Codebreakers")
        reviewer = actor_for(admin)

        assert len(stall_lifecycle.list_stalls(db_session, reviewer)) == 3
        assert len(stall_lifecycle.list_stalls(db_session, reviewer, event_id=fair.id)) == 2

        approved = stall_lifecycle.list_stalls(db_session, reviewer, status=StallStatus.APPROVED)
        assert [s.name for s in approved] == ["Analytical Engines"]
        assert approved[0].event_name == "Spring Fair"
        assert approved[0].leader.full_name == "Ada Lovelace"

        by_leader = stall_lifecycle.list_stalls(db_session, reviewer, search_text="lovelace")
        assert [s.name for s in by_leader] == ["Analytical Engines"]

    def test_search_wildcards_match_literally(self, db_session, make_profile, open_event, make_stall, admin, actor_for):
        make_stall(open_event, make_profile(), name="100% Solar", status=StallStatus.APPROVED)
        make_stall(open_event, make_profile(), name="Robotics", status=StallStatus.APPROVED)
        make_stall(open_event, make_profile(), name="snake_case", status=StallStatus.APPROVED)
        reviewer = actor_for(admin)

        assert [s.name for s in stall_lifecycle.list_stalls(db_session, reviewer, search_text="%")] == ["100% Solar"]
        assert [s.name for s in stall_lifecycle.list_stalls(db_session, reviewer, search_text="_")] == ["snake_case"]

    def test_students_only_see_approved_stalls(self, db_session, make_profile, open_event, make_stall, student, actor_for):
        leader = make_profile()
        make_stall(open_event, leader, name="Approved", status=StallStatus.APPROVED)
        make_stall(open_event, leader, name="Pending")
        make_stall(open_event, leader, name="Rejected", status=StallStatus.REJECTED)
        viewer = actor_for(student)

        assert [s.name for s in stall_lifecycle.list_stalls(db_session, viewer)] == ["Approved"]
        assert stall_lifecycle.list_stalls(db_session, viewer, status=StallStatus.PENDING) == []
        assert stall_lifecycle.list_stalls(db_session, viewer, status=StallStatus.REJECTED) == []

    def test_junior_admin_sees_every_status(self, db_session, make_profile, open_event, make_stall, junior_admin, actor_for):
        make_stall(open_event, make_profile(), status=StallStatus.APPROVED)
        make_stall(open_event, make_profile())
        make_stall(open_event, make_profile(), status=StallStatus.REJECTED)

        assert len(stall_lifecycle.list_stalls(db_session, actor_for(junior_admin))) == 3

    def test_event_listing_orders_by_stall_number(self, db_session, make_profile, open_event, make_stall, student, actor_for):
        make_stall(open_event, make_profile(), name="Unnumbered", status=StallStatus.APPROVED)
        make_stall(open_event, make_profile(), name="Second", status=StallStatus.APPROVED, stall_number=2)
        make_stall(open_event, make_profile(), name="First", status=StallStatus.APPROVED, stall_number=1)

        names = [s.name for s in stall_lifecycle.list_stalls(db_session, actor_for(student), event_id=open_event.id)]

        assert names == ["First", "Second", "Unnumbered"]

    def test_list_my_stalls_includes_membership(self, db_session, make_profile, open_event, make_stall, actor_for):
        member = make_profile()
        led = make_stall(open_event, member, name="Led")
        joined = make_stall(open_event, make_profile(), members=[member], name="Joined")
        make_stall(open_event, make_profile(), name="Unrelated")

        mine = stall_lifecycle.list_my_stalls(db_session, actor_for(member))

        assert {s.id for s in mine} == {led.id, joined.id}

    def test_stall_detail_includes_member_profiles(self, db_session, make_profile, open_event, make_stall, actor_for):
        first, second = make_profile(), make_profile()
        stall = make_stall(open_event, make_profile(), members=[first, second])

        detail = stall_lifecycle.get_stall_detail(db_session, actor_for(first), stall.id)

        assert [m.id for m in detail.member_profiles] == [first.id, second.id]
        assert detail.event_name == "Innovation Fair"

    def test_pending_stall_hidden_from_outsiders(self, db_session, make_profile, open_event, make_stall, student, actor_for):
        stall = make_stall(open_event, make_profile())

        with pytest.raises(StallNotFoundError):
            stall_lifecycle.get_stall_detail(db_session, actor_for(student), stall.id)

    def test_pending_stall_visible_to_reviewer(self, db_session, make_profile, open_event, make_stall, junior_admin, actor_for):
        stall = make_stall(open_event, make_profile(), status=StallStatus.REJECTED)

        detail = stall_lifecycle.get_stall_detail(db_session, actor_for(junior_admin), stall.id)

        assert detail.status == StallStatus.REJECTED

    def test_approved_stall_visible_to_anyone(self, db_session, make_profile, open_event, make_stall, student, actor_for):
        stall = make_stall(open_event, make_profile(), status=StallStatus.APPROVED)

        detail = stall_lifecycle.get_stall_detail(db_session, actor_for(student), stall.id)

        assert detail.id == stall.id

    def test_stall_detail_unknown(self, db_session, admin, actor_for):
        with pytest.raises(StallNotFoundError):
            stall_lifecycle.get_stall_detail(db_session, actor_for(admin), "missing")


class TestAttachments:

    def test_leader_uploads_attachment(self, db_session, make_profile, open_event, make_stall, actor_for, monkeypatch):
        leader = make_profile()
        stall = make_stall(open_event, leader)
        uploaded = {}

        def fake_upload(path, data, content_type=None):
            uploaded["path"] = path
            return f"https://res.cloudinary.com/demo/raw/upload/{path}"

        monkeypatch.setattr(storage, "upload", fake_upload)

        updated = stall_lifecycle.add_attachment(
            db_session, actor_for(leader), stall.id, "pitch.pdf", b"%PDF-1.4", "application/pdf"
        )

        assert uploaded["path"].startswith(f"stalls/{stall.id}/")
        assert uploaded["path"].endswith(".pdf")
        assert updated.attachments == [f"https://res.cloudinary.com/demo/raw/upload/{uploaded['path']}"]

    def test_member_cannot_upload(self, db_session, make_profile, open_event, make_stall, actor_for):
        member = make_profile()
        stall = make_stall(open_event, make_profile(), members=[member])

        with pytest.raises(ForbiddenError):
            stall_lifecycle.add_attachment(
                db_session, actor_for(member), stall.id, "pitch.pdf", b"%PDF-1.4", "application/pdf"
            )

    def test_unexpected_file_type_rejected(self, db_session, make_profile, open_event, make_stall, actor_for):
        leader = make_profile()
        stall = make_stall(open_event, leader)

        with pytest.raises(ValidationError):
            stall_lifecycle.add_attachment(
                db_session, actor_for(leader), stall.id, "run.sh", b"#!/bin/sh", "text/x-shellscript"
            )
