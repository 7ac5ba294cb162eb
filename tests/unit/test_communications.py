"""
Unit tests for recipient selection and email broadcasts
"""
import pytest

from app.core.email_service import email_service
from app.core.exceptions import ValidationError
from app.schemas.communication import BroadcastRequest, RecipientScope
from app.services import communications


def test_stall_scope_lists_only_participants(db_session, make_profile, make_event, make_stall, admin):
    fair, expo = make_event(), make_event()
    leader, member, other = make_profile(), make_profile(), make_profile()
    make_stall(fair, leader, members=[member])
    make_stall(expo, other)

    everyone = communications.list_recipients(db_session, RecipientScope.ALL)
    participants = communications.list_recipients(db_session, RecipientScope.STALL)
    fair_only = communications.list_recipients(db_session, RecipientScope.STALL, event_id=fair.id)

    assert len(everyone) == 4
    assert {p.id for p in participants} == {leader.id, member.id, other.id}
    assert {p.id for p in fair_only} == {leader.id, member.id}


def test_broadcast_reports_failed_deliveries(db_session, make_profile, admin, actor_for, monkeypatch):
    reachable = make_profile(email="ok@campus.edu")
    unreachable = make_profile(email="bounce@campus.edu")
    sent_to = []

    def fake_send(to_email, user_name, subject, message):
        sent_to.append(to_email)
        return to_email != "bounce@campus.edu"

    monkeypatch.setattr(email_service, "send_broadcast_email", fake_send)

    result = communications.broadcast(db_session, actor_for(admin), BroadcastRequest(
        recipient_ids=[reachable.id, unreachable.id, reachable.id, "unknown-id"],
        subject="Setup times",
        message="Stalls open at 8am.",
    ))

    assert sorted(sent_to) == ["bounce@campus.edu", "ok@campus.edu"]
    assert result.requested == 3
    assert result.sent == 1
    assert result.failed == 1
    assert result.failed_emails == ["bounce@campus.edu"]


def test_broadcast_needs_a_known_recipient(db_session, admin, actor_for):
    with pytest.raises(ValidationError):
        communications.broadcast(db_session, actor_for(admin), BroadcastRequest(
            recipient_ids=["nobody"], subject="Hi", message="Hello"
        ))


def test_disabled_email_sending_reports_success():
    # SEND_EMAILS is off in tests, so nothing reaches SMTP
    assert email_service.send_email(["someone@campus.edu"], "Subject", "<p>Body</p>") is True
