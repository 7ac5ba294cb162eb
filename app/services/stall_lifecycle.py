"""
Stall lifecycle service

Registration -> review (approve / reject) -> numbering -> certificates.

Every operation takes the caller as an explicit ActorContext and raises a
CampusEventsError subclass on failure. Multi-step writes run inside
``transaction`` so a failure leaves nothing half written.
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.exceptions import (
    CampusEventsError, ConflictError, DuplicateMemberError, EventNotFoundError,
    EventNotOpenError, ForbiddenError, MemberNotFoundError, ProfileNotFoundError,
    SelfReferenceError, StallAlreadyDecidedError, StallNotApprovedError,
    StallNotFoundError, StallNumberTakenError, TeamTooLargeError, ValidationError,
)
from app.core.permissions import REVIEWER_ROLES, can_review_stalls, ensure_roles
from app.db.database import transaction
from app.models.certificate import Certificate, CertificateType
from app.models.profile import Profile
from app.models.stall import Stall, StallStatus
from app.schemas.auth import ActorContext
from app.schemas.certificate import (
    Certificate as CertificateSchema, CertificateWithDetails,
    EventCertificateResult, StallCertificateResult,
)
from app.schemas.profile import ProfileSummary
from app.schemas.stall import Stall as StallSchema, StallRegister, StallWithEvent, StallWithMembers
from app.services import storage

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ==========================================
# REGISTRATION
# ==========================================

def _clean_member_emails(member_emails: List[str]) -> List[str]:
    """Drop blank rows, enforce the team cap and reject duplicates"""
    emails = [e.strip() for e in member_emails if e and e.strip()]

    if len(emails) > settings.MAX_TEAM_MEMBERS:
        raise TeamTooLargeError(len(emails), settings.MAX_TEAM_MEMBERS)

    seen = set()
    for email in emails:
        key = email.lower()
        if key in seen:
            raise DuplicateMemberError(email)
        seen.add(key)
    return emails


def _resolve_members(db: Session, leader_id: str, emails: List[str]) -> List[str]:
    """Map every email to a profile id. Any miss fails the whole team."""
    member_ids: List[str] = []
    for email in emails:
        member = crud.profile.get_by_email(db, email=email)
        if member is None:
            raise MemberNotFoundError(email)
        if member.id == leader_id:
            raise SelfReferenceError(email)
        if member.id in member_ids:
            raise DuplicateMemberError(email)
        member_ids.append(member.id)
    return member_ids


def register_stall(db: Session, actor: ActorContext, registration: StallRegister) -> Stall:
    """Create a pending stall led by ``actor``.

    Nothing is written until the event, the name and every member email
    check out. The leader's phone update and the stall insert share one
    transaction.
    """
    event = crud.event.get(db, registration.event_id)
    if event is None or not event.registration_open:
        logger.warning(f"Stall registration refused, event {registration.event_id} is not open")
        raise EventNotOpenError(registration.event_id)

    name = (registration.name or "").strip()
    if not name:
        raise ValidationError("Stall name is required", field="name")

    emails = _clean_member_emails(registration.member_emails)
    member_ids = _resolve_members(db, actor.user_id, emails)

    leader = crud.profile.get(db, actor.user_id)
    if leader is None:
        raise ProfileNotFoundError(actor.user_id)

    description = (registration.description or "").strip() or None

    with transaction(db):
        if registration.phone and registration.phone.strip():
            crud.profile.update_phone(db, db_obj=leader, phone=registration.phone.strip(), commit=False)

        stall = crud.stall.create_pending(
            db,
            event_id=event.id,
            leader_id=leader.id,
            name=name,
            description=description,
            members=member_ids,
            applied_at=_now(),
        )

    db.refresh(stall)
    logger.info(f"Stall '{stall.name}' ({stall.id}) registered for event {event.id} with team size {stall.team_size}")
    return stall


def add_attachment(
    db: Session, actor: ActorContext, stall_id: str, filename: Optional[str], data: bytes, content_type: Optional[str]
) -> Stall:
    """Upload a pitch deck or report and attach it to the stall. Leader only."""
    stall = _get_stall(db, stall_id)
    if stall.leader_id != actor.user_id:
        raise ForbiddenError("Only the stall leader can add attachments")

    storage.validate_upload(
        data, content_type, settings.ALLOWED_DOCUMENT_TYPES + settings.ALLOWED_IMAGE_TYPES
    )
    url = storage.upload(storage.build_path(f"stalls/{stall.id}", filename), data, content_type)

    with transaction(db):
        crud.stall.add_attachment(db, db_obj=stall, url=url)

    db.refresh(stall)
    return stall


# ==========================================
# REVIEW
# ==========================================

def _get_stall(db: Session, stall_id: str) -> Stall:
    stall = crud.stall.get(db, stall_id)
    if stall is None:
        raise StallNotFoundError(stall_id)
    return stall


def decide_stall(db: Session, actor: ActorContext, stall_id: str, decision: StallStatus) -> Stall:
    """Approve or reject a pending stall"""
    ensure_roles(actor, REVIEWER_ROLES, "review stalls")

    if decision not in (StallStatus.APPROVED, StallStatus.REJECTED):
        raise ValidationError("Decision must be 'approved' or 'rejected'", field="decision")

    stall = _get_stall(db, stall_id)
    if stall.status != StallStatus.PENDING:
        logger.warning(f"Stall {stall.id} already {stall.status.value}, refusing to mark it {decision.value}")
        raise StallAlreadyDecidedError(stall.id, stall.status.value)

    approved_at = _now() if decision == StallStatus.APPROVED else None
    with transaction(db):
        if not crud.stall.decide(db, stall_id=stall.id, status=decision, approved_at=approved_at):
            current = crud.stall.get_status(db, stall_id=stall.id)
            if current is None:
                raise StallNotFoundError(stall.id)
            logger.warning(f"Stall {stall.id} was decided concurrently ({current.value}), refusing {decision.value}")
            raise StallAlreadyDecidedError(stall.id, current.value)

    db.refresh(stall)
    logger.info(f"Stall {stall.id} {decision.value} by {actor.user_id} ({actor.role.value})")
    return stall


def assign_stall_number(db: Session, actor: ActorContext, stall_id: str, number: int) -> Stall:
    """Give an approved stall its number, unique within the event"""
    ensure_roles(actor, REVIEWER_ROLES, "number stalls")

    if isinstance(number, bool) or not isinstance(number, int) or number < 1:
        raise ValidationError("Stall number must be a positive integer", field="stall_number")

    stall = _get_stall(db, stall_id)
    if stall.status != StallStatus.APPROVED:
        raise StallNotApprovedError(stall.id, stall.status.value)

    if stall.stall_number == number:
        return stall

    holder = crud.stall.get_by_number(db, event_id=stall.event_id, number=number)
    if holder is not None and holder.id != stall.id:
        raise StallNumberTakenError(stall.event_id, number)

    with transaction(db, on_conflict=lambda: StallNumberTakenError(stall.event_id, number)):
        crud.stall.set_number(db, db_obj=stall, number=number)

    db.refresh(stall)
    logger.info(f"Stall {stall.id} assigned number {number} in event {stall.event_id}")
    return stall


def next_stall_number(db: Session, event_id: str) -> int:
    current = crud.stall.max_number(db, event_id=event_id)
    return (current or 0) + 1


# ==========================================
# CERTIFICATES
# ==========================================

def _certificate_rows(stall: Stall, existing: set) -> Tuple[List[dict], int]:
    """Rows for the leader and each member that lack a certificate yet"""
    generated_at = _now()
    token = int(time.time() * 1000)

    subjects = [(stall.leader_id, CertificateType.LEADER, "leader")]
    subjects += [(member_id, CertificateType.MEMBER, member_id) for member_id in (stall.members or [])]

    rows = []
    skipped = 0
    for user_id, cert_type, subject in subjects:
        if (user_id, cert_type) in existing:
            skipped += 1
            continue
        rows.append({
            "type": cert_type,
            "user_id": user_id,
            "stall_id": stall.id,
            "event_id": stall.event_id,
            "generated_at": generated_at,
            "certificate_url": f"cert_{stall.id}_{subject}.pdf",
            "blockchain_hash": f"hash_{token}_{subject}",
        })
    return rows, skipped


def _issue_for_stall(db: Session, stall: Stall) -> StallCertificateResult:
    if stall.status != StallStatus.APPROVED:
        raise StallNotApprovedError(stall.id, stall.status.value)

    stall_id = stall.id
    existing = crud.certificate.existing_subjects(db, stall_id=stall_id)
    rows, skipped = _certificate_rows(stall, existing)

    def conflict() -> ConflictError:
        # A concurrent run inserted the same (stall, user, type) first
        return ConflictError(
            "Certificates for this stall are already being issued",
            code="CERTIFICATES_ALREADY_ISSUED",
            details={"stall_id": stall_id},
        )

    with transaction(db, on_conflict=conflict):
        created = crud.certificate.create_many(db, objs_in=rows) if rows else []

    logger.info(f"Issued {len(created)} certificates for stall {stall.id}, skipped {skipped} existing")
    return StallCertificateResult(
        stall_id=stall.id,
        stall_name=stall.name,
        created=[CertificateSchema.model_validate(c) for c in created],
        skipped=skipped,
    )


def issue_certificates(db: Session, actor: ActorContext, stall_id: str) -> StallCertificateResult:
    """One leader certificate plus one per member; existing ones are skipped"""
    ensure_roles(actor, REVIEWER_ROLES, "issue certificates")
    stall = _get_stall(db, stall_id)
    return _issue_for_stall(db, stall)


def issue_certificates_for_event(db: Session, actor: ActorContext, event_id: str) -> EventCertificateResult:
    """Issue for every approved stall of the event.

    Each stall commits on its own. A stall that fails is reported and the
    batch moves on; stalls already done keep their certificates.
    """
    ensure_roles(actor, REVIEWER_ROLES, "issue certificates")

    event = crud.event.get(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)

    results: List[StallCertificateResult] = []
    for stall in crud.stall.get_approved_for_event(db, event_id=event.id):
        try:
            results.append(_issue_for_stall(db, stall))
        except CampusEventsError as e:
            logger.warning(f"Certificate issuance failed for stall {stall.id}: {e.code} {e.message}")
            results.append(StallCertificateResult(stall_id=stall.id, stall_name=stall.name, error=e.to_dict()))

    failed = sum(1 for r in results if r.error)
    created = sum(len(r.created) for r in results)
    logger.info(f"Bulk issuance for event {event.id}: {len(results)} stalls, {created} certificates, {failed} failed")

    return EventCertificateResult(
        event_id=event.id,
        stalls_processed=len(results),
        stalls_failed=failed,
        certificates_created=created,
        results=results,
    )


def issue_participation_certificate(db: Session, actor: ActorContext, event_id: str, user_id: str) -> Certificate:
    """Participation certificate not tied to a stall; returns the existing one if present"""
    ensure_roles(actor, REVIEWER_ROLES, "issue certificates")

    event = crud.event.get(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    if crud.profile.get(db, user_id) is None:
        raise ProfileNotFoundError(user_id)

    existing = crud.certificate.get_participation(db, event_id=event.id, user_id=user_id)
    if existing is not None:
        return existing

    token = int(time.time() * 1000)
    with transaction(db):
        certificate = crud.certificate.create(db, obj_in={
            "type": CertificateType.PARTICIPATION,
            "user_id": user_id,
            "stall_id": None,
            "event_id": event.id,
            "generated_at": _now(),
            "certificate_url": f"cert_{event.id}_{user_id}_participation.pdf",
            "blockchain_hash": f"hash_{token}_{user_id}",
        }, commit=False)

    db.refresh(certificate)
    logger.info(f"Participation certificate issued to {user_id} for event {event.id}")
    return certificate


def _with_details(rows) -> List[CertificateWithDetails]:
    return [
        CertificateWithDetails(
            **CertificateSchema.model_validate(cert).model_dump(),
            event_name=event_name,
            stall_name=stall_name,
        )
        for cert, event_name, stall_name in rows
    ]


def list_my_certificates(db: Session, actor: ActorContext) -> List[CertificateWithDetails]:
    return _with_details(crud.certificate.list_for_user(db, user_id=actor.user_id))


def list_event_certificates(db: Session, actor: ActorContext, event_id: str) -> List[CertificateWithDetails]:
    ensure_roles(actor, REVIEWER_ROLES, "view event certificates")
    return _with_details(crud.certificate.list_for_event(db, event_id=event_id))


# ==========================================
# QUERIES
# ==========================================

def _projection(stall: Stall, event_name: str, leader: Profile) -> StallWithEvent:
    return StallWithEvent(
        **StallSchema.model_validate(stall).model_dump(),
        event_name=event_name,
        leader=ProfileSummary.model_validate(leader),
    )


def _is_participant(stall: Stall, user_id: str) -> bool:
    return stall.leader_id == user_id or user_id in (stall.members or [])


def list_stalls(
    db: Session, actor: ActorContext, *, event_id: Optional[str] = None, status: Optional[StallStatus] = None,
    search_text: Optional[str] = None, skip: int = 0, limit: Optional[int] = None
) -> List[StallWithEvent]:
    """Browse stalls. Only reviewers see pending and rejected ones."""
    if not can_review_stalls(actor):
        if status is not None and status != StallStatus.APPROVED:
            return []
        status = StallStatus.APPROVED

    rows = crud.stall.list_with_event(
        db, event_id=event_id, status=status, search_text=search_text, skip=skip, limit=limit
    )
    return [_projection(*row) for row in rows]


def list_my_stalls(db: Session, actor: ActorContext) -> List[StallWithEvent]:
    return [_projection(*row) for row in crud.stall.list_for_participant(db, user_id=actor.user_id)]


def get_stall_detail(db: Session, actor: ActorContext, stall_id: str) -> StallWithMembers:
    row = crud.stall.get_with_event(db, stall_id=stall_id)
    if row is None:
        raise StallNotFoundError(stall_id)

    stall, event_name, leader = row
    if stall.status != StallStatus.APPROVED and not (
        can_review_stalls(actor) or _is_participant(stall, actor.user_id)
    ):
        # Unapproved stalls stay invisible outside their team and the reviewers
        raise StallNotFoundError(stall_id)

    members = crud.profile.get_many(db, ids=list(stall.members or []))
    return StallWithMembers(
        **_projection(stall, event_name, leader).model_dump(),
        member_profiles=[ProfileSummary.model_validate(m) for m in members],
    )
