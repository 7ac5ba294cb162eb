"""
Communications service

Admin broadcasts to all users or to stall teams, delivered by email.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.email_service import email_service
from app.core.exceptions import ValidationError
from app.models.profile import Profile
from app.schemas.auth import ActorContext
from app.schemas.communication import BroadcastRequest, BroadcastResult, RecipientScope

logger = logging.getLogger(__name__)


def list_recipients(db: Session, scope: RecipientScope, event_id: Optional[str] = None) -> List[Profile]:
    """Everyone, or only leaders and members of registered stalls"""
    if scope == RecipientScope.STALL:
        return crud.profile.list_ordered(db, ids=crud.stall.participant_ids(db, event_id=event_id))
    return crud.profile.list_ordered(db)


def broadcast(db: Session, actor: ActorContext, request: BroadcastRequest) -> BroadcastResult:
    """Email each selected profile; one failed delivery does not stop the rest"""
    recipient_ids = list(dict.fromkeys(request.recipient_ids))
    recipients = crud.profile.get_many(db, ids=recipient_ids)
    if not recipients:
        raise ValidationError("None of the selected recipients exist", field="recipient_ids")

    sent = 0
    failed_emails: List[str] = []
    for recipient in recipients:
        ok = email_service.send_broadcast_email(
            to_email=recipient.email,
            user_name=recipient.full_name,
            subject=request.subject,
            message=request.message,
        )
        if ok:
            sent += 1
        else:
            failed_emails.append(recipient.email)

    logger.info(
        f"Broadcast '{request.subject}' by {actor.user_id}: "
        f"{sent} sent, {len(failed_emails)} failed, {len(recipient_ids) - len(recipients)} unknown ids"
    )
    return BroadcastResult(
        requested=len(recipient_ids),
        sent=sent,
        failed=len(failed_emails),
        failed_emails=failed_emails,
    )
