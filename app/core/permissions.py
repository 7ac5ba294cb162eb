from typing import Iterable
from app.core.exceptions import ForbiddenError
from app.models.profile import ProfileRole
from app.schemas.auth import ActorContext

REVIEWER_ROLES = (ProfileRole.ADMIN, ProfileRole.JUNIOR_ADMIN)
ADMIN_ROLES = (ProfileRole.ADMIN,)


def has_any_role(actor: ActorContext, required_roles: Iterable[ProfileRole]) -> bool:
    """Check if the actor holds any of the required roles"""
    return actor.role in tuple(required_roles)


def can_review_stalls(actor: ActorContext) -> bool:
    """Admins and junior admins approve, reject, number and certify stalls"""
    return has_any_role(actor, REVIEWER_ROLES)


def can_manage_site(actor: ActorContext) -> bool:
    """Events, forms, gallery, contact inbox and broadcasts are admin only"""
    return has_any_role(actor, ADMIN_ROLES)


def ensure_roles(actor: ActorContext, required_roles: Iterable[ProfileRole], action: str = "perform this action") -> None:
    if not has_any_role(actor, required_roles):
        raise ForbiddenError(f"You do not have permission to {action}")
