from typing import Callable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.exceptions import AuthenticationError
from app.core.permissions import ensure_roles
from app.core.security import decode_token
from app.crud import profile as profile_crud
from app.models.profile import ProfileRole
from app.schemas.auth import ActorContext, TokenData

# auto_error=False so a missing header comes back as our own 401 payload
security = HTTPBearer(auto_error=False)


def _resolve_actor(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> ActorContext:
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError()

    token_data = TokenData(sub=payload.get("sub"))
    if token_data.sub is None:
        raise AuthenticationError()

    # Role always comes from the profile row, never from token claims
    profile = profile_crud.get(db, token_data.sub)
    if profile is None:
        raise AuthenticationError("Profile not found for this account")

    return ActorContext(user_id=profile.id, role=profile.role, email=profile.email)


def get_current_actor(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> ActorContext:
    return _resolve_actor(db, credentials)


def get_optional_actor(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[ActorContext]:
    """Actor for endpoints that also accept anonymous callers"""
    if credentials is None:
        return None
    return _resolve_actor(db, credentials)


def require_roles(*roles: ProfileRole) -> Callable[..., ActorContext]:
    """Dependency factory: the current actor, if they hold one of ``roles``"""

    def dependency(actor: ActorContext = Depends(get_current_actor)) -> ActorContext:
        ensure_roles(actor, roles)
        return actor

    return dependency


get_current_reviewer = require_roles(ProfileRole.ADMIN, ProfileRole.JUNIOR_ADMIN)
get_current_admin = require_roles(ProfileRole.ADMIN)
