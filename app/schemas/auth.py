from pydantic import BaseModel
from typing import Optional
from app.models.profile import ProfileRole


class TokenData(BaseModel):
    sub: Optional[str] = None


class ActorContext(BaseModel):
    """Who is calling, resolved once per request and passed to services"""
    user_id: str
    role: ProfileRole
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    @property
    def is_reviewer(self) -> bool:
        return self.role in (ProfileRole.ADMIN, ProfileRole.JUNIOR_ADMIN)
