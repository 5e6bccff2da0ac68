from pydantic import BaseModel
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

from congregation.schemas.profile import Profile


class Role(str, Enum):
    ADMIN = "admin"


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None

    class Config:
        frozen = True


class SessionSnapshot(BaseModel):
    """
    Immutable view of who is signed in and what they may do.
    A new snapshot is published for every auth event; readers never see
    a half-updated one.
    """
    generation: int = 0
    loading: bool = True
    session: Optional[Any] = None
    user: Optional[AuthUser] = None
    profile: Optional[Profile] = None
    roles: FrozenSet[Role] = frozenset()

    class Config:
        frozen = True
        arbitrary_types_allowed = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def access_token(self) -> Optional[str]:
        return getattr(self.session, "access_token", None)

    def has_any_role(self, required: Iterable[Role]) -> bool:
        return not self.roles.isdisjoint(required)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def display_name(self) -> Optional[str]:
        # Profile name when the member has one, otherwise their email
        if self.profile and self.profile.full_name:
            return self.profile.full_name
        return self.user.email if self.user else None
