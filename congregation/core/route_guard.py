"""
Decide whether a page may render for the current session snapshot.

A signed-out visitor and a signed-in member without the required role
get the same redirect for role-gated pages, so the guard does not reveal
which of the two applied.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from congregation.schemas.auth import Role, SessionSnapshot

HOME_PATH = "/"
AUTH_PATH = "/auth"


class GuardDecision(str, Enum):
    WAIT = "wait"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardOutcome:
    decision: GuardDecision
    target: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision is GuardDecision.ALLOW


WAIT = GuardOutcome(GuardDecision.WAIT)
ALLOW = GuardOutcome(GuardDecision.ALLOW)


def check_roles(required: Iterable[Role], snapshot: SessionSnapshot) -> GuardOutcome:
    if snapshot.loading:
        return WAIT
    if snapshot.has_any_role(required):
        return ALLOW
    return GuardOutcome(GuardDecision.REDIRECT, HOME_PATH)


def check_session(snapshot: SessionSnapshot) -> GuardOutcome:
    if snapshot.loading:
        return WAIT
    if snapshot.is_authenticated:
        return ALLOW
    return GuardOutcome(GuardDecision.REDIRECT, AUTH_PATH)


def check_route(route, snapshot: SessionSnapshot) -> GuardOutcome:
    """Apply a route's requirements: role check first, then session."""
    if route.roles:
        return check_roles(route.roles, snapshot)
    if route.requires_session:
        return check_session(snapshot)
    return ALLOW
