from congregation.schemas.auth import AuthUser, Role, SessionSnapshot
from congregation.schemas.contribution import (
    Contribution,
    ContributionFilters,
    ContributionSummary,
    ContributionType,
    NewContribution,
)
from congregation.schemas.profile import Profile

__all__ = [
    "AuthUser",
    "Contribution",
    "ContributionFilters",
    "ContributionSummary",
    "ContributionType",
    "NewContribution",
    "Profile",
    "Role",
    "SessionSnapshot",
]
