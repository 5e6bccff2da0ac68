from pydantic import BaseModel, Field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class ContributionType(str, Enum):
    TITHE = "tithe"
    OFFERING = "offering"
    SACRIFICE = "sacrifice"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Row as stored in the contributions table
class Contribution(BaseModel):
    id: str
    user_id: str
    amount: float
    contribution_type: str
    created_at: datetime


# Insert payload
class NewContribution(BaseModel):
    user_id: str
    amount: float = Field(gt=0)
    contribution_type: ContributionType = ContributionType.TITHE


class ContributionFilters(BaseModel):
    """Admin dashboard filters. Empty values mean "don't filter"."""
    on_date: Optional[date] = None
    contribution_type: Optional[str] = None
    member: Optional[str] = None


class ContributionSummary(BaseModel):
    count: int = 0
    total_amount: float = 0.0
    unique_members: int = 0
