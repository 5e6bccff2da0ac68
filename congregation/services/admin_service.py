"""
Admin dashboard data: every contribution joined to its member's name,
then filtered and summed in memory.

The join happens here rather than in the database because contributions
and profiles are read separately under the service's access rules.
"""
import logging
from typing import Dict, List, Optional

import pandas as pd
from postgrest.exceptions import APIError
from supabase import Client

from congregation.core.errors import service_error
from congregation.schemas.contribution import ContributionFilters, ContributionSummary
from congregation.schemas.profile import Profile
from congregation.services import tables

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown Member"

FRAME_COLUMNS = [
    "id",
    "user_id",
    "member_name",
    "contribution_type",
    "amount",
    "created_at",
    "contribution_date",
]


def member_name(profile: Optional[Profile]) -> str:
    if profile is None:
        return UNKNOWN_MEMBER
    return profile.full_name or UNKNOWN_MEMBER


def fetch_all_contributions(client: Client) -> List[Dict]:
    """
    All contributions, newest first, each with a ``member_name``.
    A failed profiles read is logged and every row falls back to
    "Unknown Member"; a failed contributions read raises ServiceError.
    """
    try:
        response = (
            client.table(tables.CONTRIBUTIONS)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
    except APIError as e:
        raise service_error(e)

    contributions = response.data or []
    if not contributions:
        return []

    # dict.fromkeys keeps first-seen order while dropping duplicates
    user_ids = list(dict.fromkeys(c["user_id"] for c in contributions))

    profiles: Dict[str, Profile] = {}
    try:
        profile_response = (
            client.table(tables.PROFILES)
            .select(tables.PROFILE_COLUMNS)
            .in_("id", user_ids)
            .execute()
        )
        for row in profile_response.data or []:
            profiles[row["id"]] = Profile(**row)
    except APIError as e:
        logger.error(f"[ADMIN] Error fetching profiles for {len(user_ids)} members: {e}")

    return [
        {**contribution, "member_name": member_name(profiles.get(contribution["user_id"]))}
        for contribution in contributions
    ]


def contributions_frame(rows: List[Dict]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    df = pd.DataFrame(rows)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True, format="ISO8601")
    # Date filter compares against the UTC calendar date
    df["contribution_date"] = df["created_at"].dt.date
    if "member_name" not in df.columns:
        df["member_name"] = UNKNOWN_MEMBER
    df["member_name"] = df["member_name"].fillna(UNKNOWN_MEMBER)
    return df[FRAME_COLUMNS]


def filter_contributions(df: pd.DataFrame, filters: ContributionFilters) -> pd.DataFrame:
    """
    Keep rows matching every non-empty filter: exact date, exact type and
    a case-insensitive substring of the member name. Does not modify ``df``.
    """
    mask = pd.Series(True, index=df.index)

    if filters.on_date:
        mask &= df["contribution_date"] == filters.on_date

    if filters.contribution_type:
        mask &= df["contribution_type"] == filters.contribution_type

    if filters.member:
        needle = filters.member.lower()
        mask &= df["member_name"].str.lower().str.contains(needle, regex=False)

    return df[mask].copy()


def summarize(df: pd.DataFrame) -> ContributionSummary:
    if df.empty:
        return ContributionSummary()
    return ContributionSummary(
        count=len(df),
        total_amount=float(df["amount"].sum()),
        unique_members=int(df["user_id"].nunique()),
    )


def totals_by_type(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["contribution_type", "amount"])
    return (
        df.groupby("contribution_type", as_index=False)["amount"]
        .sum()
        .sort_values("amount", ascending=False)
        .reset_index(drop=True)
    )
