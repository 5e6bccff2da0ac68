import logging
import math
from typing import List, Union

import pandas as pd
from postgrest.exceptions import APIError
from supabase import Client

from congregation.core.errors import InvalidAmountError, service_error
from congregation.schemas.contribution import Contribution, ContributionType, NewContribution
from congregation.services import tables

logger = logging.getLogger(__name__)


def parse_amount(raw: Union[str, float, int, None]) -> float:
    """
    Turn form input into an amount. Anything that is not a finite number
    greater than zero raises InvalidAmountError; callers must check before
    touching the network.
    """
    if raw is None:
        raise InvalidAmountError("Please enter a valid positive amount.")
    if isinstance(raw, bool):
        raise InvalidAmountError("Please enter a valid positive amount.")

    try:
        amount = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise InvalidAmountError("Please enter a valid positive amount.")

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmountError("Please enter a valid positive amount.")
    return amount


def submit_contribution(
    client: Client,
    user_id: str,
    raw_amount: Union[str, float, int, None],
    contribution_type: Union[ContributionType, str] = ContributionType.TITHE,
) -> NewContribution:
    amount = parse_amount(raw_amount)
    record = NewContribution(
        user_id=user_id,
        amount=amount,
        contribution_type=ContributionType(contribution_type),
    )

    try:
        client.table(tables.CONTRIBUTIONS).insert(record.model_dump(mode="json")).execute()
    except APIError as e:
        logger.error(f"[CONTRIBUTE] Insert failed for {user_id}: {e}")
        raise service_error(e)

    logger.info(f"[CONTRIBUTE] {user_id} contributed {amount} ({record.contribution_type.value})")
    return record


def fetch_history(client: Client, user_id: str) -> List[Contribution]:
    """The member's own contributions, newest first."""
    try:
        response = (
            client.table(tables.CONTRIBUTIONS)
            .select(tables.HISTORY_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except APIError as e:
        raise service_error(e)

    return [Contribution(**row) for row in response.data or []]


def history_frame(contributions: List[Contribution]) -> pd.DataFrame:
    columns = ["Date", "Type", "Amount"]
    if not contributions:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([c.model_dump() for c in contributions])
    df["Date"] = pd.to_datetime(df["created_at"], utc=True).dt.date
    df["Type"] = df["contribution_type"].str.capitalize()
    df["Amount"] = df["amount"].astype(float)
    return df[columns]
