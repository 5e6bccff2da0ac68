import logging
from typing import Optional

from postgrest.exceptions import APIError
from supabase import Client

from congregation.core.errors import service_error
from congregation.schemas.profile import Profile, ProfileUpdate
from congregation.services import tables

logger = logging.getLogger(__name__)


def fetch_profile(client: Client, user_id: str) -> Optional[Profile]:
    try:
        response = (
            client.table(tables.PROFILES)
            .select(tables.PROFILE_COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except APIError as e:
        raise service_error(e)

    rows = response.data or []
    return Profile(**rows[0]) if rows else None


def update_profile(client: Client, user_id: str, first_name: str, last_name: str) -> Profile:
    payload = ProfileUpdate(first_name=first_name.strip(), last_name=last_name.strip())
    try:
        client.table(tables.PROFILES).update(payload.model_dump()).eq("id", user_id).execute()
    except APIError as e:
        logger.error(f"[PROFILE] Update failed for {user_id}: {e}")
        raise service_error(e)

    logger.info(f"[PROFILE] Updated profile for {user_id}")
    return Profile(id=user_id, **payload.model_dump())
