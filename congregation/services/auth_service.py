import logging
from typing import FrozenSet, Optional

from postgrest.exceptions import APIError
from supabase import Client
from supabase_auth.errors import AuthError

from congregation.core.errors import (
    AuthenticationError,
    MissingEmailError,
    service_error,
)
from congregation.schemas.auth import Role
from congregation.services import tables

logger = logging.getLogger(__name__)


def sign_in(client: Client, email: str, password: str):
    """Sign in with email and password. The session-change listener picks up the new session."""
    try:
        res = client.auth.sign_in_with_password({
            "email": email,
            "password": password,
        })
    except AuthError as e:
        logger.info(f"[AUTH] Sign in rejected for {email}: {e}")
        raise service_error(e, AuthenticationError)

    logger.info(f"[AUTH] Signed in {email}")
    return res.session


def sign_up(
    client: Client,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    redirect_to: Optional[str] = None,
) -> bool:
    """
    Create an account. First and last name travel as user metadata; the
    profile row is created from them on the service side.

    Returns True when the service wants the email confirmed before sign in.
    """
    options = {
        "data": {
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
        }
    }
    if redirect_to:
        options["email_redirect_to"] = redirect_to

    try:
        res = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": options,
        })
    except AuthError as e:
        logger.info(f"[AUTH] Sign up rejected for {email}: {e}")
        raise service_error(e, AuthenticationError)

    if not res.user:
        raise AuthenticationError("Sign up failed: no user created")

    logger.info(f"[AUTH] Signed up {email} (confirmation pending: {res.session is None})")
    return res.session is None


def send_password_reset(client: Client, email: str, redirect_to: Optional[str] = None) -> None:
    if not email or not email.strip():
        raise MissingEmailError("Please enter your email address")

    options = {"redirect_to": redirect_to} if redirect_to else {}
    try:
        client.auth.reset_password_for_email(email.strip(), options)
    except AuthError as e:
        raise service_error(e, AuthenticationError)

    logger.info(f"[AUTH] Password reset email requested for {email}")


def fetch_roles(client: Client, user_id: str) -> FrozenSet[Role]:
    try:
        response = (
            client.table(tables.USER_ROLES)
            .select("role")
            .eq("user_id", user_id)
            .execute()
        )
    except APIError as e:
        raise service_error(e)

    roles = set()
    for row in response.data or []:
        value = row.get("role")
        try:
            roles.add(Role(value))
        except ValueError:
            logger.warning(f"[ROLES] Ignoring unknown role {value!r} for user {user_id}")
    return frozenset(roles)
