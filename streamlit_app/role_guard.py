import time

import streamlit as st

from congregation import routes
from congregation.core.route_guard import AUTH_PATH, GuardDecision, check_route
from congregation.routes import Route
from congregation.schemas.auth import SessionSnapshot
from notices import flash
from supabase_client import current_snapshot

LOADING_POLL_SECONDS = 0.5


def poll_while_loading(snapshot: SessionSnapshot) -> None:
    """Rerun the page shortly while the session is still being derived."""
    if snapshot.loading:
        st.info("Loading...")
        time.sleep(LOADING_POLL_SECONDS)
        st.rerun()


def guard_page(route: Route, login_message: str = "You need to be logged in to view this page.") -> SessionSnapshot:
    """
    Call this at the top of every protected page.
    Stops the script unless the current member may see ``route``.
    """
    snapshot = current_snapshot()
    outcome = check_route(route, snapshot)

    if outcome.decision is GuardDecision.WAIT:
        poll_while_loading(snapshot)

    if outcome.decision is GuardDecision.REDIRECT:
        if outcome.target == AUTH_PATH:
            flash(f"Authentication Required: {login_message}", icon="🔒")
        st.switch_page(routes.find_route(outcome.target).page)

    return snapshot
