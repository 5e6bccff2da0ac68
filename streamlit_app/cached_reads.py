"""
Cached remote reads for the dashboards.

Each cache entry is keyed on the caller's access token, so rows read under
one member's access rules are never served to another session. The client
is passed as ``_client`` so Streamlit does not try to hash it.
"""
import streamlit as st

from congregation.services.admin_service import fetch_all_contributions


@st.cache_data(ttl=300, show_spinner="Loading contributions...")
def load_contributions(_client, access_token: str):
    return fetch_all_contributions(_client)


def clear_cached_reads() -> None:
    st.cache_data.clear()
