import streamlit as st

from congregation import routes
from auth import login_ui
from supabase_client import current_snapshot

snapshot = current_snapshot()

if snapshot.is_authenticated:
    st.info(f"You are already signed in as {snapshot.display_name}.")
    st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
    st.stop()

login_ui()
