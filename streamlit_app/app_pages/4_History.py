import streamlit as st

from congregation import routes
from congregation.core.errors import ServiceError
from congregation.services.contribution_service import fetch_history, history_frame
from role_guard import guard_page
from supabase_client import get_client, load_settings

snapshot = guard_page(routes.HISTORY, "You need to be logged in to view your contribution history.")
currency = load_settings().currency

st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
st.title("Contribution History")
st.caption("A record of your generous support.")

try:
    with st.spinner("Loading contributions..."):
        contributions = fetch_history(get_client(), snapshot.user.id)
except ServiceError as e:
    st.error(f"Error loading history: {e.message}")
    st.stop()

if not contributions:
    st.info("You have not made any contributions yet.")
    st.page_link(routes.CONTRIBUTE.page, label="Make your first contribution", icon=routes.CONTRIBUTE.icon)
    st.stop()

st.dataframe(
    history_frame(contributions),
    hide_index=True,
    use_container_width=True,
    column_config={
        "Amount": st.column_config.NumberColumn(f"Amount ({currency})", format="%.2f"),
    },
)
