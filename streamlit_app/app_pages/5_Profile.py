import streamlit as st

from congregation import routes
from congregation.core.errors import ServiceError
from congregation.services.profile_service import update_profile
from role_guard import guard_page
from supabase_client import get_client, get_session_context

snapshot = guard_page(routes.PROFILE, "You need to be logged in to view your profile.")

# Prefill once per loaded snapshot so edits in progress are not overwritten on rerun
if st.session_state.get("profile_form_generation") != snapshot.generation:
    st.session_state["profile_first_name"] = (snapshot.profile.first_name if snapshot.profile else None) or ""
    st.session_state["profile_last_name"] = (snapshot.profile.last_name if snapshot.profile else None) or ""
    st.session_state["profile_form_generation"] = snapshot.generation


def _update():
    try:
        update_profile(
            get_client(),
            snapshot.user.id,
            st.session_state["profile_first_name"],
            st.session_state["profile_last_name"],
        )
    except ServiceError as e:
        st.toast(f"Error updating profile: {e.message}", icon="❌")
        return

    get_session_context().refresh()
    st.toast("Success! Your profile has been updated.", icon="✅")


st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
st.title("Your Profile")
st.caption(f"Signed in as {snapshot.user.email}")

with st.form("profile_form"):
    st.text_input("First Name", key="profile_first_name", placeholder="Your first name")
    st.text_input("Last Name", key="profile_last_name", placeholder="Your last name")
    st.form_submit_button("Update Profile", type="primary", on_click=_update)
