import streamlit as st

from congregation import routes
from auth import sign_out_button
from role_guard import poll_while_loading
from supabase_client import current_snapshot, load_settings

snapshot = current_snapshot()

st.title(f"Welcome to {load_settings().app_name}")

poll_while_loading(snapshot)

if snapshot.is_authenticated:
    st.write(f"You are logged in as **{snapshot.display_name}**")

    links = [routes.CONTRIBUTE, routes.HISTORY, routes.PROFILE]
    if snapshot.is_admin:
        links.insert(0, routes.ADMIN)

    cols = st.columns(len(links) + 1)
    for col, route in zip(cols, links):
        with col:
            st.page_link(route.page, label=route.title, icon=route.icon)
    with cols[-1]:
        sign_out_button(key="home_sign_out")
else:
    st.write("Giving made simple. Please sign in to continue.")
    st.page_link(routes.AUTH.page, label="Login / Sign Up", icon=routes.AUTH.icon)
