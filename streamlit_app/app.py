import streamlit as st

from congregation.core.config import configure_logging
from auth import show_profile_section
from navigation import setup_navigation
from notices import show_flash
from supabase_client import get_session_context, load_settings

settings = load_settings()
st.set_page_config(page_title=settings.app_name, layout="wide")
configure_logging(settings.log_level)

# Restores the persisted session (if any) and starts listening for auth changes
context = get_session_context()
snapshot = context.wait_until_ready(timeout=settings.session_ready_timeout)

pg = setup_navigation(snapshot)
show_profile_section(snapshot)
show_flash()

pg.run()
