import streamlit as st

from congregation.core.config import Settings, get_settings
from congregation.core.session_context import SessionContext
from congregation.core.supabase_client import create_supabase_client
from congregation.schemas.auth import SessionSnapshot


@st.cache_resource(show_spinner=False)
def load_settings() -> Settings:
    return get_settings()


def get_client():
    # One client per browser session; the client holds that member's login
    if "supabase" not in st.session_state:
        st.session_state["supabase"] = create_supabase_client(load_settings())
    return st.session_state["supabase"]


def get_session_context() -> SessionContext:
    if "session_context" not in st.session_state:
        st.session_state["session_context"] = SessionContext(get_client()).start()
    return st.session_state["session_context"]


def current_snapshot(wait: bool = True) -> SessionSnapshot:
    context = get_session_context()
    if wait:
        return context.wait_until_ready(timeout=load_settings().session_ready_timeout)
    return context.snapshot
