"""
Toasts that survive a page switch. st.switch_page stops the script, so a
toast raised just before it would never reach the browser; queue it here
and app.py shows it on the next run.
"""
import streamlit as st


def flash(message: str, icon: str = "✅") -> None:
    st.session_state.setdefault("flash", []).append((message, icon))


def show_flash() -> None:
    for message, icon in st.session_state.pop("flash", []):
        st.toast(message, icon=icon)
