"""
Navigation module for role-based page routing using st.navigation
"""
import streamlit as st

from congregation import routes
from congregation.schemas.auth import SessionSnapshot


def get_pages() -> list:
    """
    Every route gets a Page so its URL resolves; the guard on each page
    decides whether it renders.
    """
    pages = []
    for route in routes.ROUTES:
        if route is routes.HOME:
            pages.append(st.Page(route.page, title=route.title, icon=route.icon, default=True))
        else:
            pages.append(st.Page(route.page, title=route.title, icon=route.icon, url_path=route.url_path))
    not_found = routes.NOT_FOUND
    pages.append(st.Page(not_found.page, title=not_found.title, icon=not_found.icon, url_path=not_found.url_path))
    return pages


def render_sidebar_links(snapshot: SessionSnapshot) -> None:
    with st.sidebar:
        for route in routes.visible_routes(snapshot):
            st.page_link(route.page, label=route.title, icon=route.icon)


def setup_navigation(snapshot: SessionSnapshot):
    """
    Setup navigation and return the navigation object.
    The built-in menu is hidden; the sidebar only lists pages this member can open.
    """
    pg = st.navigation(get_pages(), position="hidden")
    render_sidebar_links(snapshot)
    return pg
