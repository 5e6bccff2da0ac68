import streamlit as st

from congregation import routes
from congregation.core.errors import AuthenticationError, MissingEmailError
from congregation.schemas.auth import SessionSnapshot
from congregation.services import auth_service
from notices import flash
from supabase_client import get_client, get_session_context, load_settings


def _sign_in_form():
    with st.form("sign_in_form"):
        email = st.text_input("Email", key="login_email", placeholder="you@example.com")
        password = st.text_input("Password", type="password", key="login_password", placeholder="••••••••")
        submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

    if submitted:
        if not email or not password:
            st.toast("Please enter both email and password", icon="❌")
            return
        try:
            with st.spinner("Signing In..."):
                auth_service.sign_in(get_client(), email, password)
        except AuthenticationError as e:
            st.toast(f"Error signing in: {e.message}", icon="❌")
            return

        flash("Signed in successfully!")
        st.switch_page(routes.HOME.page)

    if st.button("Forgot your password?", type="tertiary"):
        st.session_state["show_forgot_password"] = True
        st.rerun()


def _sign_up_form():
    with st.form("sign_up_form"):
        col1, col2 = st.columns(2)
        with col1:
            first_name = st.text_input("First Name", key="signup_first_name", placeholder="John")
        with col2:
            last_name = st.text_input("Last Name", key="signup_last_name", placeholder="Doe")
        email = st.text_input("Email", key="signup_email", placeholder="you@example.com")
        password = st.text_input("Password", type="password", key="signup_password", placeholder="••••••••")
        submitted = st.form_submit_button("Create Account", type="primary", use_container_width=True)

    if not submitted:
        return

    if not all([first_name.strip(), last_name.strip(), email, password]):
        st.toast("Please fill in every field", icon="❌")
        return

    try:
        with st.spinner("Creating Account..."):
            confirmation_pending = auth_service.sign_up(
                get_client(),
                email,
                password,
                first_name,
                last_name,
                redirect_to=load_settings().site_url,
            )
    except AuthenticationError as e:
        st.toast(f"Error signing up: {e.message}", icon="❌")
        return

    if confirmation_pending:
        st.success("Check your email for the confirmation link!")
    else:
        flash("Account created successfully!")
        st.switch_page(routes.HOME.page)


def _forgot_password_form():
    st.subheader("Reset your password")
    with st.form("forgot_password_form"):
        email = st.text_input("Email", key="reset_email", placeholder="you@example.com")
        submitted = st.form_submit_button("Send Reset Email", type="primary", use_container_width=True)

    if submitted:
        settings = load_settings()
        try:
            with st.spinner("Sending Reset Email..."):
                auth_service.send_password_reset(
                    get_client(),
                    email,
                    redirect_to=f"{settings.site_url}/{routes.AUTH.url_path}",
                )
        except MissingEmailError as e:
            st.toast(str(e), icon="❌")
        except AuthenticationError as e:
            st.toast(f"Error sending reset email: {e.message}", icon="❌")
        else:
            flash("Password reset email sent! Check your email for the reset link.")
            st.session_state["show_forgot_password"] = False
            st.rerun()

    if st.button("Back to Sign In"):
        st.session_state["show_forgot_password"] = False
        st.rerun()


def login_ui():
    st.title(load_settings().app_name)

    if st.session_state.get("show_forgot_password"):
        _forgot_password_form()
        return

    tab1, tab2 = st.tabs(["🔐 Sign In", "📝 Sign Up"])
    with tab1:
        st.caption("Sign in to your account")
        _sign_in_form()
    with tab2:
        st.caption("Create your account")
        _sign_up_form()


def sign_out_button(key: str = "sign_out_btn"):
    if st.button("Sign Out", key=key):
        try:
            get_session_context().sign_out()
        except AuthenticationError as e:
            st.toast(f"Error signing out: {e.message}", icon="❌")
            return
        flash("Signed out")
        st.switch_page(routes.HOME.page)


def show_profile_section(snapshot: SessionSnapshot):
    """Sidebar block: who is signed in, plus sign out."""
    if not snapshot.is_authenticated:
        return
    with st.sidebar:
        st.markdown(f"**{snapshot.display_name}**")
        if snapshot.is_admin:
            st.caption("Administrator")
        sign_out_button(key="sidebar_sign_out")
        st.divider()
