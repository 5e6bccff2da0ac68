import streamlit as st

from congregation import routes
from congregation.core.errors import InvalidAmountError, ServiceError
from congregation.schemas.contribution import ContributionType
from congregation.services.contribution_service import submit_contribution
from cached_reads import clear_cached_reads
from role_guard import guard_page
from supabase_client import get_client, load_settings

snapshot = guard_page(routes.CONTRIBUTE, "You need to be logged in to make a contribution.")
currency = load_settings().currency


def _contribute():
    # Runs as the submit callback so the amount field can be cleared on success
    try:
        record = submit_contribution(
            get_client(),
            snapshot.user.id,
            st.session_state.get("contribute_amount"),
            st.session_state.get("contribute_type", ContributionType.TITHE),
        )
    except InvalidAmountError as e:
        st.toast(f"Invalid amount: {e}", icon="❌")
        return
    except ServiceError as e:
        st.toast(f"Error making contribution: {e.message}", icon="❌")
        return

    st.session_state["contribute_amount"] = ""
    clear_cached_reads()
    st.toast(f"Success! Thank you for your {record.contribution_type.value} of {currency} {record.amount:,.2f}.", icon="✅")


st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
st.title("Make a Contribution")
st.caption("Your generosity supports our ministry.")

with st.form("contribute_form"):
    st.text_input(f"Amount ({currency})", key="contribute_amount", placeholder="e.g. 50.00")
    st.selectbox(
        "Type",
        list(ContributionType),
        key="contribute_type",
        format_func=lambda t: t.label,
    )
    st.form_submit_button("Contribute Now", type="primary", on_click=_contribute)
