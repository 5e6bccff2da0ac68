import plotly.express as px
import streamlit as st

from congregation import routes
from congregation.core.errors import ServiceError
from congregation.schemas.contribution import ContributionFilters, ContributionType
from congregation.services.admin_service import (
    contributions_frame,
    filter_contributions,
    summarize,
    totals_by_type,
)
from cached_reads import load_contributions
from role_guard import guard_page
from supabase_client import get_client, load_settings

snapshot = guard_page(routes.ADMIN)
currency = load_settings().currency

ALL_TYPES = "All types"

# ---------------------------
# HEADER
# ---------------------------
st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
st.title("Admin Dashboard")
st.caption(f"Welcome, {snapshot.display_name}. Manage members and contributions.")

# ---------------------------
# FILTERS
# ---------------------------
col1, col2, col3 = st.columns(3)

with col1:
    date_filter = st.date_input("📅 Filter by Date", value=None)

with col2:
    type_filter = st.selectbox(
        "🔍 Filter by Type",
        [ALL_TYPES] + [t.value for t in ContributionType],
        format_func=lambda v: v if v == ALL_TYPES else ContributionType(v).label,
    )

with col3:
    member_filter = st.text_input("👤 Filter by Member", placeholder="Search member name...")

filters = ContributionFilters(
    on_date=date_filter,
    contribution_type=None if type_filter == ALL_TYPES else type_filter,
    member=member_filter.strip() or None,
)

# ---------------------------
# DATA
# ---------------------------
if st.button("🔄 Refresh", key="admin_refresh"):
    load_contributions.clear()

try:
    rows = load_contributions(get_client(), snapshot.access_token)
except ServiceError as e:
    st.error(f"Error loading contributions: {e.message}")
    st.stop()

df = filter_contributions(contributions_frame(rows), filters)
summary = summarize(df)

# ---------------------------
# SUMMARY
# ---------------------------
m1, m2, m3 = st.columns(3)
m1.metric("Total Contributions", summary.count)
m2.metric("Total Amount", f"{currency} {summary.total_amount:,.2f}")
m3.metric("Unique Members", summary.unique_members)

st.divider()

if df.empty:
    st.info("No contributions found matching the current filters.")
    st.stop()

# ---------------------------
# TABLE + CHART
# ---------------------------
table = df.rename(columns={
    "member_name": "Member",
    "contribution_type": "Type",
    "contribution_date": "Date",
    "amount": "Amount",
})[["Member", "Type", "Date", "Amount"]]
table["Type"] = table["Type"].str.capitalize()

st.dataframe(
    table,
    hide_index=True,
    use_container_width=True,
    column_config={
        "Amount": st.column_config.NumberColumn(f"Amount ({currency})", format="%.2f"),
    },
)

by_type = totals_by_type(df)
fig = px.bar(
    by_type,
    x="contribution_type",
    y="amount",
    labels={"contribution_type": "Type", "amount": f"Amount ({currency})"},
    title="Amount by Type",
)
st.plotly_chart(fig, use_container_width=True)
