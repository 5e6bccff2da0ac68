from datetime import date

import pytest

from congregation.core.errors import ServiceError
from congregation.schemas.contribution import ContributionFilters
from congregation.schemas.profile import Profile
from congregation.services.admin_service import (
    UNKNOWN_MEMBER,
    contributions_frame,
    fetch_all_contributions,
    filter_contributions,
    member_name,
    summarize,
    totals_by_type,
)


@pytest.fixture
def frame(congregation_data):
    return contributions_frame(fetch_all_contributions(congregation_data))


def test_member_name():
    assert member_name(Profile(first_name="John", last_name="Doe")) == "John Doe"
    assert member_name(Profile(first_name="  Mary ", last_name=None)) == "Mary"
    assert member_name(Profile(first_name="", last_name="")) == UNKNOWN_MEMBER
    assert member_name(None) == UNKNOWN_MEMBER


def test_fetch_all_joins_member_names_newest_first(congregation_data):
    rows = fetch_all_contributions(congregation_data)

    assert [r["id"] for r in rows] == ["c4", "c2", "c3", "c1"]
    names = {r["id"]: r["member_name"] for r in rows}
    assert names == {
        "c1": "John Doe",
        "c2": "John Doe",
        "c3": "Grace Wanjiru",
        "c4": UNKNOWN_MEMBER,
    }


def test_profiles_are_read_once_for_distinct_members(congregation_data):
    fetch_all_contributions(congregation_data)

    profile_queries = [q for q in congregation_data.executed if q.table == "profiles"]
    assert len(profile_queries) == 1
    (_, column, ids), = profile_queries[0].filters
    assert column == "id"
    assert sorted(ids) == ["u-admin", "u-blank", "u-member"]


def test_profile_failure_falls_back_to_unknown_member(congregation_data):
    congregation_data.fail("profiles", "select")

    rows = fetch_all_contributions(congregation_data)

    assert len(rows) == 4
    assert {r["member_name"] for r in rows} == {UNKNOWN_MEMBER}


def test_contributions_failure_raises(congregation_data):
    congregation_data.fail("contributions", "select", "permission denied for table contributions")

    with pytest.raises(ServiceError) as exc:
        fetch_all_contributions(congregation_data)
    assert "permission denied" in exc.value.message


def test_no_contributions_skips_profile_read(client):
    assert fetch_all_contributions(client) == []
    assert [q.table for q in client.executed] == ["contributions"]


def test_type_filter_scenario():
    rows = [
        {"id": "a", "user_id": "u1", "amount": 100, "contribution_type": "tithe",
         "created_at": "2024-01-01T10:00:00+00:00", "member_name": "Ann"},
        {"id": "b", "user_id": "u2", "amount": 50, "contribution_type": "offering",
         "created_at": "2024-01-02T10:00:00+00:00", "member_name": "Ben"},
    ]
    df = filter_contributions(contributions_frame(rows), ContributionFilters(contribution_type="tithe"))

    summary = summarize(df)
    assert summary.total_amount == 100
    assert summary.count == 1
    assert summary.unique_members == 1


def test_no_filters_keeps_everything(frame):
    df = filter_contributions(frame, ContributionFilters())
    summary = summarize(df)

    assert summary.count == 4
    assert summary.total_amount == pytest.approx(420.5)
    assert summary.unique_members == 3


def test_date_filter_uses_utc_calendar_date(frame):
    df = filter_contributions(frame, ContributionFilters(on_date=date(2024, 1, 2)))

    assert sorted(df["id"]) == ["c2", "c3"]
    assert summarize(df).unique_members == 2


def test_member_filter_is_case_insensitive_substring(frame):
    df = filter_contributions(frame, ContributionFilters(member="dOE"))
    assert sorted(df["id"]) == ["c1", "c2"]

    df = filter_contributions(frame, ContributionFilters(member="unknown"))
    assert df["id"].tolist() == ["c4"]


def test_member_filter_treats_regex_characters_literally(frame):
    df = filter_contributions(frame, ContributionFilters(member="J.*"))
    assert df.empty


def test_filters_combine_with_and(frame):
    filters = ContributionFilters(on_date=date(2024, 1, 2), contribution_type="offering", member="john")
    df = filter_contributions(frame, filters)

    assert df["id"].tolist() == ["c2"]
    assert summarize(df).total_amount == 50


def test_filtering_is_repeatable_and_leaves_input_alone(frame):
    filters = ContributionFilters(contribution_type="tithe")
    before = frame.copy()

    first = filter_contributions(frame, filters)
    second = filter_contributions(frame, filters)

    assert first["id"].tolist() == second["id"].tolist()
    assert frame.equals(before)


def test_summary_of_nothing(frame):
    df = filter_contributions(frame, ContributionFilters(member="nobody by that name"))
    summary = summarize(df)

    assert (summary.count, summary.total_amount, summary.unique_members) == (0, 0.0, 0)


def test_empty_frame_pipeline():
    df = contributions_frame([])
    assert filter_contributions(df, ContributionFilters(member="x", contribution_type="tithe")).empty
    assert summarize(df).count == 0
    assert totals_by_type(df).empty


def test_totals_by_type(frame):
    totals = totals_by_type(frame)

    assert totals["contribution_type"].tolist() == ["sacrifice", "tithe", "offering"]
    assert totals["amount"].tolist() == pytest.approx([250.5, 120.0, 50.0])
