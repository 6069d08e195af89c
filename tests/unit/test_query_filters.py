"""Unit tests for the list/search query filter builder."""

from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone
from functools import partial
from uuid import uuid4

import pytest

from crudapp.core.errors import BadRequestError
from crudapp.queries.filters import AnyFieldContains
from crudapp.queries.filters import AnyOf
from crudapp.queries.filters import Between
from crudapp.queries.filters import Contains
from crudapp.queries.filters import Exact
from crudapp.queries.filters import FilterDescriptor
from crudapp.queries.filters import FilterProfile
from crudapp.queries.filters import Pagination
from crudapp.queries.filters import SortKey
from crudapp.queries.filters import build_filter
from crudapp.queries.filters import current_month_range
from crudapp.queries.filters import parse_bool
from crudapp.services.posts import POST_FILTER_PROFILE
from crudapp.services.todos import TODO_FILTER_PROFILE


def _no_matches(field: str, text: str) -> list:
    return []


def test_empty_query_yields_defaults() -> None:
    descriptor = build_filter({})

    assert descriptor == FilterDescriptor(
        predicates={},
        pagination=Pagination(page=1, limit=50),
        sort_key=SortKey.UPDATED_DESC,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"page": "-5", "limit": "0"}, Pagination(page=1, limit=50)),
        ({"page": "abc", "limit": "ten"}, Pagination(page=1, limit=50)),
        ({"page": "", "limit": " "}, Pagination(page=1, limit=50)),
        ({"page": "3", "limit": "20"}, Pagination(page=3, limit=20)),
        ({"page": 2, "limit": 5}, Pagination(page=2, limit=5)),
    ],
)
def test_pagination_defaults_instead_of_rejecting(raw, expected) -> None:
    assert build_filter(raw).pagination == expected


def test_pagination_offset() -> None:
    assert Pagination(page=3, limit=20).offset == 40


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("ctime", SortKey.CREATED_DESC),
        ("mtime", SortKey.UPDATED_DESC),
        ("title", SortKey.UPDATED_DESC),
        ("", SortKey.UPDATED_DESC),
    ],
)
def test_sort_tokens(token, expected) -> None:
    assert build_filter({"sort": token}).sort_key is expected


def test_undeclared_parameters_are_ignored() -> None:
    descriptor = build_filter({"title": "x", "$where": "1"})

    assert descriptor.predicates == {}


def test_todo_scenario_builds_exact_status_and_search_matchers() -> None:
    descriptor = build_filter({"status": "completed", "search": "groceries"}, TODO_FILTER_PROFILE)

    assert descriptor.predicates == {
        "status": Exact("completed"),
        "search": AnyFieldContains(fields=("title", "description"), value="groceries"),
    }


def test_title_becomes_case_insensitive_substring() -> None:
    descriptor = build_filter({"title": "  Hello "}, POST_FILTER_PROFILE)

    assert descriptor.predicates == {"title": Contains("Hello")}


def test_boolean_exact_fields_are_parsed() -> None:
    assert build_filter({"status": "true"}, POST_FILTER_PROFILE).predicates == {"status": Exact(True)}
    assert build_filter({"status": "FALSE"}, POST_FILTER_PROFILE).predicates == {"status": Exact(False)}


def test_invalid_boolean_filter_is_a_bad_request() -> None:
    with pytest.raises(BadRequestError) as exc_info:
        build_filter({"status": "maybe"}, POST_FILTER_PROFILE)

    assert exc_info.value.message == "status must be true or false"


def test_parse_bool_passes_booleans_through() -> None:
    assert parse_bool(True, name="status") is True


def test_reference_given_as_id_becomes_exact_match() -> None:
    author_id = uuid4()

    descriptor = build_filter({"author": str(author_id)}, POST_FILTER_PROFILE, resolve_reference=_no_matches)

    assert descriptor.predicates == {"author": Exact(author_id)}


def test_reference_given_as_name_is_resolved_to_set_membership() -> None:
    ids = [uuid4(), uuid4()]
    calls: list[tuple[str, str]] = []

    def resolve(field: str, text: str) -> list:
        calls.append((field, text))
        return ids

    descriptor = build_filter({"author": "john"}, POST_FILTER_PROFILE, resolve_reference=resolve)

    assert calls == [("author", "john")]
    assert descriptor.predicates == {"author": AnyOf(frozenset(ids))}


def test_unresolved_reference_matches_nothing() -> None:
    descriptor = build_filter({"author": "john"}, POST_FILTER_PROFILE, resolve_reference=_no_matches)

    assert descriptor.predicates == {"author": AnyOf(frozenset())}


def test_current_month_flag_requires_companion_filter() -> None:
    now = datetime(2026, 2, 14, 15, 30, tzinfo=timezone.utc)

    without_author = build_filter({"isCurrentMonth": "true"}, POST_FILTER_PROFILE, now=now)
    with_author = build_filter(
        {"isCurrentMonth": "true", "author": "john"},
        POST_FILTER_PROFILE,
        resolve_reference=_no_matches,
        now=now,
    )

    assert "created_at" not in without_author.predicates
    assert with_author.predicates["created_at"] == Between(
        start=datetime(2026, 2, 1, 0, 0, 0, tzinfo=timezone.utc),
        end=datetime(2026, 2, 28, 23, 59, 59, 999000, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("flag", ["", "0", "false", "False"])
def test_current_month_flag_off_values(flag: str) -> None:
    descriptor = build_filter(
        {"isCurrentMonth": flag, "author": "john"},
        POST_FILTER_PROFILE,
        resolve_reference=_no_matches,
        now=datetime(2026, 2, 14, tzinfo=timezone.utc),
    )

    assert "created_at" not in descriptor.predicates


def test_current_month_range_handles_leap_years_and_december() -> None:
    leap = current_month_range(datetime(2024, 2, 10, tzinfo=timezone.utc))
    december = current_month_range(datetime(2026, 12, 31, 23, 0, tzinfo=timezone.utc))

    assert leap.end == datetime(2024, 2, 29, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert december.start == datetime(2026, 12, 1, tzinfo=timezone.utc)


def test_current_month_range_is_expressed_in_utc() -> None:
    hanoi = timezone(timedelta(hours=7))

    window = current_month_range(datetime(2026, 3, 1, 3, 0, tzinfo=hanoi))

    assert window.start == datetime(2026, 2, 28, 17, 0, tzinfo=timezone.utc)
    assert window.end == datetime(2026, 3, 31, 16, 59, 59, 999000, tzinfo=timezone.utc)
    assert window.start.utcoffset() == timedelta(0)


def test_current_month_range_reads_naive_now_as_server_local() -> None:
    window = current_month_range(datetime(2026, 7, 15, 12, 0))
    local_start = datetime(2026, 7, 1).astimezone()

    assert window.start == local_start
    assert window.start.tzinfo == timezone.utc


def test_custom_profile_exact_parser_is_applied() -> None:
    profile = FilterProfile(exact_fields={"archived": partial(parse_bool, name="archived")})

    assert build_filter({"archived": "true"}, profile).predicates == {"archived": Exact(True)}
