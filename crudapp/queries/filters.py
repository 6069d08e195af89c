"""Normalize list/search query parameters into a database-agnostic descriptor."""

from __future__ import annotations

from calendar import monthrange
from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Any
from typing import Union
from uuid import UUID

from crudapp.core.errors import BadRequestError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50

ReferenceResolver = Callable[[str, str], Iterable[Hashable]]


class SortKey(str, Enum):
    CREATED_DESC = "created_desc"
    UPDATED_DESC = "updated_desc"


SORT_TOKENS: dict[str, SortKey] = {
    "ctime": SortKey.CREATED_DESC,
    "mtime": SortKey.UPDATED_DESC,
}


@dataclass(frozen=True)
class Exact:
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match."""

    value: str


@dataclass(frozen=True)
class AnyFieldContains:
    """Case-insensitive substring match against any of several fields."""

    fields: tuple[str, ...]
    value: str


@dataclass(frozen=True)
class AnyOf:
    """Set membership; an empty set matches nothing."""

    values: frozenset[Hashable]


@dataclass(frozen=True)
class Between:
    """Inclusive range."""

    start: datetime
    end: datetime


Matcher = Union[Exact, Contains, AnyFieldContains, AnyOf, Between]


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class FilterDescriptor:
    predicates: dict[str, Matcher] = field(default_factory=dict)
    pagination: Pagination = field(default_factory=Pagination)
    sort_key: SortKey = SortKey.UPDATED_DESC


def parse_bool(raw: Any, *, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise BadRequestError(f"{name} must be true or false")


@dataclass(frozen=True)
class FilterProfile:
    """Declares which query parameters a resource accepts and how they match.

    ``period_flag`` narrows results to the current calendar month, but only
    when ``period_companion`` is also present in the query. ``default_sort``
    applies when no recognised ``sort`` token is given.
    """

    exact_fields: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    substring_fields: tuple[str, ...] = ()
    search_param: str | None = None
    search_fields: tuple[str, ...] = ()
    reference_fields: tuple[str, ...] = ()
    period_flag: str | None = None
    period_companion: str | None = None
    period_field: str = "created_at"
    default_sort: SortKey = SortKey.UPDATED_DESC


def _positive_int(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        number = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _present(raw: Any) -> bool:
    if raw is None:
        return False
    return not (isinstance(raw, str) and raw.strip() == "")


def _flag_set(raw: Any) -> bool:
    if not _present(raw):
        return False
    return str(raw).strip().lower() not in {"0", "false"}


def _as_uuid(raw: str) -> UUID | None:
    try:
        return UUID(raw)
    except ValueError:
        return None


def current_month_range(now: datetime | None = None) -> Between:
    """Return the calendar month containing ``now`` as UTC bounds.

    The month runs from day 1 00:00:00.000 through the last day 23:59:59.999
    in the timezone of ``now`` (server-local when omitted; a naive ``now`` is
    read as server-local). Bounds are returned in UTC, matching stored
    timestamps.
    """
    now = now or datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    last_day = monthrange(now.year, now.month)[1]
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999000)
    return Between(start=start.astimezone(timezone.utc), end=end.astimezone(timezone.utc))


def parse_pagination(raw_query: Mapping[str, Any]) -> Pagination:
    return Pagination(
        page=_positive_int(raw_query.get("page"), DEFAULT_PAGE),
        limit=_positive_int(raw_query.get("limit"), DEFAULT_LIMIT),
    )


def build_filter(
    raw_query: Mapping[str, Any],
    profile: FilterProfile = FilterProfile(),
    *,
    resolve_reference: ReferenceResolver | None = None,
    now: datetime | None = None,
) -> FilterDescriptor:
    """Turn raw query-string values into a ``FilterDescriptor``.

    Pagination falls back to page 1 / limit 50 for missing, non-numeric or
    non-positive values instead of rejecting the request. Parameters not
    declared by ``profile`` are ignored.
    """
    predicates: dict[str, Matcher] = {}

    for name, parse in profile.exact_fields.items():
        raw = raw_query.get(name)
        if _present(raw):
            predicates[name] = Exact(parse(raw))

    for name in profile.substring_fields:
        raw = raw_query.get(name)
        if _present(raw):
            predicates[name] = Contains(str(raw).strip())

    if profile.search_param is not None:
        raw = raw_query.get(profile.search_param)
        if _present(raw):
            predicates[profile.search_param] = AnyFieldContains(
                fields=profile.search_fields,
                value=str(raw).strip(),
            )

    for name in profile.reference_fields:
        raw = raw_query.get(name)
        if not _present(raw):
            continue
        text = str(raw).strip()
        identifier = _as_uuid(text)
        if identifier is not None:
            predicates[name] = Exact(identifier)
        elif resolve_reference is None:
            predicates[name] = AnyOf(frozenset())
        else:
            predicates[name] = AnyOf(frozenset(resolve_reference(name, text)))

    if (
        profile.period_flag is not None
        and profile.period_companion is not None
        and _flag_set(raw_query.get(profile.period_flag))
        and profile.period_companion in predicates
    ):
        predicates[profile.period_field] = current_month_range(now)

    sort_token = raw_query.get("sort")
    sort_key = profile.default_sort
    if sort_token:
        sort_key = SORT_TOKENS.get(str(sort_token).strip(), profile.default_sort)

    return FilterDescriptor(
        predicates=predicates,
        pagination=parse_pagination(raw_query),
        sort_key=sort_key,
    )
