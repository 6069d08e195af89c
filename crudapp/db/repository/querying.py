"""Translate filter descriptors into SQLAlchemy statements."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from typing import TypeVar

from sqlalchemy import ColumnElement
from sqlalchemy import Select
from sqlalchemy import or_

from crudapp.queries.filters import AnyFieldContains
from crudapp.queries.filters import AnyOf
from crudapp.queries.filters import Between
from crudapp.queries.filters import Contains
from crudapp.queries.filters import Exact
from crudapp.queries.filters import FilterDescriptor
from crudapp.queries.filters import Matcher
from crudapp.queries.filters import SortKey

SelectT = TypeVar("SelectT", bound=Select[Any])

LIKE_ESCAPE = "\\"


def _like_pattern(value: str) -> str:
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def ilike_contains(column: Any, value: str) -> ColumnElement[bool]:
    return column.ilike(_like_pattern(value), escape=LIKE_ESCAPE)


def _condition(model: type, name: str, matcher: Matcher, columns: Mapping[str, str]) -> ColumnElement[bool]:
    if isinstance(matcher, AnyFieldContains):
        return or_(
            *(ilike_contains(getattr(model, columns.get(field, field)), matcher.value) for field in matcher.fields)
        )

    column = getattr(model, columns.get(name, name))
    if isinstance(matcher, Exact):
        return column == matcher.value
    if isinstance(matcher, Contains):
        return ilike_contains(column, matcher.value)
    if isinstance(matcher, AnyOf):
        return column.in_(list(matcher.values))
    if isinstance(matcher, Between):
        return column.between(matcher.start, matcher.end)
    raise TypeError(f"Unsupported matcher {type(matcher).__name__}")


def apply_predicates(
    stmt: SelectT,
    model: type,
    descriptor: FilterDescriptor,
    *,
    columns: Mapping[str, str] | None = None,
) -> SelectT:
    """Add one WHERE clause per predicate; ``columns`` maps query names to attributes."""
    columns = columns or {}
    for name, matcher in descriptor.predicates.items():
        stmt = stmt.where(_condition(model, name, matcher, columns))
    return stmt


def apply_filter(
    stmt: SelectT,
    model: type,
    descriptor: FilterDescriptor,
    *,
    columns: Mapping[str, str] | None = None,
) -> SelectT:
    """Apply predicates, sort order and pagination."""
    stmt = apply_predicates(stmt, model, descriptor, columns=columns)

    sort_column = model.created_at if descriptor.sort_key is SortKey.CREATED_DESC else model.updated_at
    stmt = stmt.order_by(sort_column.desc(), model.id.desc())

    pagination = descriptor.pagination
    return stmt.offset(pagination.offset).limit(pagination.limit)
