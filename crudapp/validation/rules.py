"""Field rules: pure checks applied to a single payload field.

A field is evaluated in a fixed order and stops at the first failure:

    presence -> type -> trim -> length or range -> pattern -> membership -> convert

Evaluation never raises for malformed input; a rejected field produces a
``FieldError`` carrying the rule's human-readable message.
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Collection
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from datetime import date
from datetime import datetime
from decimal import Decimal
import math
import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ALPHANUMERIC_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
MIXED_CASE_DIGIT_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

MISSING: Any = object()


@dataclass(frozen=True)
class FieldError:
    """A single rejected field."""

    field: str
    message: str


@dataclass(frozen=True)
class Check:
    """Predicate over a (normalized) field value and the whole payload."""

    predicate: Callable[[Any, Mapping[str, Any]], bool]
    message: str


@dataclass(frozen=True)
class FieldOutcome:
    """Result of evaluating one field rule.

    Exactly one of ``value`` / ``error`` is meaningful; ``skipped`` marks an
    optional field that was not supplied.
    """

    value: Any = None
    error: FieldError | None = None
    skipped: bool = False


def is_blank(value: Any) -> bool:
    """Return True for values treated as empty by presence checks."""
    if value is None or value is MISSING:
        return True
    return isinstance(value, str) and value.strip() == ""


@dataclass(frozen=True)
class FieldRule:
    """Ordered rule list for one payload field."""

    field: str
    required: bool = True
    empty_message: str = ""
    type_check: Check | None = None
    trim: bool = False
    checks: tuple[Check, ...] = dataclass_field(default_factory=tuple)
    convert: Callable[[Any], Any] | None = None
    allow_blank: bool = False

    def evaluate(self, payload: Mapping[str, Any]) -> FieldOutcome:
        raw = payload.get(self.field, MISSING)
        if raw is MISSING and not self.required:
            return FieldOutcome(skipped=True)

        if not self.allow_blank and is_blank(raw):
            return self._reject(self.empty_message or f"{self.field} cannot be empty.")
        if raw is MISSING:
            return self._reject(self.empty_message or f"{self.field} is required.")

        if self.type_check is not None and not self.type_check.predicate(raw, payload):
            return self._reject(self.type_check.message)

        value = raw.strip() if self.trim and isinstance(raw, str) else raw

        for check in self.checks:
            if not check.predicate(value, payload):
                return self._reject(check.message)

        if self.convert is not None:
            value = self.convert(value)
        return FieldOutcome(value=value)

    def _reject(self, message: str) -> FieldOutcome:
        return FieldOutcome(error=FieldError(field=self.field, message=message))


def is_string(message: str) -> Check:
    return Check(lambda value, _: isinstance(value, str), message)


def is_boolean(message: str) -> Check:
    # bool only; "true" and 1 are rejected rather than coerced
    return Check(lambda value, _: isinstance(value, bool), message)


def min_length(limit: int, message: str) -> Check:
    return Check(lambda value, _: len(value) >= limit, message)


def max_length(limit: int, message: str) -> Check:
    return Check(lambda value, _: len(value) <= limit, message)


def matches(pattern: re.Pattern[str], message: str) -> Check:
    return Check(lambda value, _: pattern.search(value) is not None, message)


def one_of(choices: Collection[Any], message: str) -> Check:
    allowed = frozenset(choices)
    return Check(lambda value, _: value in allowed, message)


def is_number(message: str) -> Check:
    return Check(
        lambda value, _: (isinstance(value, int) and not isinstance(value, bool))
        or (isinstance(value, float) and math.isfinite(value)),
        message,
    )


def is_integer(message: str) -> Check:
    return Check(lambda value, _: isinstance(value, int) and not isinstance(value, bool), message)


def at_least(minimum: float, message: str) -> Check:
    return Check(lambda value, _: value >= minimum, message)


def at_most(maximum: float, message: str) -> Check:
    return Check(lambda value, _: value <= maximum, message)


def parse_datetime(value: Any) -> datetime | None:
    """Parse ISO-8601 text or pass through date values; None when unparseable."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def string_rule(
    field: str,
    *,
    required: bool = True,
    empty_message: str = "",
    type_message: str = "",
    trim: bool = False,
    min_len: int | None = None,
    min_message: str = "",
    max_len: int | None = None,
    max_message: str = "",
    pattern: re.Pattern[str] | None = None,
    pattern_message: str = "",
    choices: Collection[str] | None = None,
    choices_message: str = "",
    lower: bool = False,
    allow_blank: bool = False,
) -> FieldRule:
    """Build a string field rule with optional length, pattern and membership checks."""
    checks: list[Check] = []
    if min_len is not None:
        checks.append(min_length(min_len, min_message or f"{field} must have at least {min_len} characters."))
    if max_len is not None:
        checks.append(max_length(max_len, max_message or f"{field} must not exceed {max_len} characters."))
    if pattern is not None:
        checks.append(matches(pattern, pattern_message or f"{field} has an invalid format."))
    if choices is not None:
        checks.append(one_of(choices, choices_message or f"{field} has an unsupported value."))

    return FieldRule(
        field=field,
        required=required,
        empty_message=empty_message,
        type_check=is_string(type_message or empty_message or f"{field} must be a string."),
        trim=trim,
        checks=tuple(checks),
        convert=str.lower if lower else None,
        allow_blank=allow_blank,
    )


def boolean_rule(field: str, *, required: bool = False, message: str = "") -> FieldRule:
    message = message or f"{field} must be a boolean."
    return FieldRule(
        field=field,
        required=required,
        empty_message=message,
        type_check=is_boolean(message),
    )


def date_rule(field: str, *, required: bool = False, message: str = "") -> FieldRule:
    message = message or f"{field} must be a valid date."
    return FieldRule(
        field=field,
        required=required,
        empty_message=message,
        type_check=Check(lambda value, _: parse_datetime(value) is not None, message),
        convert=parse_datetime,
    )


def to_decimal(places: int) -> Callable[[Any], Decimal]:
    """Build a converter rounding a JSON number to ``places`` decimal places."""
    exponent = Decimal(1).scaleb(-places)
    return lambda value: Decimal(str(value)).quantize(exponent)


def number_rule(
    field: str,
    *,
    required: bool = True,
    message: str = "",
    integer: bool = False,
    minimum: float | None = None,
    maximum: float | None = None,
    range_message: str = "",
    places: int | None = None,
) -> FieldRule:
    """Build a numeric field rule; booleans and numeric strings are rejected."""
    message = message or f"{field} must be a number."
    checks: list[Check] = []
    if minimum is not None:
        checks.append(at_least(minimum, range_message or message))
    if maximum is not None:
        checks.append(at_most(maximum, range_message or message))

    return FieldRule(
        field=field,
        required=required,
        empty_message=message,
        type_check=is_integer(message) if integer else is_number(message),
        checks=tuple(checks),
        convert=to_decimal(places) if places is not None else None,
    )
