"""Validation aggregator running ordered field rules over a payload."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from crudapp.core.errors import BadRequestError
from crudapp.schemas.envelope import ErrorDetail
from crudapp.validation.rules import FieldError
from crudapp.validation.rules import FieldRule


class ValidationMode(str, Enum):
    ABORT_EARLY = "abort_early"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True)
class ValidationResult:
    """Field errors in rule order plus the allow-listed, sanitized value."""

    errors: tuple[FieldError, ...]
    value: dict[str, Any]

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(
    payload: Any,
    rules: Sequence[FieldRule],
    mode: ValidationMode = ValidationMode.COLLECT_ALL,
) -> ValidationResult:
    """Evaluate ``rules`` in declaration order.

    Only fields named by a rule and passing it are copied into ``value``;
    any other payload key is dropped. In ``ABORT_EARLY`` mode evaluation stops
    at the first rejected field, leaving ``value`` partial.
    """
    source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    errors: list[FieldError] = []
    value: dict[str, Any] = {}

    for rule in rules:
        outcome = rule.evaluate(source)
        if outcome.skipped:
            continue
        if outcome.error is not None:
            errors.append(outcome.error)
            if mode is ValidationMode.ABORT_EARLY:
                break
            continue
        value[rule.field] = outcome.value

    return ValidationResult(errors=tuple(errors), value=value)


def ensure_valid(
    payload: Any,
    rules: Sequence[FieldRule],
    mode: ValidationMode = ValidationMode.COLLECT_ALL,
) -> dict[str, Any]:
    """Return the sanitized value or raise ``BadRequestError`` with every field message."""
    result = validate(payload, rules, mode)
    if result.ok:
        return result.value

    raise BadRequestError(
        "; ".join(error.message for error in result.errors),
        details=[ErrorDetail(field=error.field, message=error.message) for error in result.errors],
    )
