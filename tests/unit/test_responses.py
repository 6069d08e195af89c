"""Unit tests for response envelope construction and rendering."""

from __future__ import annotations

import json
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError
import pytest

from crudapp.core.responses import created
from crudapp.core.responses import failure
from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.schemas.envelope import ErrorDetail


class _Item(BaseModel):
    id: UUID
    note: str | None = None


def test_success_envelope_renders_status_code_and_metadata() -> None:
    item = _Item(id=UUID("00000000-0000-0000-0000-000000000001"))

    response = render(created("Create item successfully", item))

    assert response.status_code == 201
    assert json.loads(response.body) == {
        "status": "success",
        "code": 201,
        "message": "Create item successfully",
        "metadata": {"id": "00000000-0000-0000-0000-000000000001", "note": None},
    }


def test_metadata_is_omitted_when_absent() -> None:
    response = render(ok("Done"))

    assert json.loads(response.body) == {"status": "success", "code": 200, "message": "Done"}


def test_failure_envelope_carries_field_errors() -> None:
    envelope = failure(400, "Invalid email.", [ErrorDetail(field="email", message="Invalid email.")])

    response = render(envelope)

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "status": "failed",
        "code": 400,
        "message": "Invalid email.",
        "errors": [{"field": "email", "message": "Invalid email."}],
    }


def test_failure_without_errors_has_no_errors_key() -> None:
    assert "errors" not in json.loads(render(failure(404, "Post not found")).body)


def test_envelopes_are_immutable() -> None:
    envelope = ok("Done")

    with pytest.raises(ValidationError):
        envelope.message = "changed"
