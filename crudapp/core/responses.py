"""Success and failure envelope construction and rendering."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crudapp.schemas.envelope import ErrorDetail
from crudapp.schemas.envelope import ResponseEnvelope


def success(
    message: str,
    metadata: Any = None,
    *,
    status_code: int = status.HTTP_200_OK,
) -> ResponseEnvelope:
    """Build a success envelope."""
    return ResponseEnvelope(status="success", code=status_code, message=message, metadata=metadata)


def ok(message: str, metadata: Any = None) -> ResponseEnvelope:
    return success(message, metadata, status_code=status.HTTP_200_OK)


def created(message: str, metadata: Any = None) -> ResponseEnvelope:
    return success(message, metadata, status_code=status.HTTP_201_CREATED)


def failure(
    status_code: int,
    message: str,
    errors: Sequence[ErrorDetail] | None = None,
) -> ResponseEnvelope:
    """Build a failure envelope; an empty error list is dropped."""
    return ResponseEnvelope(
        status="failed",
        code=status_code,
        message=message,
        errors=tuple(errors) if errors else None,
    )


def render(envelope: ResponseEnvelope) -> JSONResponse:
    """Serialize an envelope into a JSON response carrying its status code."""
    body = envelope.model_dump(mode="json", exclude={"metadata"}, exclude_none=True)
    if envelope.metadata is not None:
        body["metadata"] = jsonable_encoder(envelope.metadata)
    return JSONResponse(status_code=envelope.code, content=body)
