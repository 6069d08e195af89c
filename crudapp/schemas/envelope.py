"""Response envelope schemas shared across API handlers."""

from __future__ import annotations

from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict

EnvelopeStatus = Literal["success", "failed"]


class ErrorDetail(BaseModel):
    """Single field-level validation or domain issue detail."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ResponseEnvelope(BaseModel):
    """Uniform body wrapped around every API response."""

    model_config = ConfigDict(frozen=True)

    status: EnvelopeStatus
    code: int
    message: str
    metadata: Any = None
    errors: tuple[ErrorDetail, ...] | None = None


class MessageResult(BaseModel):
    """Metadata carrying only a confirmation message."""

    message: str
