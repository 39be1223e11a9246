from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError


class EvaluateRequest(BaseModel):
    """Input of every evaluation action: a bet instance and an optional user scope."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    bet_instance_id: StrictInt = Field(alias="betInstanceId", gt=0)
    user_id: Optional[StrictInt] = Field(default=None, alias="userId", gt=0)


def describe_validation_error(exc: ValidationError) -> str:
    """First error as ``field: message`` for the failure response."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "input"
    return f"{location}: {first.get('msg', 'invalid value')}"


def parse_request(payload: Mapping[str, Any]) -> EvaluateRequest:
    return EvaluateRequest.model_validate(dict(payload))


__all__ = ["EvaluateRequest", "describe_validation_error", "parse_request"]
