"""Typed evaluator configurations, one model per evaluator kind.

The ``evaluator.config`` column stores camelCase JSON. Each kind parses it
into its own frozen model; a payload that does not fit is a malformed
configuration (``BAD_REQUEST``).
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .types import BadRequestError


class _EvaluatorConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


def _normalize_positions(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError("positions must be a list of strings")
    cleaned = [str(p).strip() for p in value]
    if any(not p for p in cleaned):
        raise ValueError("positions must not contain empty strings")
    if not cleaned:
        raise ValueError("positions must not be empty; omit it to allow every position")
    return frozenset(cleaned)


class PlayerFilterConfig(_EvaluatorConfig):
    """exact_player: optional restriction on the predicted player's position."""

    positions: Optional[FrozenSet[str]] = Field(
        default=None,
        description="Allowed positions; None allows every position.",
    )

    @field_validator("positions", mode="before")
    @classmethod
    def check_positions(cls, value: Any) -> Any:
        return _normalize_positions(value)


class ScorerConfig(_EvaluatorConfig):
    """scorer: rank-based points.

    ``rankedPoints`` maps a tier (as a string, e.g. ``"1"``) to points; a correct
    scorer whose tier is missing from the map, or who is unranked, earns
    ``unrankedPoints``.
    """

    ranked_points: Dict[str, int] = Field(alias="rankedPoints")
    unranked_points: int = Field(alias="unrankedPoints", ge=0)
    positions: Optional[FrozenSet[str]] = None

    @field_validator("ranked_points", mode="before")
    @classmethod
    def check_ranked_points(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("rankedPoints must be an object of tier -> points")
        out: Dict[str, int] = {}
        for tier, points in value.items():
            key = str(tier).strip()
            if not key.isdigit() or int(key) < 1:
                raise ValueError(f"rankedPoints tier {tier!r} is not a positive integer")
            if isinstance(points, bool) or not isinstance(points, int) or points < 0:
                raise ValueError(f"rankedPoints[{key}] must be a non-negative integer")
            out[str(int(key))] = points
        return out

    @field_validator("positions", mode="before")
    @classmethod
    def check_positions(cls, value: Any) -> Any:
        return _normalize_positions(value)

    def points_for_tier(self, tier: Optional[int]) -> int:
        if tier is not None and str(tier) in self.ranked_points:
            return self.ranked_points[str(tier)]
        return self.unranked_points


class GroupStageConfig(_EvaluatorConfig):
    """group_stage_team: points for the group winner vs. any other advancing team."""

    winner_points: int = Field(alias="winnerPoints", ge=0)
    advance_points: int = Field(alias="advancePoints", ge=0)


def parse_config(
    kind_name: str,
    model: Optional[Type[_EvaluatorConfig]],
    payload: Optional[Dict[str, Any]],
    *,
    required: bool = False,
) -> Optional[_EvaluatorConfig]:
    """Parse a raw config payload for ``kind_name``.

    Raises:
        BadRequestError: payload is missing when required, present for a kind
            that takes none, or does not validate.
    """
    if payload in (None, {}):
        if required:
            raise BadRequestError(f"Evaluator {kind_name} requires a configuration")
        return None
    if model is None:
        raise BadRequestError(f"Evaluator {kind_name} does not accept a configuration")
    if not isinstance(payload, dict):
        raise BadRequestError(f"Evaluator {kind_name} configuration must be an object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {"msg": str(exc)}
        raise BadRequestError(
            f"Invalid configuration for evaluator {kind_name}: {first.get('msg')}"
        ) from exc


__all__ = [
    "PlayerFilterConfig",
    "ScorerConfig",
    "GroupStageConfig",
    "parse_config",
]
