"""Single-bet scoring functions (team, player and value predictions)."""

from __future__ import annotations

from typing import Optional

from ..configs import GroupStageConfig, PlayerFilterConfig
from ..contexts import Rule, ScoringContext, SingleOutcome, SinglePrediction


def score_exact_team(
    prediction: SinglePrediction, outcome: SingleOutcome, rule: Rule, context: ScoringContext
) -> int:
    if prediction.team_id is None or outcome.team_id is None:
        return 0
    return rule.points if prediction.team_id == outcome.team_id else 0


def score_exact_player(
    prediction: SinglePrediction, outcome: SingleOutcome, rule: Rule, context: ScoringContext
) -> int:
    """Exact player pick, optionally restricted to a set of positions.

    A pick whose player plays outside ``config.positions`` scores zero.
    """
    if prediction.player_id is None or outcome.player_id is None:
        return 0
    config: Optional[PlayerFilterConfig] = rule.config
    if config is not None and config.positions is not None:
        if context.position_of(prediction.player_id) not in config.positions:
            return 0
    return rule.points if prediction.player_id == outcome.player_id else 0


def score_exact_value(
    prediction: SinglePrediction, outcome: SingleOutcome, rule: Rule, context: ScoringContext
) -> int:
    if prediction.value is None or outcome.value is None:
        return 0
    return rule.points if prediction.value == outcome.value else 0


def score_closest_value(
    prediction: SinglePrediction, outcome: SingleOutcome, rule: Rule, context: ScoringContext
) -> int:
    """Full points for every prediction at the minimum distance to the outcome.

    ``context.values`` holds every submitted value for the bet, not just the
    ones being evaluated, so single-user runs compare against the whole field.
    """
    if prediction.value is None or outcome.value is None:
        return 0
    distance = abs(prediction.value - outcome.value)
    field_distances = [abs(v - outcome.value) for v in context.values]
    best = min(field_distances, default=distance)
    return rule.points if distance <= best else 0


def score_group_stage_team(
    prediction: SinglePrediction, outcome: SingleOutcome, rule: Rule, context: ScoringContext
) -> int:
    config: GroupStageConfig = rule.config
    if prediction.team_id is None:
        return 0
    if outcome.team_id is not None and prediction.team_id == outcome.team_id:
        return config.winner_points
    if prediction.team_id in outcome.advanced_team_ids:
        return config.advance_points
    return 0


__all__ = [
    "score_exact_team",
    "score_exact_player",
    "score_exact_value",
    "score_closest_value",
    "score_group_stage_team",
]
