"""Match scoring functions.

Score-based kinds compare against regulation-time scores, except ``winner``
which uses final scores (falling back to regulation). Kinds that overlap are
mutually exclusive so a single prediction is never paid twice for the same
fact: an exact score blocks ``score_difference``, ``one_team_score`` and
``draw``; a matching difference blocks ``one_team_score``.
"""

from __future__ import annotations

from typing import Optional

from ..configs import ScorerConfig
from ..contexts import MatchOutcome, MatchPrediction, Rule, ScoringContext


def _side(home: int, away: int) -> str:
    if home > away:
        return "home"
    if away > home:
        return "away"
    return "draw"


def _award(matched: bool, rule: Rule) -> int:
    return rule.points if matched else 0


def is_exact_score(prediction: MatchPrediction, outcome: MatchOutcome) -> bool:
    if not outcome.has_result:
        return False
    return (
        prediction.home_score == outcome.home_regular_score
        and prediction.away_score == outcome.away_regular_score
    )


def is_score_difference(prediction: MatchPrediction, outcome: MatchOutcome) -> bool:
    if not outcome.has_result or is_exact_score(prediction, outcome):
        return False
    predicted = prediction.home_score - prediction.away_score
    actual = outcome.home_regular_score - outcome.away_regular_score
    return predicted == actual


def score_exact_score(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    return _award(is_exact_score(prediction, outcome), rule)


def score_score_difference(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    return _award(is_score_difference(prediction, outcome), rule)


def score_one_team_score(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    if not outcome.has_result:
        return 0
    if is_exact_score(prediction, outcome) or is_score_difference(prediction, outcome):
        return 0
    matched = (
        prediction.home_score == outcome.home_regular_score
        or prediction.away_score == outcome.away_regular_score
    )
    return _award(matched, rule)


def score_winner(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    home, away = outcome.final_home, outcome.final_away
    if home is None or away is None:
        return 0
    matched = _side(prediction.home_score, prediction.away_score) == _side(home, away)
    return _award(matched, rule)


def score_draw(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    if not outcome.has_result or is_exact_score(prediction, outcome):
        return 0
    matched = (
        prediction.home_score == prediction.away_score
        and outcome.home_regular_score == outcome.away_regular_score
    )
    return _award(matched, rule)


def score_soccer_playoff_advance(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    if not outcome.is_playoff_game:
        return 0
    if prediction.home_advanced is None or outcome.home_advanced is None:
        return 0
    return _award(prediction.home_advanced == outcome.home_advanced, rule)


def score_scorer(
    prediction: MatchPrediction, outcome: MatchOutcome, rule: Rule, context: ScoringContext
) -> int:
    """Scorer prediction, flat or rank-based.

    Without a config a correct pick earns ``rule.points``. With a
    ``ScorerConfig`` the pick earns the points of the scorer's tier as of the
    match's scheduled time (``context.rankings``), else ``unrankedPoints``.
    A correct "no scorer" pick earns ``unrankedPoints`` in ranked mode.
    """
    config: Optional[ScorerConfig] = rule.config

    if prediction.no_scorer:
        if outcome.scorer_ids:
            return 0
        return config.unranked_points if config is not None else rule.points

    if prediction.scorer_id is None:
        return 0

    if config is not None and config.positions is not None:
        if context.position_of(prediction.scorer_id) not in config.positions:
            return 0

    if prediction.scorer_id not in outcome.scorer_ids:
        return 0

    if config is None:
        return rule.points
    return config.points_for_tier(context.ranking_of(prediction.scorer_id))


__all__ = [
    "is_exact_score",
    "is_score_difference",
    "score_exact_score",
    "score_score_difference",
    "score_one_team_score",
    "score_winner",
    "score_draw",
    "score_soccer_playoff_advance",
    "score_scorer",
]
