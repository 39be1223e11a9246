from __future__ import annotations

from ..contexts import Rule, ScoringContext, SeriesOutcome, SeriesPrediction


def _winner(home: int, away: int) -> str:
    if home > away:
        return "home"
    if away > home:
        return "away"
    return "draw"


def _complete(prediction: SeriesPrediction, outcome: SeriesOutcome) -> bool:
    return (
        outcome.has_result
        and prediction.home_team_score is not None
        and prediction.away_team_score is not None
    )


def is_series_exact(prediction: SeriesPrediction, outcome: SeriesOutcome) -> bool:
    if not _complete(prediction, outcome):
        return False
    return (
        prediction.home_team_score == outcome.home_team_score
        and prediction.away_team_score == outcome.away_team_score
    )


def score_series_exact(
    prediction: SeriesPrediction, outcome: SeriesOutcome, rule: Rule, context: ScoringContext
) -> int:
    return rule.points if is_series_exact(prediction, outcome) else 0


def score_series_winner(
    prediction: SeriesPrediction, outcome: SeriesOutcome, rule: Rule, context: ScoringContext
) -> int:
    # exact series result is paid by series_exact only
    if not _complete(prediction, outcome) or is_series_exact(prediction, outcome):
        return 0
    predicted = _winner(prediction.home_team_score, prediction.away_team_score)
    actual = _winner(outcome.home_team_score, outcome.away_team_score)
    return rule.points if predicted == actual else 0


__all__ = ["is_series_exact", "score_series_exact", "score_series_winner"]
