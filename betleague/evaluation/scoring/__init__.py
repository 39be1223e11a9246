from .match import (
    score_draw,
    score_exact_score,
    score_one_team_score,
    score_scorer,
    score_score_difference,
    score_soccer_playoff_advance,
    score_winner,
)
from .question import score_question
from .series import score_series_exact, score_series_winner
from .special import (
    score_closest_value,
    score_exact_player,
    score_exact_team,
    score_exact_value,
    score_group_stage_team,
)

__all__ = [
    "score_draw",
    "score_exact_score",
    "score_one_team_score",
    "score_scorer",
    "score_score_difference",
    "score_soccer_playoff_advance",
    "score_winner",
    "score_question",
    "score_series_exact",
    "score_series_winner",
    "score_closest_value",
    "score_exact_player",
    "score_exact_team",
    "score_exact_value",
    "score_group_stage_team",
]
