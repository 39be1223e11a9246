from .base import BetAdapter
from .match import MatchAdapter
from .question import QuestionAdapter
from .series import SeriesAdapter
from .single import SingleBetAdapter

__all__ = [
    "BetAdapter",
    "MatchAdapter",
    "QuestionAdapter",
    "SeriesAdapter",
    "SingleBetAdapter",
]
