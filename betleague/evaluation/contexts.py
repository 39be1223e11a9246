"""Inputs to the scoring functions.

Predictions and outcomes are plain frozen snapshots of database rows so that
scoring never touches a session. ``ScoringContext`` carries everything that
is fetched once per batch (rankings, positions, all submitted values).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Rule:
    """A resolved evaluator: catalog kind + league points + parsed config."""

    evaluator_id: int
    kind: str
    points: int
    config: Any = None


@dataclass(frozen=True)
class MatchPrediction:
    home_score: int
    away_score: int
    scorer_id: Optional[int] = None
    no_scorer: Optional[bool] = None
    overtime: bool = False
    home_advanced: Optional[bool] = None


@dataclass(frozen=True)
class MatchOutcome:
    home_regular_score: Optional[int]
    away_regular_score: Optional[int]
    home_final_score: Optional[int] = None
    away_final_score: Optional[int] = None
    scorer_ids: FrozenSet[int] = frozenset()
    is_overtime: Optional[bool] = None
    is_shootout: Optional[bool] = None
    is_playoff_game: bool = False
    home_advanced: Optional[bool] = None

    @property
    def has_result(self) -> bool:
        return self.home_regular_score is not None and self.away_regular_score is not None

    @property
    def final_home(self) -> Optional[int]:
        if self.home_final_score is not None:
            return self.home_final_score
        return self.home_regular_score

    @property
    def final_away(self) -> Optional[int]:
        if self.away_final_score is not None:
            return self.away_final_score
        return self.away_regular_score


@dataclass(frozen=True)
class SeriesPrediction:
    home_team_score: Optional[int]
    away_team_score: Optional[int]


@dataclass(frozen=True)
class SeriesOutcome:
    home_team_score: Optional[int]
    away_team_score: Optional[int]

    @property
    def has_result(self) -> bool:
        return self.home_team_score is not None and self.away_team_score is not None


@dataclass(frozen=True)
class SinglePrediction:
    team_id: Optional[int] = None
    player_id: Optional[int] = None
    value: Optional[int] = None


@dataclass(frozen=True)
class SingleOutcome:
    team_id: Optional[int] = None
    player_id: Optional[int] = None
    value: Optional[int] = None
    advanced_team_ids: FrozenSet[int] = frozenset()

    @property
    def has_result(self) -> bool:
        return self.team_id is not None or self.player_id is not None or self.value is not None


@dataclass(frozen=True)
class QuestionPrediction:
    answer: Optional[bool]


@dataclass(frozen=True)
class QuestionOutcome:
    result: Optional[bool]

    @property
    def has_result(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class ScoringContext:
    rankings: Mapping[int, int] = field(default_factory=dict)
    player_positions: Mapping[int, Optional[str]] = field(default_factory=dict)
    values: Tuple[int, ...] = ()

    def ranking_of(self, player_id: Optional[int]) -> Optional[int]:
        if player_id is None:
            return None
        return self.rankings.get(player_id)

    def position_of(self, player_id: Optional[int]) -> Optional[str]:
        if player_id is None:
            return None
        return self.player_positions.get(player_id)


__all__ = [
    "Rule",
    "MatchPrediction",
    "MatchOutcome",
    "SeriesPrediction",
    "SeriesOutcome",
    "SinglePrediction",
    "SingleOutcome",
    "QuestionPrediction",
    "QuestionOutcome",
    "ScoringContext",
]
