"""Evaluator catalog and resolver.

``EVALUATOR_KINDS`` is the static registry of evaluator kinds: which bet
category each kind targets, how its configuration is parsed and which scoring
function implements it. ``initialize()`` mirrors it into ``evaluator_type``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import Evaluator, EvaluatorType
from betleague.shared.enums import BetCategory, EvaluatorKindName

from . import scoring
from .configs import GroupStageConfig, PlayerFilterConfig, ScorerConfig, parse_config
from .contexts import Rule
from .types import BadRequestError

logger = logging.getLogger(__name__)

ScoreFn = Callable[[Any, Any, Rule, Any], int]


@dataclass(frozen=True)
class EvaluatorKind:
    name: str
    category: BetCategory
    score: ScoreFn
    config_model: Optional[Type[Any]] = None
    config_required: bool = False
    # closest_value compares against every submitted value
    needs_all_values: bool = False

    def build_rule(self, evaluator_id: int, points: int, payload: Optional[dict]) -> Rule:
        config = parse_config(
            self.name,
            self.config_model,
            payload,
            required=self.config_required,
        )
        return Rule(evaluator_id=evaluator_id, kind=self.name, points=points, config=config)


def _kind(name: EvaluatorKindName, category: BetCategory, score: ScoreFn, **kwargs: Any) -> EvaluatorKind:
    return EvaluatorKind(name=name.value, category=category, score=score, **kwargs)


EVALUATOR_KINDS: Dict[str, EvaluatorKind] = {
    k.name: k
    for k in (
        _kind(EvaluatorKindName.EXACT_SCORE, BetCategory.MATCH, scoring.score_exact_score),
        _kind(EvaluatorKindName.SCORE_DIFFERENCE, BetCategory.MATCH, scoring.score_score_difference),
        _kind(EvaluatorKindName.ONE_TEAM_SCORE, BetCategory.MATCH, scoring.score_one_team_score),
        _kind(EvaluatorKindName.WINNER, BetCategory.MATCH, scoring.score_winner),
        _kind(EvaluatorKindName.DRAW, BetCategory.MATCH, scoring.score_draw),
        _kind(
            EvaluatorKindName.SOCCER_PLAYOFF_ADVANCE,
            BetCategory.MATCH,
            scoring.score_soccer_playoff_advance,
        ),
        _kind(
            EvaluatorKindName.SCORER,
            BetCategory.MATCH,
            scoring.score_scorer,
            config_model=ScorerConfig,
        ),
        _kind(EvaluatorKindName.SERIES_EXACT, BetCategory.SERIES, scoring.score_series_exact),
        _kind(EvaluatorKindName.SERIES_WINNER, BetCategory.SERIES, scoring.score_series_winner),
        _kind(EvaluatorKindName.EXACT_TEAM, BetCategory.SINGLE_BET, scoring.score_exact_team),
        _kind(
            EvaluatorKindName.EXACT_PLAYER,
            BetCategory.SINGLE_BET,
            scoring.score_exact_player,
            config_model=PlayerFilterConfig,
        ),
        _kind(EvaluatorKindName.EXACT_VALUE, BetCategory.SINGLE_BET, scoring.score_exact_value),
        _kind(
            EvaluatorKindName.CLOSEST_VALUE,
            BetCategory.SINGLE_BET,
            scoring.score_closest_value,
            needs_all_values=True,
        ),
        _kind(
            EvaluatorKindName.GROUP_STAGE_TEAM,
            BetCategory.SINGLE_BET,
            scoring.score_group_stage_team,
            config_model=GroupStageConfig,
            config_required=True,
        ),
        _kind(EvaluatorKindName.QUESTION, BetCategory.QUESTION, scoring.score_question),
    )
}


def get_kind(name: str) -> Optional[EvaluatorKind]:
    return EVALUATOR_KINDS.get(name)


def kinds_for(category: BetCategory) -> List[EvaluatorKind]:
    return sorted(
        (k for k in EVALUATOR_KINDS.values() if k.category == category),
        key=lambda k: k.name,
    )


def needs_rankings(rules: List[Rule]) -> bool:
    """True when any rule is a rank-based scorer."""
    return any(r.kind == EvaluatorKindName.SCORER.value and r.config is not None for r in rules)


def needs_positions(rules: List[Rule]) -> bool:
    return any(getattr(r.config, "positions", None) is not None for r in rules)


def needs_all_values(rules: List[Rule]) -> bool:
    return any(EVALUATOR_KINDS[r.kind].needs_all_values for r in rules)


def _to_rule(evaluator: Evaluator, type_name: str) -> Optional[Rule]:
    kind = get_kind(type_name)
    if kind is None:
        logger.warning(
            {
                "evaluator_resolve": {
                    "event": "unknown_kind_skipped",
                    "evaluator_id": evaluator.evaluator_id,
                    "kind": type_name,
                }
            }
        )
        return None
    return kind.build_rule(evaluator.evaluator_id, evaluator.points, evaluator.config)


async def resolve_evaluators(
    session: AsyncSession,
    league_id: int,
    category: BetCategory,
) -> List[Rule]:
    """Return the league's live evaluators that apply to ``category``.

    Ordered by kind name then evaluator id so per-user breakdowns are stable.
    An empty list is valid and scores every prediction at zero.

    Raises:
        BadRequestError: an applicable evaluator carries a malformed config.
    """
    stmt = (
        select(Evaluator, EvaluatorType.name)
        .join(EvaluatorType, Evaluator.evaluator_type_id == EvaluatorType.evaluator_type_id)
        .where(
            Evaluator.league_id == league_id,
            Evaluator.deleted_at.is_(None),
            EvaluatorType.category == category,
        )
        .order_by(EvaluatorType.name, Evaluator.evaluator_id)
    )
    rows = (await session.execute(stmt)).all()
    rules: List[Rule] = []
    for evaluator, type_name in rows:
        rule = _to_rule(evaluator, type_name)
        if rule is not None:
            rules.append(rule)
    return rules


async def resolve_bound_evaluator(
    session: AsyncSession,
    evaluator_id: int,
    league_id: int,
    category: BetCategory,
) -> List[Rule]:
    """Resolve the single evaluator a bet instance is bound to.

    Raises:
        BadRequestError: the evaluator is deleted, belongs to another league,
            targets another category or has an unknown kind.
    """
    stmt = (
        select(Evaluator, EvaluatorType)
        .join(EvaluatorType, Evaluator.evaluator_type_id == EvaluatorType.evaluator_type_id)
        .where(Evaluator.evaluator_id == evaluator_id)
    )
    row = (await session.execute(stmt)).first()
    if row is None:
        raise BadRequestError(f"Evaluator {evaluator_id} does not exist")
    evaluator, evaluator_type = row
    if evaluator.deleted_at is not None or evaluator.league_id != league_id:
        raise BadRequestError(f"Evaluator {evaluator_id} is not available in this league")
    if evaluator_type.category != category:
        raise BadRequestError(
            f"Evaluator {evaluator_id} ({evaluator_type.name}) does not apply to {category.value} bets"
        )
    kind = get_kind(evaluator_type.name)
    if kind is None:
        raise BadRequestError(f"Unknown evaluator type: {evaluator_type.name}")
    return [kind.build_rule(evaluator.evaluator_id, evaluator.points, evaluator.config)]


__all__ = [
    "EvaluatorKind",
    "EVALUATOR_KINDS",
    "get_kind",
    "kinds_for",
    "needs_rankings",
    "needs_positions",
    "needs_all_values",
    "resolve_evaluators",
    "resolve_bound_evaluator",
]
