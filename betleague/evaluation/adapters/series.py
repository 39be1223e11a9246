from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import Series, UserSeriesBet
from betleague.shared.enums import AuditEventType, BetCategory

from ..contexts import SeriesOutcome, SeriesPrediction
from .base import BetAdapter


class SeriesAdapter(BetAdapter):
    category = BetCategory.SERIES
    label = "series"
    audit_event = AuditEventType.SERIES_EVALUATED
    cache_tag = "series"
    instance_model = Series
    user_bet_model = UserSeriesBet

    @property
    def bet_fk(self):
        return UserSeriesBet.series_id

    async def load_outcome(self, session: AsyncSession, instance: Series) -> SeriesOutcome:
        return SeriesOutcome(
            home_team_score=instance.home_team_score,
            away_team_score=instance.away_team_score,
        )

    def prediction_of(self, user_bet: UserSeriesBet) -> SeriesPrediction:
        return SeriesPrediction(
            home_team_score=user_bet.home_team_score,
            away_team_score=user_bet.away_team_score,
        )
