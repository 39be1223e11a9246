"""Shared fixtures: a throwaway SQLite database and a seeding helper."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import pytest
import pytest_asyncio
from sqlalchemy import select

from betleague.config import DatabaseSettings, Settings
from betleague.config.db_url import build_sqlite_url
from betleague.database.dbm import DBM
from betleague.database.init import initialize
from betleague.database.schema import (
    AppUser,
    Evaluator,
    EvaluatorType,
    League,
    LeagueUser,
    Match,
    MatchScorer,
    Player,
    Question,
    ScorerRankingVersion,
    Series,
    SingleBet,
    SingleBetAdvancedTeam,
    Team,
    UserMatchBet,
    UserQuestionBet,
    UserSeriesBet,
    UserSingleBet,
)

KICKOFF = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


class LeagueSeeder:
    """Inserts rows one short transaction at a time and returns primary keys."""

    def __init__(self, dbm: DBM):
        self.dbm = dbm

    async def _add(self, obj: Any) -> Any:
        async with self.dbm.session() as session:
            async with session.begin():
                session.add(obj)
                await session.flush()
        return obj

    async def get(self, model: Any, pk: int) -> Any:
        async with self.dbm.session() as session:
            return await session.get(model, pk)

    async def patch(self, model: Any, pk: int, **values: Any) -> None:
        async with self.dbm.session() as session:
            async with session.begin():
                row = await session.get(model, pk)
                for key, value in values.items():
                    setattr(row, key, value)

    async def soft_delete(self, model: Any, pk: int) -> None:
        await self.patch(model, pk, deleted_at=datetime.now(timezone.utc))

    async def league(self, name: str = "World Cup") -> int:
        return (await self._add(League(name=name))).league_id

    async def user(self, username: str, *, is_admin: bool = False) -> int:
        return (await self._add(AppUser(username=username, is_admin=is_admin))).user_id

    async def member(self, league_id: int, username: str, *, is_admin: bool = False) -> tuple[int, int]:
        """Create a user and enroll them; returns ``(user_id, league_user_id)``."""
        user_id = await self.user(username, is_admin=is_admin)
        membership = await self._add(LeagueUser(league_id=league_id, user_id=user_id))
        return user_id, membership.league_user_id

    async def team(self, league_id: int, name: str, group_name: Optional[str] = None) -> int:
        return (await self._add(Team(league_id=league_id, name=name, group_name=group_name))).team_id

    async def player(
        self,
        league_id: int,
        name: str,
        *,
        team_id: Optional[int] = None,
        position: Optional[str] = None,
    ) -> int:
        row = Player(league_id=league_id, name=name, team_id=team_id, position=position)
        return (await self._add(row)).player_id

    async def evaluator(
        self,
        league_id: int,
        kind: str,
        points: int,
        config: Optional[dict] = None,
    ) -> int:
        async with self.dbm.session() as session:
            type_id = (
                await session.execute(
                    select(EvaluatorType.evaluator_type_id).where(EvaluatorType.name == kind)
                )
            ).scalar_one()
        row = Evaluator(
            league_id=league_id,
            evaluator_type_id=type_id,
            name=kind,
            points=points,
            config=config,
        )
        return (await self._add(row)).evaluator_id

    async def ranking(
        self,
        league_id: int,
        player_id: int,
        ranking: int,
        effective_from: datetime,
        effective_to: Optional[datetime] = None,
    ) -> int:
        row = ScorerRankingVersion(
            league_id=league_id,
            player_id=player_id,
            ranking=ranking,
            effective_from=effective_from,
            effective_to=effective_to,
        )
        return (await self._add(row)).ranking_version_id

    async def match(
        self,
        league_id: int,
        home_team_id: int,
        away_team_id: int,
        *,
        scheduled_at: datetime = KICKOFF,
        **fields: Any,
    ) -> int:
        row = Match(
            league_id=league_id,
            home_team_id=home_team_id,
            away_team_id=away_team_id,
            scheduled_at=scheduled_at,
            **fields,
        )
        return (await self._add(row)).match_id

    async def match_scorer(self, match_id: int, player_id: int, goals: int = 1) -> int:
        row = MatchScorer(match_id=match_id, player_id=player_id, number_of_goals=goals)
        return (await self._add(row)).match_scorer_id

    async def match_bet(
        self,
        match_id: int,
        league_user_id: int,
        home_score: int,
        away_score: int,
        **fields: Any,
    ) -> int:
        row = UserMatchBet(
            match_id=match_id,
            league_user_id=league_user_id,
            home_score=home_score,
            away_score=away_score,
            **fields,
        )
        return (await self._add(row)).user_match_bet_id

    async def series(
        self,
        league_id: int,
        home_team_id: int,
        away_team_id: int,
        *,
        scheduled_at: datetime = KICKOFF,
        **fields: Any,
    ) -> int:
        row = Series(
            league_id=league_id,
            home_team_id=home_team_id,
            away_team_id=away_team_id,
            scheduled_at=scheduled_at,
            **fields,
        )
        return (await self._add(row)).series_id

    async def series_bet(
        self,
        series_id: int,
        league_user_id: int,
        home_team_score: Optional[int],
        away_team_score: Optional[int],
    ) -> int:
        row = UserSeriesBet(
            series_id=series_id,
            league_user_id=league_user_id,
            home_team_score=home_team_score,
            away_team_score=away_team_score,
        )
        return (await self._add(row)).user_series_bet_id

    async def single_bet(
        self,
        league_id: int,
        name: str = "Tournament winner",
        *,
        scheduled_at: datetime = KICKOFF,
        **fields: Any,
    ) -> int:
        row = SingleBet(league_id=league_id, name=name, scheduled_at=scheduled_at, **fields)
        return (await self._add(row)).single_bet_id

    async def advanced_team(self, single_bet_id: int, team_id: int) -> int:
        row = SingleBetAdvancedTeam(single_bet_id=single_bet_id, team_id=team_id)
        return (await self._add(row)).single_bet_advanced_team_id

    async def single_pick(self, single_bet_id: int, league_user_id: int, **fields: Any) -> int:
        row = UserSingleBet(single_bet_id=single_bet_id, league_user_id=league_user_id, **fields)
        return (await self._add(row)).user_single_bet_id

    async def question(self, league_id: int, prompt: str = "Will there be a red card?", **fields: Any) -> int:
        row = Question(league_id=league_id, prompt=prompt, scheduled_at=KICKOFF, **fields)
        return (await self._add(row)).question_id

    async def question_bet(self, question_id: int, league_user_id: int, answer: Optional[bool]) -> int:
        row = UserQuestionBet(question_id=question_id, league_user_id=league_user_id, answer=answer)
        return (await self._add(row)).user_question_bet_id


@pytest.fixture
def sqlite_settings(tmp_path) -> Settings:
    return Settings(database=DatabaseSettings(url=build_sqlite_url(tmp_path / "betleague.db")))


@pytest_asyncio.fixture
async def dbm(sqlite_settings):
    manager = DBM(sqlite_settings)
    await initialize(manager)
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def seed(dbm) -> LeagueSeeder:
    return LeagueSeeder(dbm)
