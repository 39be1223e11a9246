from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import Question, UserQuestionBet
from betleague.shared.enums import AuditEventType, BetCategory

from ..contexts import QuestionOutcome, QuestionPrediction
from .base import BetAdapter


class QuestionAdapter(BetAdapter):
    category = BetCategory.QUESTION
    label = "question"
    audit_event = AuditEventType.QUESTION_EVALUATED
    cache_tag = "questions"
    instance_model = Question
    user_bet_model = UserQuestionBet

    @property
    def bet_fk(self):
        return UserQuestionBet.question_id

    async def load_outcome(self, session: AsyncSession, instance: Question) -> QuestionOutcome:
        return QuestionOutcome(result=instance.result)

    def prediction_of(self, user_bet: UserQuestionBet) -> QuestionPrediction:
        return QuestionPrediction(answer=user_bet.answer)
