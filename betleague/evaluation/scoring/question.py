from __future__ import annotations

from ..contexts import QuestionOutcome, QuestionPrediction, Rule, ScoringContext


def score_question(
    prediction: QuestionPrediction, outcome: QuestionOutcome, rule: Rule, context: ScoringContext
) -> int:
    """Yes/no question: +points when right, -floor(points/2) when wrong, 0 when unanswered."""
    if prediction.answer is None or outcome.result is None:
        return 0
    if prediction.answer == outcome.result:
        return rule.points
    return -(rule.points // 2)


__all__ = ["score_question"]
