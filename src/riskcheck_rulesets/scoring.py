"""ScoringEngine — turns a complete answer set into a score, band, and advice.

Algorithm:
    1. Validate the mandatory demographics (age within bounds, sex one of
       its options).  Nothing is scored if they are missing or invalid.
    2. Resolve the applicable questions from the complete answers.
    3. Sum the weight of every applicable scored question answered with its
       risk-positive option.  Demographic, non-scored and inapplicable
       questions contribute 0.
    4. Map the total to a band using ``MEDIUM_RISK_THRESHOLD`` and
       ``HIGH_RISK_THRESHOLD`` (see :func:`band_for_score`).
    5. Build recommendations: the urgent-action message first for High,
       then the band's general message, then one targeted message per
       risk factor that fired, in catalog order.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.constants import HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD
from riskcheck_rulesets.models.question import Question, SingleChoiceQuestion
from riskcheck_rulesets.models.result import AnswerContribution, EvaluationResult, RiskBand
from riskcheck_rulesets.resolver import BranchResolver

logger = logging.getLogger(__name__)


def band_for_score(
    score: float,
    *,
    medium_threshold: float = MEDIUM_RISK_THRESHOLD,
    high_threshold: float = HIGH_RISK_THRESHOLD,
) -> RiskBand:
    """Map a score to its risk band.

    Bands are evaluated low-to-high and are closed on the lower end of each
    higher band: a score equal to ``medium_threshold`` is Medium, a score
    equal to ``high_threshold`` is High.
    """
    if score >= high_threshold:
        return RiskBand.HIGH
    if score >= medium_threshold:
        return RiskBand.MEDIUM
    return RiskBand.LOW


def is_risk_positive(question: Question, answer: Any) -> bool:
    """True if ``answer`` is the scored risk-positive option of ``question``."""
    return (
        isinstance(question, SingleChoiceQuestion)
        and question.is_scored
        and answer == question.risk_answer
    )


class ScoringEngine:
    """Scores complete answer sets against a catalog.

    Args:
        catalog: a loaded :class:`QuestionCatalog`
        medium_threshold: lowest score that is Medium
        high_threshold: lowest score that is High
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        *,
        medium_threshold: float = MEDIUM_RISK_THRESHOLD,
        high_threshold: float = HIGH_RISK_THRESHOLD,
    ) -> None:
        if not 0 <= medium_threshold <= high_threshold:
            raise ValueError(
                f"Thresholds must satisfy 0 <= medium ({medium_threshold}) "
                f"<= high ({high_threshold})"
            )
        self._catalog = catalog
        self._resolver = BranchResolver(catalog)
        self.medium_threshold = medium_threshold
        self.high_threshold = high_threshold

    def evaluate(self, answers: Mapping[str, Any]) -> EvaluationResult:
        """Score a complete answer set.

        Raises:
            ValidationError: a mandatory demographic answer is missing or
                out of range, or an applicable required question is
                unanswered or has an invalid value.
        """
        sequence = self._resolver.check_complete(answers)

        score = 0.0
        fired: list[Question] = []
        for question in sequence:
            if is_risk_positive(question, answers.get(question.qid)):
                score += question.weight
                fired.append(question)

        band = self.band_for(score)
        result = EvaluationResult(
            score=score,
            risk_band=band,
            recommendations=tuple(self.recommendations_for(band, fired)),
            risk_factors=tuple(q.qid for q in fired),
            catalog_version=self._catalog.version,
        )
        logger.debug(
            "Evaluated answers: score=%s band=%s factors=%s",
            result.score, result.risk_band.value, result.risk_factors,
        )
        return result

    def band_for(self, score: float) -> RiskBand:
        """Band a score using this engine's thresholds."""
        return band_for_score(
            score,
            medium_threshold=self.medium_threshold,
            high_threshold=self.high_threshold,
        )

    def recommendations_for(self, band: RiskBand, fired: list[Question]) -> list[str]:
        """Build the ordered recommendation list for a band and its risk factors."""
        table = self._catalog.bands
        recommendations: list[str] = []
        if band is RiskBand.HIGH:
            recommendations.append(table.urgent_action)
        recommendations.append(table.get(band.value).recommendation)
        for question in fired:
            if getattr(question, "recommendation", None):
                recommendations.append(question.recommendation)
        return recommendations

    def contributions(self, answers: Mapping[str, Any]) -> list[AnswerContribution]:
        """Restate stored answers with question text and per-question score.

        One entry per answered question, catalog questions first (in catalog
        order), then any answer whose qid the current catalog no longer
        defines, shown under its bare qid with no contribution.  Questions
        that do not apply to these answers contribute 0.
        """
        applicable = {q.qid for q in self._resolver.applicable_questions(answers)}
        entries: list[AnswerContribution] = []
        for question in self._catalog.questions:
            if question.qid not in answers:
                continue
            answer = answers[question.qid]
            contribution = 0.0
            if question.qid in applicable and is_risk_positive(question, answer):
                contribution = float(question.weight)
            entries.append(
                AnswerContribution(
                    qid=question.qid,
                    question=question.question,
                    answer=answer,
                    contribution=contribution,
                )
            )
        for qid, answer in answers.items():
            if qid not in self._catalog:
                entries.append(
                    AnswerContribution(qid=qid, question=qid, answer=answer, contribution=0.0)
                )
        return entries
