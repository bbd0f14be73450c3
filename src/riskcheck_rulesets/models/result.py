"""Evaluation value objects produced by the scoring engine.

An ``EvaluationResult`` is produced once per complete answer set and never
mutated; the models are frozen and use tuples for their sequences.
"""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class RiskBand(str, enum.Enum):
    """Discrete risk categories, ordered from least to most severe."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EvaluationResult(BaseModel):
    """Score, band, and advice for one complete answer set.

    ``risk_factors`` lists the qids whose risk-positive answer fired, in
    catalog order; ``recommendations`` is already in display order.
    """

    model_config = ConfigDict(frozen=True)

    score: float
    risk_band: RiskBand
    recommendations: tuple[str, ...]
    risk_factors: tuple[str, ...] = ()
    catalog_version: str | None = None


class AnswerContribution(BaseModel):
    """One answered question restated for display, with its score contribution."""

    model_config = ConfigDict(frozen=True)

    qid: str
    question: str
    answer: Any
    contribution: float
