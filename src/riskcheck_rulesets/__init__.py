"""riskcheck_rulesets — risk stratification SDK.

Public API:
    QuestionCatalog   — loads the YAML question catalog into typed models
    BranchResolver    — resolves the applicable question sequence
    ScoringEngine     — scores a complete answer set into a band + advice
    band_for_score    — standalone banding policy
    IntakeController  — validates, scores, and records one submission

Result / step models:
    EvaluationResult  — score, band, recommendations (immutable)
    AssessmentResult  — externally visible submission result
    QuestionnaireStep — next question during the interactive flow
    SessionSummary    — history listing entry
    SessionDetail     — full session restated for display

Errors:
    ValidationError, NotFound, PersistenceError
"""

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.errors import NotFound, PersistenceError, ValidationError
from riskcheck_rulesets.intake import IntakeController
from riskcheck_rulesets.models.result import AnswerContribution, EvaluationResult, RiskBand
from riskcheck_rulesets.models.session import (
    AssessmentResult,
    QuestionPayload,
    QuestionnaireStep,
    SessionDetail,
    SessionSummary,
)
from riskcheck_rulesets.resolver import BranchResolver
from riskcheck_rulesets.scoring import ScoringEngine, band_for_score

__all__ = [
    # Catalog, resolver, engine
    "QuestionCatalog",
    "BranchResolver",
    "ScoringEngine",
    "band_for_score",
    "IntakeController",
    # Models
    "AnswerContribution",
    "AssessmentResult",
    "EvaluationResult",
    "QuestionPayload",
    "QuestionnaireStep",
    "RiskBand",
    "SessionDetail",
    "SessionSummary",
    # Errors
    "NotFound",
    "PersistenceError",
    "ValidationError",
]
