"""Public model re-exports for riskcheck_rulesets.

Consumers should import from ``riskcheck_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from riskcheck_rulesets.models.question import (
    BaseQuestion,
    IntegerQuestion,
    Predicate,
    Question,
    SingleChoiceQuestion,
    question_mapper,
)

# --- Evaluation ---
from riskcheck_rulesets.models.result import (
    AnswerContribution,
    EvaluationResult,
    RiskBand,
)

# --- Schema / constants ---
from riskcheck_rulesets.models.schema import RiskBandConst, RiskBandTable

# --- Session / step ---
from riskcheck_rulesets.models.session import (
    AssessmentResult,
    QuestionPayload,
    QuestionnaireStep,
    SessionDetail,
    SessionSummary,
)

__all__ = [
    # Questions
    "BaseQuestion",
    "IntegerQuestion",
    "Predicate",
    "Question",
    "SingleChoiceQuestion",
    "question_mapper",
    # Evaluation
    "AnswerContribution",
    "EvaluationResult",
    "RiskBand",
    # Schema
    "RiskBandConst",
    "RiskBandTable",
    # Session
    "AssessmentResult",
    "QuestionPayload",
    "QuestionnaireStep",
    "SessionDetail",
    "SessionSummary",
]
