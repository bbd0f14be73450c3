"""Question type models for the risk questionnaire catalog.

Each question type maps to a specific UI component and answer handling logic:

    - integer: numeric input with inclusive min/max bounds (e.g. age)
    - single_choice: pick exactly one option from an ordered list

Any question may carry ``applies_when`` predicates; the question is only part
of the questionnaire when all of them hold for the answers given so far.
Scored questions additionally carry a ``weight`` and the ``risk_answer`` that
contributes it.

The discriminated ``Question`` union uses ``question_type`` as its discriminator.
The ``question_mapper`` dict maps type strings to their Pydantic classes.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Conditional logic models ---

class Predicate(BaseModel):
    """A single condition that references a prior answer.

    Operators:
      - eq, ne: equality / inequality
      - in, not_in: membership in a list of values
      - lt, le, gt, ge: numeric comparisons
      - between: value is [min, max] inclusive
    """

    model_config = ConfigDict(frozen=True)

    qid: str
    op: Literal["eq", "ne", "in", "not_in", "lt", "le", "gt", "ge", "between"]
    value: Any


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question types."""

    model_config = ConfigDict(frozen=True)

    qid: str
    question: str
    required: bool = True
    # AND-ed; an empty list means the question always applies
    applies_when: List[Predicate] = []
    weight: Optional[float] = Field(default=None, ge=0)

    @property
    def is_scored(self) -> bool:
        """True if this question contributes to the risk score."""
        return self.weight is not None

    @property
    def depends_on(self) -> set[str]:
        """Question ids referenced by this question's applicability predicates."""
        return {pred.qid for pred in self.applies_when}


# --- Concrete question types ---

class IntegerQuestion(BaseQuestion):
    """Whole-number input with inclusive bounds.  Never scored."""

    question_type: Literal["integer"] = "integer"
    min_value: int
    max_value: int

    @model_validator(mode="after")
    def _chk(self):
        if self.min_value > self.max_value:
            raise ValueError("min_value must be <= max_value")
        if self.weight is not None:
            raise ValueError(f"integer question {self.qid} cannot carry a weight")
        return self


class SingleChoiceQuestion(BaseQuestion):
    """Pick one option.  Scored when ``weight`` is set.

    ``risk_answer`` names the single option that counts as risk-positive and
    ``recommendation`` is the targeted advice emitted when it is chosen.
    """

    question_type: Literal["single_choice"] = "single_choice"
    options: List[str]
    risk_answer: Optional[str] = None
    recommendation: Optional[str] = None

    @model_validator(mode="after")
    def _chk(self):
        if not self.options:
            raise ValueError(f"question {self.qid} must define at least one option")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"question {self.qid} has duplicate options")
        if self.weight is not None:
            if self.risk_answer is None:
                raise ValueError(f"scored question {self.qid} must define risk_answer")
            if self.risk_answer not in self.options:
                raise ValueError(
                    f"risk_answer {self.risk_answer!r} of {self.qid} is not one of its options"
                )
        elif self.risk_answer is not None:
            raise ValueError(f"risk_answer set on non-scored question {self.qid}")
        return self


# --- Discriminated union of all question types ---

Question = Annotated[
    Union[IntegerQuestion, SingleChoiceQuestion],
    Field(discriminator="question_type"),
]

# Maps question_type string -> Pydantic class for dynamic deserialization from YAML.
question_mapper = {
    "integer": IntegerQuestion,
    "single_choice": SingleChoiceQuestion,
}
