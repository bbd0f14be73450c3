"""BranchResolver — decides which catalog questions apply to a respondent.

The resolver is a pure function of the answers collected so far.  Callers
re-resolve after every answer, because answering one question (e.g. sex)
can add or remove later questions from the sequence.  Nothing is cached
between calls and no step counter is kept.

A predicate that references a question which has not been answered yet
evaluates to False, so conditional questions only enter the sequence once
the answer they depend on exists.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.constants import MANDATORY_QIDS
from riskcheck_rulesets.errors import ValidationError
from riskcheck_rulesets.models.question import (
    IntegerQuestion,
    Predicate,
    Question,
    SingleChoiceQuestion,
)
from riskcheck_rulesets.models.session import QuestionPayload, QuestionnaireStep

logger = logging.getLogger(__name__)

# Bounded so int() never hits the interpreter's digit limit
_INTEGER_RE = re.compile(r"^[+-]?\d{1,9}$")


def coerce_integer(raw: Any) -> int | None:
    """Return ``raw`` as an int, or None if it is not a whole number.

    Accepts ints and decimal-digit strings (HTML forms post strings).
    Booleans and floats are rejected even when integral.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INTEGER_RE.match(raw.strip()):
        return int(raw.strip())
    return None


def question_to_payload(question: Question) -> QuestionPayload:
    """Convert a typed Question into the flat QuestionPayload for API output."""
    payload = QuestionPayload(
        qid=question.qid,
        question=question.question,
        question_type=question.question_type,
        required=question.required,
    )
    if isinstance(question, SingleChoiceQuestion):
        payload.options = list(question.options)
    elif isinstance(question, IntegerQuestion):
        payload.constraints = {"min": question.min_value, "max": question.max_value}
    return payload


class BranchResolver:
    """Resolves the applicable question sequence for a (partial) answer set.

    Args:
        catalog: a loaded :class:`QuestionCatalog`
    """

    def __init__(self, catalog: QuestionCatalog) -> None:
        self._catalog = catalog

    # ------------------------------------------------------------------
    # Applicability
    # ------------------------------------------------------------------

    def applicable_questions(self, answers: Mapping[str, Any]) -> list[Question]:
        """Catalog questions whose predicates hold for ``answers``, in catalog order."""
        return [q for q in self._catalog.questions if self.is_applicable(q, answers)]

    def is_applicable(self, question: Question, answers: Mapping[str, Any]) -> bool:
        """True if every ``applies_when`` predicate of ``question`` holds."""
        return all(self._eval_predicate(pred, answers) for pred in question.applies_when)

    def is_last(self, qid: str, answers: Mapping[str, Any]) -> bool:
        """True if ``qid`` is the final question of the resolved sequence.

        Compares against the resolved sequence, not the full catalog: for a
        female respondent the last question is the last female-applicable
        one, even though male-only questions follow it in the catalog.
        Returns False if ``qid`` is not currently applicable.
        """
        sequence = self.applicable_questions(answers)
        qids = [q.qid for q in sequence]
        if qid not in qids:
            return False
        return qids.index(qid) == len(qids) - 1

    def next_step(self, answers: Mapping[str, Any]) -> QuestionnaireStep:
        """Return the first applicable question that has not been answered.

        When every applicable question is answered the step is ``complete``
        and carries no question.  Answers for questions that are no longer
        applicable are ignored here; :meth:`check_submission` rejects them.
        """
        sequence = self.applicable_questions(answers)
        total = len(sequence)
        for index, question in enumerate(sequence):
            if question.qid not in answers:
                return QuestionnaireStep(
                    question=question_to_payload(question),
                    position=index + 1,
                    total=total,
                    is_last=index == total - 1,
                )
        return QuestionnaireStep(complete=True, position=total, total=total, is_last=True)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_answer(self, question: Question, raw: Any) -> None:
        """Raise ValidationError if ``raw`` is not a valid answer to ``question``."""
        if isinstance(question, IntegerQuestion):
            value = coerce_integer(raw)
            expected = f"integer between {question.min_value} and {question.max_value}"
            if value is None or not question.min_value <= value <= question.max_value:
                raise ValidationError(
                    question.qid, expected, f"{question.qid} must be an {expected}, got {raw!r}"
                )
        elif isinstance(question, SingleChoiceQuestion):
            if not isinstance(raw, str) or raw not in question.options:
                expected = "one of " + ", ".join(question.options)
                raise ValidationError(
                    question.qid, expected, f"{question.qid} must be {expected}, got {raw!r}"
                )

    def check_mandatory(self, answers: Mapping[str, Any]) -> None:
        """Validate the demographic answers every submission must carry."""
        for qid in MANDATORY_QIDS:
            if answers.get(qid) in (None, ""):
                raise ValidationError(qid, "required", f"{qid} is required")
            self.check_answer(self._catalog.get_question(qid), answers[qid])

    def check_complete(self, answers: Mapping[str, Any]) -> list[Question]:
        """Validate every applicable question and return the resolved sequence.

        Raises ValidationError for the first applicable required question
        left unanswered, or the first applicable answer with an invalid value.
        Answers to inapplicable questions are not inspected.
        """
        self.check_mandatory(answers)
        sequence = self.applicable_questions(answers)
        for question in sequence:
            raw = answers.get(question.qid)
            if raw in (None, ""):
                if question.required:
                    raise ValidationError(
                        question.qid, "required", f"{question.qid} is required"
                    )
                continue
            self.check_answer(question, raw)
        return sequence

    def check_submission(self, answers: Mapping[str, Any]) -> list[Question]:
        """Validate that ``answers`` covers exactly the applicable question set.

        On top of :meth:`check_complete`, rejects answers keyed by an unknown
        qid and answers for questions that the branch filtered out.
        """
        for qid in answers:
            if qid not in self._catalog:
                raise ValidationError(qid, "unknown question", f"Unknown question id: {qid}")

        sequence = self.check_complete(answers)
        applicable = {q.qid for q in sequence}
        for qid in answers:
            if qid not in applicable:
                raise ValidationError(
                    qid,
                    "not applicable",
                    f"{qid} does not apply to this respondent and must be omitted",
                )
        return sequence

    # ------------------------------------------------------------------
    # Predicate evaluation
    # ------------------------------------------------------------------

    def _eval_predicate(self, pred: Predicate, answers: Mapping[str, Any]) -> bool:
        """Evaluate a single predicate against the answers dict.

        If the referenced qid has not been answered yet, the predicate
        evaluates to False.
        """
        answer = answers.get(pred.qid)
        if answer is None:
            return False
        return self._compare(pred.op, answer, pred.value)

    @staticmethod
    def _compare(op: str, answer: Any, value: Any) -> bool:
        """Apply an operator to an answer and an expected value.

        Numeric operators coerce both sides to float (answers posted by
        forms may be strings); uncoercible answers make the predicate False.
        """
        if op == "eq":
            return answer == value

        if op == "ne":
            return answer != value

        if op == "in":
            return answer in value

        if op == "not_in":
            return answer not in value

        # --- Numeric comparisons ---
        if op in ("lt", "le", "gt", "ge", "between"):
            try:
                ans_num = float(answer)
            except (TypeError, ValueError):
                return False

            if op == "lt":
                return ans_num < float(value)
            if op == "le":
                return ans_num <= float(value)
            if op == "gt":
                return ans_num > float(value)
            if op == "ge":
                return ans_num >= float(value)
            if op == "between":
                lo, hi = float(value[0]), float(value[1])
                return lo <= ans_num <= hi

        logger.warning("Unknown predicate operator: %s", op)
        return False
